"""CartRec: cart-based product suggestion service.

This package provides a backend service that looks at a shopper's current
cart, finds past customers with similar baskets and suggests products those
customers bought that are not in the cart yet.

Modules:
    api: FastAPI application and REST API endpoints
    recommender: Vector construction, similarity scoring and ranking
    config: Environment-driven settings
"""

__version__ = "0.1.0"
