"""Suggestion pipeline.

Composes the vector space, vector builders, history aggregation and ranking
into one synchronous call over a snapshot of catalog and order history.
"""

import logging
import time
from typing import Iterable, List, Sequence

from cartrec.recommender.history import PurchaseRow, aggregate_purchase_history
from cartrec.recommender.ranking import (
    DEFAULT_RESULT_LIMIT,
    DEFAULT_TOP_K,
    Suggestion,
    rank_suggestions,
)
from cartrec.recommender.similarity import DEFAULT_REGION_WEIGHT
from cartrec.recommender.vector_space import VectorSpace
from cartrec.recommender.vectors import CartLine, create_order_vector

# Configure module logger
logger = logging.getLogger(__name__)


def suggest_products(
    active_product_ids: Sequence[str],
    purchase_rows: Iterable[PurchaseRow],
    region_code: str,
    cart_lines: Sequence[CartLine],
    region_weight: float = DEFAULT_REGION_WEIGHT,
    top_k: int = DEFAULT_TOP_K,
    result_limit: int = DEFAULT_RESULT_LIMIT,
    normalize_products: bool = False,
) -> List[Suggestion]:
    """Suggest products for a cart from a catalog and order history snapshot.

    Args:
        active_product_ids: Ids of non-suspended catalog items.
        purchase_rows: Completed order lines of past customers.
        region_code: Shipping region of the current shopper.
        cart_lines: Lines in the current cart.
        region_weight: Share of the similarity given to the region.
        top_k: Number of neighbors to draw suggestions from.
        result_limit: Maximum number of suggestions.
        normalize_products: Scale product vectors to unit length.

    Returns:
        Suggestions, best first.

    Example:
        >>> suggest_products(
        ...     ["P1", "P2"],
        ...     [PurchaseRow("C1", "JP-13", "P1", 1), PurchaseRow("C1", "JP-13", "P2", 1)],
        ...     "JP-13",
        ...     [CartLine("P1", 1)],
        ... )
        [Suggestion(product_id='P2', score=...)]
    """
    start_time = time.time()

    vector_space = VectorSpace.build(active_product_ids)
    current_vector = create_order_vector(
        region_code, cart_lines, vector_space, normalize=normalize_products
    )

    aggregate_start = time.time()
    historical_vectors = aggregate_purchase_history(
        purchase_rows, vector_space, normalize=normalize_products
    )
    aggregate_time = time.time() - aggregate_start

    scoring_start = time.time()
    suggestions = rank_suggestions(
        current_vector,
        cart_lines,
        historical_vectors,
        vector_space,
        region_weight=region_weight,
        top_k=top_k,
        result_limit=result_limit,
    )
    scoring_time = time.time() - scoring_start
    total_time = time.time() - start_time

    logger.info(
        "Suggestions generated",
        extra={
            "region_code": region_code,
            "num_cart_lines": len(cart_lines),
            "dimension": vector_space.dimension,
            "num_customers": len(historical_vectors),
            "num_suggestions": len(suggestions),
            "aggregate_time_ms": round(aggregate_time * 1000, 2),
            "scoring_time_ms": round(scoring_time * 1000, 2),
            "total_time_ms": round(total_time * 1000, 2),
        },
    )

    return suggestions
