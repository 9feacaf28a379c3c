"""Neighbor ranking and suggestion aggregation.

Scores the current cart against every past customer, keeps the closest
neighbors and accumulates the products they bought into ranked suggestions.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence

import numpy as np

from cartrec.recommender.similarity import DEFAULT_REGION_WEIGHT, combined_similarity_batch
from cartrec.recommender.vector_space import VectorSpace
from cartrec.recommender.vectors import CartLine, OrderVector

# Configure module logger
logger = logging.getLogger(__name__)

# Default ranking parameters
DEFAULT_TOP_K = 10
DEFAULT_RESULT_LIMIT = 5

# Decimal places scores are compared at when ranking
SCORE_DECIMALS = 12


def _score_key(score: float) -> float:
    return -round(score, SCORE_DECIMALS)


@dataclass(frozen=True)
class NeighborScore:
    """A past customer's vector paired with its similarity to the cart."""

    customer_id: str
    vector: OrderVector
    score: float


@dataclass(frozen=True)
class Suggestion:
    """A suggested product and its accumulated score."""

    product_id: str
    score: float


def rank_neighbors(
    current: OrderVector,
    historical_vectors: Mapping[str, OrderVector],
    region_weight: float = DEFAULT_REGION_WEIGHT,
    top_k: int = DEFAULT_TOP_K,
) -> List[NeighborScore]:
    """Select the past customers most similar to the current cart.

    Ties on score, compared at ``SCORE_DECIMALS`` decimals, are broken by
    customer id ascending.

    Args:
        current: Vector of the current cart.
        historical_vectors: Customer id to profile vector.
        region_weight: Share of the score given to region similarity.
        top_k: Maximum number of neighbors to return.

    Returns:
        At most ``top_k`` neighbors, best first.
    """
    if not historical_vectors or top_k <= 0:
        return []

    customer_ids = list(historical_vectors.keys())
    vectors = [historical_vectors[customer_id] for customer_id in customer_ids]
    scores = combined_similarity_batch(current, vectors, region_weight)

    neighbors = [
        NeighborScore(customer_id=customer_id, vector=vector, score=float(score))
        for customer_id, vector, score in zip(customer_ids, vectors, scores)
    ]
    neighbors.sort(key=lambda n: (_score_key(n.score), n.customer_id))

    return neighbors[:top_k]


def rank_suggestions(
    current_cart_vector: OrderVector,
    current_cart_lines: Sequence[CartLine],
    historical_vectors: Mapping[str, OrderVector],
    vector_space: VectorSpace,
    region_weight: float = DEFAULT_REGION_WEIGHT,
    top_k: int = DEFAULT_TOP_K,
    result_limit: int = DEFAULT_RESULT_LIMIT,
) -> List[Suggestion]:
    """Rank products bought by the nearest neighbors.

    Each neighbor adds ``neighbor.score * quantity`` to every product it
    bought that is not already in the cart. Products are ranked by total
    score, ties broken by product id ascending.

    Args:
        current_cart_vector: Vector of the current cart.
        current_cart_lines: Lines of the current cart, used for exclusion.
        historical_vectors: Customer id to profile vector.
        vector_space: Space the vectors were built in.
        region_weight: Share of the score given to region similarity.
        top_k: Number of neighbors to draw suggestions from.
        result_limit: Maximum number of suggestions returned.

    Returns:
        Suggestions, best first. Empty if there is no history.
    """
    neighbors = rank_neighbors(
        current_cart_vector, historical_vectors, region_weight=region_weight, top_k=top_k
    )
    if not neighbors:
        logger.debug("No neighbors selected, returning no suggestions")
        return []

    cart_product_ids = {line.product_id for line in current_cart_lines}
    product_scores: Dict[str, float] = {}

    for neighbor in neighbors:
        product_vector = neighbor.vector.product_vector
        for index in np.flatnonzero(product_vector > 0):
            product_id = vector_space.id_of(int(index))
            if product_id is None or product_id in cart_product_ids:
                continue
            product_scores[product_id] = (
                product_scores.get(product_id, 0.0)
                + neighbor.score * float(product_vector[index])
            )

    ranked = sorted(
        product_scores.items(),
        key=lambda item: (_score_key(item[1]), item[0]),
    )

    logger.debug(
        "Ranked suggestions",
        extra={
            "num_neighbors": len(neighbors),
            "num_candidates": len(ranked),
        },
    )

    return [
        Suggestion(product_id=product_id, score=score)
        for product_id, score in ranked[:max(result_limit, 0)]
    ]
