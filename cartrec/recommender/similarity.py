"""Similarity scoring between order vectors.

Cosine similarity on the product and region vectors, blended with a tunable
region weight. A batch form scores one cart against many customers at once.
"""

import logging
from typing import Sequence

import numpy as np
from scipy.sparse import csr_matrix
from sklearn.metrics.pairwise import cosine_similarity as pairwise_cosine_similarity

from cartrec.recommender.vectors import OrderVector

# Configure module logger
logger = logging.getLogger(__name__)

# Share of the combined score taken by region similarity
DEFAULT_REGION_WEIGHT = 0.2


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors.

    Returns 0.0 when the lengths differ or when either vector has zero
    magnitude, so a zero vector is dissimilar to everything including
    another zero vector.

    Args:
        a: First vector.
        b: Second vector.

    Returns:
        Similarity in [-1, 1].
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)

    if a.shape != b.shape:
        return 0.0

    magnitude_a = np.linalg.norm(a)
    magnitude_b = np.linalg.norm(b)
    if magnitude_a == 0.0 or magnitude_b == 0.0:
        return 0.0

    return float(np.dot(a, b) / (magnitude_a * magnitude_b))


def combined_similarity(
    v1: OrderVector,
    v2: OrderVector,
    region_weight: float = DEFAULT_REGION_WEIGHT,
) -> float:
    """Weighted blend of product and region cosine similarity.

    The weight is expected in [0, 1] and is not validated here.
    """
    product_similarity = cosine_similarity(v1.product_vector, v2.product_vector)
    region_similarity = cosine_similarity(v1.region_vector, v2.region_vector)
    return (1.0 - region_weight) * product_similarity + region_weight * region_similarity


def _cosine_against_rows(vector: np.ndarray, rows: Sequence[np.ndarray], sparse: bool) -> np.ndarray:
    """Cosine similarity of one vector against each row.

    Rows whose length differs from the vector score 0.0, matching
    cosine_similarity().
    """
    scores = np.zeros(len(rows))
    dimension = vector.shape[0]
    matching = [i for i, row in enumerate(rows) if row.shape[0] == dimension]

    # Nothing to compare on a zero-length axis
    if not matching or dimension == 0:
        return scores

    matrix = np.vstack([rows[i] for i in matching])
    if sparse:
        matrix = csr_matrix(matrix)

    scores[matching] = pairwise_cosine_similarity(vector.reshape(1, -1), matrix)[0]
    return scores


def combined_similarity_batch(
    current: OrderVector,
    others: Sequence[OrderVector],
    region_weight: float = DEFAULT_REGION_WEIGHT,
) -> np.ndarray:
    """Score one order vector against many at once.

    Equivalent to calling combined_similarity() for each element of
    ``others``. Product vectors are compared as a sparse matrix since a
    customer usually touches only a handful of the catalog.

    Args:
        current: Vector of the current cart.
        others: Historical customer vectors.
        region_weight: Share of the score given to region similarity.

    Returns:
        Array of scores aligned with ``others``.
    """
    if len(others) == 0:
        return np.zeros(0)

    product_scores = _cosine_against_rows(
        current.product_vector, [v.product_vector for v in others], sparse=True
    )
    region_scores = _cosine_against_rows(
        current.region_vector, [v.region_vector for v in others], sparse=False
    )

    return (1.0 - region_weight) * product_scores + region_weight * region_scores
