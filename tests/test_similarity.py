"""Tests for cosine and combined similarity scoring."""

import numpy as np
import pytest

from cartrec.recommender.similarity import (
    DEFAULT_REGION_WEIGHT,
    combined_similarity,
    combined_similarity_batch,
    cosine_similarity,
)
from cartrec.recommender.vectors import OrderVector


def make_vector(region: float, products) -> OrderVector:
    return OrderVector(region_vector=np.array([region]), product_vector=np.array(products, dtype=float))


@pytest.fixture
def random_vectors():
    """Fixture providing reproducible non-negative order vectors."""
    rng = np.random.default_rng(42)
    vectors = []
    for _ in range(20):
        products = rng.integers(0, 4, size=8) * (rng.random(8) < 0.4)
        region = float(rng.integers(0, 47))
        vectors.append(make_vector(region, products))
    return vectors


# ===== Cosine similarity =====


@pytest.mark.parametrize("v", [[1.0], [3.0, 4.0], [0.0, 2.0, 5.0, 1.0]])
def test_cosine_similarity_self_is_one(v):
    """Test that a nonzero vector is fully similar to itself."""
    assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_cosine_similarity_zero_vector():
    """Test that a zero vector is dissimilar to everything, itself included."""
    zero = [0.0, 0.0, 0.0]

    assert cosine_similarity(zero, [1.0, 2.0, 3.0]) == 0.0
    assert cosine_similarity([1.0, 2.0, 3.0], zero) == 0.0
    assert cosine_similarity(zero, zero) == 0.0


def test_cosine_similarity_length_mismatch():
    """Test that vectors of different lengths score 0 instead of raising."""
    assert cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0.0


def test_cosine_similarity_known_values():
    """Test orthogonal, parallel and opposite vectors."""
    assert cosine_similarity([1.0, 0.0], [0.0, 5.0]) == 0.0
    assert cosine_similarity([1.0, 2.0], [2.0, 4.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)


def test_cosine_similarity_is_symmetric(random_vectors):
    """Test that cosine(a, b) == cosine(b, a)."""
    for a in random_vectors:
        for b in random_vectors:
            assert cosine_similarity(a.product_vector, b.product_vector) == pytest.approx(
                cosine_similarity(b.product_vector, a.product_vector)
            )


# ===== Combined similarity =====


def test_combined_similarity_blends_with_region_weight():
    """Test the weighted blend of product and region similarity."""
    cart = make_vector(13.0, [1.0, 0.0, 0.0])
    same_basket = make_vector(13.0, [2.0, 0.0, 0.0])
    other_basket = make_vector(13.0, [0.0, 3.0, 0.0])
    unknown_region = make_vector(0.0, [2.0, 0.0, 0.0])

    assert combined_similarity(cart, same_basket) == pytest.approx(1.0)
    assert combined_similarity(cart, other_basket) == pytest.approx(DEFAULT_REGION_WEIGHT)
    assert combined_similarity(cart, unknown_region) == pytest.approx(1.0 - DEFAULT_REGION_WEIGHT)
    assert combined_similarity(cart, other_basket, region_weight=0.0) == 0.0
    assert combined_similarity(cart, other_basket, region_weight=1.0) == pytest.approx(1.0)


@pytest.mark.parametrize("weight", [0.0, 0.2, 0.5, 1.0])
def test_combined_similarity_is_symmetric(random_vectors, weight):
    """Test that combined similarity is symmetric for any weight."""
    for a in random_vectors:
        for b in random_vectors:
            assert combined_similarity(a, b, weight) == pytest.approx(combined_similarity(b, a, weight))


# ===== Batch similarity =====


def test_batch_matches_scalar(random_vectors):
    """Test that the batch form agrees with combined_similarity element-wise."""
    current = random_vectors[0]
    others = random_vectors[1:]

    batch = combined_similarity_batch(current, others, 0.3)
    expected = [combined_similarity(current, other, 0.3) for other in others]

    np.testing.assert_allclose(batch, expected, atol=1e-9)


def test_batch_empty_others():
    """Test that scoring against no vectors returns an empty array."""
    assert combined_similarity_batch(make_vector(13.0, [1.0]), []).shape == (0,)


def test_batch_zero_dimension():
    """Test that an empty catalog scores only on region."""
    current = make_vector(13.0, [])
    others = [make_vector(13.0, []), make_vector(0.0, [])]

    batch = combined_similarity_batch(current, others)

    np.testing.assert_allclose(batch, [DEFAULT_REGION_WEIGHT, 0.0])
    assert batch[0] == pytest.approx(combined_similarity(current, others[0]))


def test_batch_zero_and_mismatched_vectors():
    """Test zero product vectors and mismatched lengths score 0 on products."""
    current = make_vector(13.0, [1.0, 1.0])
    others = [make_vector(13.0, [0.0, 0.0]), make_vector(13.0, [1.0, 1.0, 1.0])]

    batch = combined_similarity_batch(current, others, 0.2)
    expected = [combined_similarity(current, other, 0.2) for other in others]

    np.testing.assert_allclose(batch, expected)
    np.testing.assert_allclose(batch, [0.2, 0.2])
