"""Tests for the product vector space and vector builders."""

import numpy as np
import pytest

from cartrec.recommender.vector_space import VectorSpace
from cartrec.recommender.vectors import (
    REGION_CODE_MODULUS,
    CartLine,
    OrderVector,
    create_order_vector,
    products_to_vector,
    region_to_vector,
)


@pytest.fixture
def vector_space() -> VectorSpace:
    """Fixture providing a space over three products."""
    return VectorSpace.build(["P1", "P2", "P3"])


# ===== Vector space =====


def test_vector_space_assigns_indices_in_supply_order(vector_space):
    """Test that indices follow the order the ids were supplied in."""
    assert vector_space.dimension == 3
    assert vector_space.index_of("P1") == 0
    assert vector_space.index_of("P2") == 1
    assert vector_space.index_of("P3") == 2
    assert vector_space.product_ids == ["P1", "P2", "P3"]


def test_vector_space_round_trip(vector_space):
    """Test that id_of(index_of(id)) returns the id for every active product."""
    for product_id in ["P1", "P2", "P3"]:
        assert vector_space.id_of(vector_space.index_of(product_id)) == product_id


def test_vector_space_unknown_lookups(vector_space):
    """Test that unknown ids and out-of-range indices resolve to None."""
    assert vector_space.index_of("P999") is None
    assert vector_space.id_of(3) is None
    assert vector_space.id_of(-1) is None
    assert "P999" not in vector_space
    assert "P2" in vector_space


def test_vector_space_duplicate_ids_keep_first_index():
    """Test that a repeated id does not grow the dimension."""
    space = VectorSpace.build(["A", "B", "A", "C"])

    assert space.dimension == 3
    assert space.index_of("A") == 0
    assert space.index_of("C") == 2


def test_empty_vector_space():
    """Test that an empty catalog gives a zero-dimensional space."""
    space = VectorSpace.build([])

    assert space.dimension == 0
    assert len(space) == 0
    assert products_to_vector([CartLine("P1", 1)], space).shape == (0,)


# ===== Region vectors =====


@pytest.mark.parametrize(
    "region_code,expected",
    [
        ("JP-13", 13.0),
        ("JP-01", 1.0),
        ("JP-46", 46.0),
        ("JP-47", 47 % REGION_CODE_MODULUS),
    ],
)
def test_region_to_vector_valid_codes(region_code, expected):
    """Test that valid prefecture codes encode as number mod 47."""
    vector = region_to_vector(region_code)

    assert vector.shape == (1,)
    assert vector[0] == expected


@pytest.mark.parametrize("region_code", ["JP-99", "JP-00", "JP-48", "tokyo", "", "JP-1", "JP-013", "US-13"])
def test_region_to_vector_invalid_codes(region_code):
    """Test that malformed or out-of-range codes encode as zero."""
    assert region_to_vector(region_code).tolist() == [0.0]


# ===== Product vectors =====


def test_products_to_vector_sets_quantities(vector_space):
    """Test that each line sets its product's dimension to its quantity."""
    vector = products_to_vector([CartLine("P1", 2), CartLine("P3", 5)], vector_space)

    assert vector.tolist() == [2.0, 0.0, 5.0]


def test_products_to_vector_duplicate_lines_overwrite(vector_space):
    """Test that the last line for a product wins instead of summing."""
    vector = products_to_vector([CartLine("P2", 4), CartLine("P2", 1)], vector_space)

    assert vector.tolist() == [0.0, 1.0, 0.0]


def test_products_to_vector_ignores_unknown_products(vector_space):
    """Test that lines for products outside the space contribute nothing."""
    with_unknown = products_to_vector(
        [CartLine("P1", 1), CartLine("SUSPENDED", 7)], vector_space
    )
    without_unknown = products_to_vector([CartLine("P1", 1)], vector_space)

    np.testing.assert_array_equal(with_unknown, without_unknown)


@pytest.mark.parametrize(
    "lines",
    [
        [],
        [CartLine("P1", 1)],
        [CartLine("X", 1), CartLine("Y", 2)],
        [CartLine("P1", 1), CartLine("P2", 2), CartLine("P3", 3), CartLine("P4", 4)],
    ],
)
def test_products_to_vector_length_matches_dimension(vector_space, lines):
    """Test that the product vector always has the space's dimension."""
    assert products_to_vector(lines, vector_space).shape == (vector_space.dimension,)


def test_products_to_vector_normalize(vector_space):
    """Test that normalization scales to unit length and leaves zero vectors alone."""
    vector = products_to_vector([CartLine("P1", 3), CartLine("P2", 4)], vector_space, normalize=True)
    np.testing.assert_array_almost_equal(vector, [0.6, 0.8, 0.0])

    empty = products_to_vector([], vector_space, normalize=True)
    assert empty.tolist() == [0.0, 0.0, 0.0]


def test_create_order_vector(vector_space):
    """Test that the order vector combines region and product vectors."""
    order_vector = create_order_vector("JP-13", [CartLine("P2", 2)], vector_space)

    assert isinstance(order_vector, OrderVector)
    assert order_vector.region_vector.tolist() == [13.0]
    assert order_vector.product_vector.tolist() == [0.0, 2.0, 0.0]
    assert order_vector.dimension == 3


def test_order_vector_is_read_only(vector_space):
    """Test that order vectors cannot be modified once built."""
    order_vector = create_order_vector("JP-13", [CartLine("P2", 2)], vector_space)

    with pytest.raises(ValueError):
        order_vector.product_vector[0] = 1.0
    with pytest.raises(ValueError):
        order_vector.region_vector[0] = 1.0
