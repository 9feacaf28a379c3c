"""Tests for purchase history aggregation."""

import pytest

from cartrec.recommender.history import PurchaseRow, aggregate_purchase_history
from cartrec.recommender.vector_space import VectorSpace


@pytest.fixture
def vector_space() -> VectorSpace:
    """Fixture providing a space over three products."""
    return VectorSpace.build(["P1", "P2", "P3"])


def test_one_vector_per_customer(vector_space):
    """Test that rows are grouped into one profile per customer."""
    rows = [
        PurchaseRow("C1", "JP-13", "P1", 2),
        PurchaseRow("C2", "JP-01", "P2", 3),
        PurchaseRow("C1", "JP-13", "P3", 1),
    ]

    vectors = aggregate_purchase_history(rows, vector_space)

    assert list(vectors.keys()) == ["C1", "C2"]
    assert vectors["C1"].product_vector.tolist() == [2.0, 0.0, 1.0]
    assert vectors["C1"].region_vector.tolist() == [13.0]
    assert vectors["C2"].product_vector.tolist() == [0.0, 3.0, 0.0]
    assert vectors["C2"].region_vector.tolist() == [1.0]


def test_repeated_purchases_are_summed(vector_space):
    """Test that the same product across several orders accumulates."""
    rows = [
        PurchaseRow("C1", "JP-13", "P1", 2),
        PurchaseRow("C1", "JP-13", "P1", 1),
        PurchaseRow("C1", "JP-13", "P1", 4),
    ]

    vectors = aggregate_purchase_history(rows, vector_space)

    assert vectors["C1"].product_vector.tolist() == [7.0, 0.0, 0.0]


def test_customer_keeps_first_region(vector_space):
    """Test that a customer's region comes from their first row."""
    rows = [
        PurchaseRow("C1", "JP-27", "P1", 1),
        PurchaseRow("C1", "JP-13", "P2", 1),
    ]

    vectors = aggregate_purchase_history(rows, vector_space)

    assert vectors["C1"].region_vector.tolist() == [27.0]


def test_unknown_products_are_invisible(vector_space):
    """Test that purchases of inactive products do not reach the vector."""
    rows = [
        PurchaseRow("C1", "JP-13", "P1", 1),
        PurchaseRow("C1", "JP-13", "SUSPENDED", 9),
        PurchaseRow("C2", "JP-13", "GONE", 2),
    ]

    vectors = aggregate_purchase_history(rows, vector_space)

    assert vectors["C1"].product_vector.tolist() == [1.0, 0.0, 0.0]
    assert vectors["C2"].product_vector.tolist() == [0.0, 0.0, 0.0]


def test_empty_history(vector_space):
    """Test that no rows give no customers."""
    assert aggregate_purchase_history([], vector_space) == {}


def test_invalid_quantities_are_dropped(vector_space):
    """Test that negative or missing quantities are skipped."""
    rows = [
        PurchaseRow("C1", "JP-13", "P1", -1),
        PurchaseRow("C1", "JP-13", "P2", None),
        PurchaseRow("C2", "JP-13", "P3", 2),
    ]

    vectors = aggregate_purchase_history(rows, vector_space)

    assert list(vectors.keys()) == ["C2"]


def test_vectors_share_space_dimension(vector_space):
    """Test that every profile has the dimension of the space."""
    rows = [PurchaseRow(f"C{i}", "JP-13", f"P{i % 4}", 1) for i in range(10)]

    vectors = aggregate_purchase_history(rows, vector_space)

    assert all(v.dimension == vector_space.dimension for v in vectors.values())
