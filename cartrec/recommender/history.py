"""Purchase history aggregation.

Reduces raw order line rows into one lifetime profile vector per past
customer.
"""

import logging
from typing import Dict, Iterable, NamedTuple

import pandas as pd

from cartrec.recommender.vector_space import VectorSpace
from cartrec.recommender.vectors import CartLine, OrderVector, create_order_vector

# Configure module logger
logger = logging.getLogger(__name__)


class PurchaseRow(NamedTuple):
    """One purchased line from a completed order."""

    customer_id: str
    region_code: str
    product_id: str
    quantity: int


PURCHASE_COLUMNS = list(PurchaseRow._fields)


def aggregate_purchase_history(
    rows: Iterable[PurchaseRow],
    vector_space: VectorSpace,
    normalize: bool = False,
) -> Dict[str, OrderVector]:
    """Build one OrderVector per customer from raw purchase rows.

    Quantities of the same product bought by the same customer across
    several orders are summed, unlike cart folding which overwrites. Each
    customer keeps the region code of their first row. Rows with a missing
    or negative quantity are dropped.

    The row set may be capped by the history reader; a partial or empty set
    is not an error.

    Args:
        rows: Purchase rows, in any order.
        vector_space: Layout for the product vectors.
        normalize: Passed through to products_to_vector().

    Returns:
        Dictionary mapping customer id to OrderVector, ordered by customer id.

    Example:
        >>> space = VectorSpace.build(["P1", "P2"])
        >>> vectors = aggregate_purchase_history(
        ...     [PurchaseRow("C1", "JP-13", "P1", 1), PurchaseRow("C1", "JP-13", "P1", 2)],
        ...     space,
        ... )
        >>> vectors["C1"].product_vector
        array([3., 0.])
    """
    df = pd.DataFrame.from_records(list(rows), columns=PURCHASE_COLUMNS)

    if df.empty:
        logger.info("No purchase history rows to aggregate")
        return {}

    df["quantity"] = pd.to_numeric(df["quantity"], errors="coerce")
    invalid = df["quantity"].isna() | (df["quantity"] < 0)
    if invalid.any():
        logger.debug(f"Dropping {int(invalid.sum())} rows with invalid quantity")
        df = df[~invalid]

    if df.empty:
        return {}

    df = df.assign(
        customer_id=df["customer_id"].astype(str),
        product_id=df["product_id"].astype(str),
        region_code=df["region_code"].fillna("").astype(str),
    )

    regions = df.groupby("customer_id", sort=True)["region_code"].first()
    totals = df.groupby(["customer_id", "product_id"], sort=True)["quantity"].sum()

    customer_vectors: Dict[str, OrderVector] = {}
    for customer_id, customer_totals in totals.groupby(level="customer_id", sort=True):
        lines = [
            CartLine(product_id=product_id, quantity=int(quantity))
            for product_id, quantity in customer_totals.droplevel("customer_id").items()
        ]
        customer_vectors[customer_id] = create_order_vector(
            regions[customer_id], lines, vector_space, normalize=normalize
        )

    logger.info(
        "Aggregated purchase history",
        extra={
            "num_rows": len(df),
            "num_customers": len(customer_vectors),
        },
    )

    return customer_vectors
