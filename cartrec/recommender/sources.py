"""Catalog and order-history collaborators.

The suggestion core never talks to storage directly. It receives the active
catalog ids and the purchase rows through the reader interfaces defined
here. CSV-backed readers serve the CLI and the default API setup; in-memory
readers are useful for tests and embedding.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List

import pandas as pd

from cartrec.recommender.history import PurchaseRow

# Configure module logger
logger = logging.getLogger(__name__)

# CSV column names
CATALOG_ID_COLUMN = "variant_id"
CATALOG_SUSPENDED_COLUMN = "is_suspension"
HISTORY_CUSTOMER_COLUMN = "customer_id"
HISTORY_REGION_COLUMN = "shipping_province_code"
HISTORY_PRODUCT_COLUMN = "variant_id"
HISTORY_QUANTITY_COLUMN = "quantity"
HISTORY_STATUS_COLUMN = "financial_status"

# Only paid orders count as purchase history
COMPLETED_ORDER_STATUSES = {"paid"}

# Cap on history rows read per request
DEFAULT_HISTORY_ROW_LIMIT = 1000

_TRUE_VALUES = {"1", "true", "t", "yes", "y"}


class CatalogReader(ABC):
    """Source of the active (non-suspended) catalog."""

    @abstractmethod
    def list_active_product_ids(self) -> List[str]:
        """Return ids of all active products."""
        ...


class OrderHistoryReader(ABC):
    """Source of completed-order purchase rows."""

    @abstractmethod
    def list_customer_purchase_rows(self) -> List[PurchaseRow]:
        """Return purchase rows of completed orders, possibly capped."""
        ...


class InMemoryCatalogReader(CatalogReader):
    """Catalog reader over a fixed list of ids."""

    def __init__(self, product_ids: Iterable[str]):
        self.product_ids = list(product_ids)

    def list_active_product_ids(self) -> List[str]:
        return list(self.product_ids)


class InMemoryOrderHistoryReader(OrderHistoryReader):
    """Order-history reader over a fixed list of rows."""

    def __init__(self, rows: Iterable[PurchaseRow]):
        self.rows = [PurchaseRow(*row) for row in rows]

    def list_customer_purchase_rows(self) -> List[PurchaseRow]:
        return list(self.rows)


def _read_csv(csv_path: Path, required_columns: set) -> pd.DataFrame:
    """Read a CSV file with every column as string and validate its header.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If required columns are missing.
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)

    if not required_columns.issubset(df.columns):
        missing = required_columns - set(df.columns)
        raise ValueError(f"CSV {csv_path} missing required columns: {missing}")

    return df


class CsvCatalogReader(CatalogReader):
    """Reads the catalog from a CSV file.

    Expects a ``variant_id`` column and an optional ``is_suspension`` column.
    Ids are returned sorted so that index assignment is the same on every
    call for an unchanged file.
    """

    def __init__(self, csv_path: str):
        self.csv_path = Path(csv_path)

    def list_active_product_ids(self) -> List[str]:
        df = _read_csv(self.csv_path, {CATALOG_ID_COLUMN})

        if CATALOG_SUSPENDED_COLUMN in df.columns:
            suspended = df[CATALOG_SUSPENDED_COLUMN].str.strip().str.lower().isin(_TRUE_VALUES)
            df = df[~suspended]

        product_ids = df[CATALOG_ID_COLUMN].str.strip()
        product_ids = sorted(set(product_ids[product_ids != ""]))

        logger.info(f"Loaded {len(product_ids)} active products from {self.csv_path}")
        return product_ids


class CsvOrderHistoryReader(OrderHistoryReader):
    """Reads purchase rows from a CSV file.

    Expects ``customer_id``, ``shipping_province_code``, ``variant_id`` and
    ``quantity`` columns. When a ``financial_status`` column is present only
    paid rows are kept. At most ``row_limit`` rows are returned.
    """

    def __init__(self, csv_path: str, row_limit: int = DEFAULT_HISTORY_ROW_LIMIT):
        self.csv_path = Path(csv_path)
        self.row_limit = row_limit

    def list_customer_purchase_rows(self) -> List[PurchaseRow]:
        df = _read_csv(
            self.csv_path,
            {
                HISTORY_CUSTOMER_COLUMN,
                HISTORY_REGION_COLUMN,
                HISTORY_PRODUCT_COLUMN,
                HISTORY_QUANTITY_COLUMN,
            },
        )

        if HISTORY_STATUS_COLUMN in df.columns:
            status = df[HISTORY_STATUS_COLUMN].str.strip().str.lower()
            df = df[status.isin(COMPLETED_ORDER_STATUSES)]

        quantities = pd.to_numeric(df[HISTORY_QUANTITY_COLUMN], errors="coerce")
        invalid = quantities.isna()
        if invalid.any():
            logger.warning(
                f"Skipping {int(invalid.sum())} rows with non-numeric quantity in {self.csv_path}"
            )
        df = df[~invalid]
        quantities = quantities[~invalid].astype(int)

        if self.row_limit is not None and len(df) > self.row_limit:
            logger.info(f"Capping purchase history at {self.row_limit} rows")
            df = df.head(self.row_limit)
            quantities = quantities.head(self.row_limit)

        rows = [
            PurchaseRow(
                customer_id=customer_id,
                region_code=region_code,
                product_id=product_id,
                quantity=int(quantity),
            )
            for customer_id, region_code, product_id, quantity in zip(
                df[HISTORY_CUSTOMER_COLUMN],
                df[HISTORY_REGION_COLUMN],
                df[HISTORY_PRODUCT_COLUMN],
                quantities,
            )
        ]

        logger.info(f"Loaded {len(rows)} purchase rows from {self.csv_path}")
        return rows
