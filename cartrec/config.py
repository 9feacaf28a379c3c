"""Runtime configuration for CartRec.

Settings are read from environment variables, optionally loaded from a
``.env`` file in the project root.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from cartrec.recommender.ranking import DEFAULT_RESULT_LIMIT, DEFAULT_TOP_K
from cartrec.recommender.similarity import DEFAULT_REGION_WEIGHT
from cartrec.recommender.sources import DEFAULT_HISTORY_ROW_LIMIT

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")

ENV_PREFIX = "CARTREC_"
DEFAULT_FETCH_TIMEOUT = 5.0


def _env(name: str, default: str) -> str:
    return os.getenv(ENV_PREFIX + name, default)


def _env_bool(name: str, default: bool) -> bool:
    return _env(name, str(default)).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Service settings.

    Attributes:
        catalog_path: CSV file with the product catalog.
        purchases_path: CSV file with past order lines.
        history_row_limit: Maximum number of history rows read per request.
        region_weight: Share of the similarity given to the region.
        top_neighbors: Number of neighbors suggestions are drawn from.
        result_limit: Maximum number of suggestions returned.
        normalize_products: Scale product vectors to unit length.
        fetch_timeout: Seconds allowed for each collaborator fetch.
        log_level: Root logging level.
        cors_origins: Origins allowed by the CORS middleware.
    """

    catalog_path: str = "data/catalog.csv"
    purchases_path: str = "data/purchases.csv"
    history_row_limit: int = DEFAULT_HISTORY_ROW_LIMIT
    region_weight: float = DEFAULT_REGION_WEIGHT
    top_neighbors: int = DEFAULT_TOP_K
    result_limit: int = DEFAULT_RESULT_LIMIT
    normalize_products: bool = False
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def load_settings() -> Settings:
    """Build settings from the current environment."""
    defaults = Settings()
    return Settings(
        catalog_path=_env("CATALOG_PATH", defaults.catalog_path),
        purchases_path=_env("PURCHASES_PATH", defaults.purchases_path),
        history_row_limit=int(_env("HISTORY_ROW_LIMIT", str(defaults.history_row_limit))),
        region_weight=float(_env("REGION_WEIGHT", str(defaults.region_weight))),
        top_neighbors=int(_env("TOP_NEIGHBORS", str(defaults.top_neighbors))),
        result_limit=int(_env("RESULT_LIMIT", str(defaults.result_limit))),
        normalize_products=_env_bool("NORMALIZE_PRODUCTS", defaults.normalize_products),
        fetch_timeout=float(_env("FETCH_TIMEOUT", str(defaults.fetch_timeout))),
        log_level=_env("LOG_LEVEL", defaults.log_level).upper(),
        cors_origins=[
            origin.strip()
            for origin in _env("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ],
    )
