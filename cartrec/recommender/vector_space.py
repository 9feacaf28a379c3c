"""Product vector space.

Assigns every active catalog item a dense index so that all product vectors
built for one request share the same layout.
"""

import logging
from typing import Dict, Iterable, List, Optional

# Configure module logger
logger = logging.getLogger(__name__)


class VectorSpace:
    """Bidirectional mapping between product ids and vector indices.

    Indices are assigned in the order the ids are supplied and are only
    meaningful within a single instance. Two spaces built from different
    catalog snapshots must never be mixed.
    """

    def __init__(self, product_ids: Iterable[str]):
        """Initialize the space from an ordered collection of product ids.

        Args:
            product_ids: Active product ids. A repeated id keeps the index
                of its first occurrence.
        """
        self._product_id_to_idx: Dict[str, int] = {}
        self._idx_to_product_id: List[str] = []

        for product_id in product_ids:
            if product_id in self._product_id_to_idx:
                logger.debug(f"Ignoring duplicate product id {product_id!r}")
                continue
            self._product_id_to_idx[product_id] = len(self._idx_to_product_id)
            self._idx_to_product_id.append(product_id)

    @classmethod
    def build(cls, active_product_ids: Iterable[str]) -> "VectorSpace":
        """Build a vector space over the active catalog.

        Args:
            active_product_ids: Ids of non-suspended catalog items.

        Returns:
            A new VectorSpace whose dimension equals the number of distinct ids.
        """
        space = cls(active_product_ids)
        logger.debug(f"Built vector space with dimension {space.dimension}")
        return space

    @property
    def dimension(self) -> int:
        """Number of dimensions of every product vector in this space."""
        return len(self._idx_to_product_id)

    @property
    def product_ids(self) -> List[str]:
        """Product ids ordered by index."""
        return list(self._idx_to_product_id)

    def index_of(self, product_id: str) -> Optional[int]:
        """Return the index for a product id, or None if it is not active."""
        return self._product_id_to_idx.get(product_id)

    def id_of(self, index: int) -> Optional[str]:
        """Return the product id stored at an index, or None if out of range."""
        if 0 <= index < len(self._idx_to_product_id):
            return self._idx_to_product_id[index]
        return None

    def __len__(self) -> int:
        return self.dimension

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._product_id_to_idx

    def __repr__(self) -> str:
        return f"VectorSpace(dimension={self.dimension})"
