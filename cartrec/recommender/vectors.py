"""Vector builders for carts and customer profiles.

Turns a shipping region code and a list of cart lines into the pair of
numeric vectors used for similarity scoring.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from cartrec.recommender.vector_space import VectorSpace

# Configure module logger
logger = logging.getLogger(__name__)

# Region codes look like "JP-13"; prefectures are numbered 1 to 47
REGION_CODE_PATTERN = re.compile(r"^JP-(\d{2})$")
REGION_CODE_MIN = 1
REGION_CODE_MAX = 47

# Region values are reduced modulo this constant, so JP-47 encodes as 0.0
REGION_CODE_MODULUS = 47


@dataclass(frozen=True)
class CartLine:
    """A single product line in a cart or a past order.

    Attributes:
        product_id: Catalog variant id.
        quantity: Number of units, never negative.
    """

    product_id: str
    quantity: int


@dataclass(frozen=True, eq=False)
class OrderVector:
    """Region and product vectors describing one cart or one customer.

    Both arrays are read-only once built.

    Attributes:
        region_vector: Single-valued region encoding.
        product_vector: Per-product quantities in the layout of a VectorSpace.
    """

    region_vector: np.ndarray
    product_vector: np.ndarray

    def __post_init__(self) -> None:
        for field_name in ("region_vector", "product_vector"):
            array = np.array(getattr(self, field_name), dtype=np.float64)
            array.setflags(write=False)
            object.__setattr__(self, field_name, array)

    @property
    def dimension(self) -> int:
        return int(self.product_vector.shape[0])


def region_to_vector(region_code: str) -> np.ndarray:
    """Encode a shipping region code as a one-element vector.

    Codes matching ``JP-NN`` with ``NN`` in ``[1, 47]`` encode as
    ``NN mod REGION_CODE_MODULUS``. Malformed or out-of-range codes encode as
    ``[0.0]``.

    Args:
        region_code: Region code such as "JP-13".

    Returns:
        Array of shape (1,).

    Example:
        >>> region_to_vector("JP-13")
        array([13.])
        >>> region_to_vector("tokyo")
        array([0.])
    """
    match = REGION_CODE_PATTERN.match(region_code or "")
    if match is None:
        logger.debug(f"Malformed region code {region_code!r}, encoding as 0")
        return np.zeros(1)

    value = int(match.group(1))
    if not REGION_CODE_MIN <= value <= REGION_CODE_MAX:
        logger.debug(f"Region code {region_code!r} out of range, encoding as 0")
        return np.zeros(1)

    return np.array([float(value % REGION_CODE_MODULUS)])


def products_to_vector(
    cart_lines: Iterable[CartLine],
    vector_space: VectorSpace,
    normalize: bool = False,
) -> np.ndarray:
    """Fold cart lines into a quantity vector.

    Each line whose product is in the vector space sets its dimension to the
    line's quantity. A later line for the same product overwrites an earlier
    one. Lines for unknown products are skipped.

    Args:
        cart_lines: Lines to fold.
        vector_space: Layout of the resulting vector.
        normalize: If True, scale the result to unit L2 norm. A zero vector
            is returned unchanged.

    Returns:
        Array of length ``vector_space.dimension``.
    """
    vector = np.zeros(vector_space.dimension)

    for line in cart_lines:
        index = vector_space.index_of(line.product_id)
        if index is None:
            continue
        vector[index] = float(line.quantity)

    if normalize:
        norm = np.linalg.norm(vector)
        if norm > 0.0:
            vector = vector / norm

    return vector


def create_order_vector(
    region_code: str,
    cart_lines: Sequence[CartLine],
    vector_space: VectorSpace,
    normalize: bool = False,
) -> OrderVector:
    """Build the region and product vectors for a cart."""
    return OrderVector(
        region_vector=region_to_vector(region_code),
        product_vector=products_to_vector(cart_lines, vector_space, normalize=normalize),
    )
