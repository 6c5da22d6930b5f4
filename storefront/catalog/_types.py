"""
Catalog types — products as the cart sees them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from storefront._types import Money


# ═══════════════════════════════════════════════════════════════════════════════
# Size — fixed grid
# ═══════════════════════════════════════════════════════════════════════════════


class Size(StrEnum):
    """Sizes a line item can carry, in display order."""

    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "2XL"
    XXXL = "3XL"


SIZES: tuple[str, ...] = tuple(s.value for s in Size)


# ═══════════════════════════════════════════════════════════════════════════════
# Product
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Variant:
    """Color/image combination of a product."""

    color: str
    image: str


@dataclass(frozen=True, slots=True)
class Product:
    """
    Product snapshot owned by the catalog.

    Note: The cart references products weakly: it copies what it needs
    at add time and never holds a live link.
    """

    id: str
    name: str
    price: Money
    variants: tuple[Variant, ...]
    sizes: tuple[str, ...] = ()

    def offers(self, size: str) -> bool:
        """Whether the product is stocked in this size."""
        return size in self.sizes


__all__ = (
    "Size",
    "SIZES",
    "Variant",
    "Product",
)
