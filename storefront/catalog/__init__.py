"""
Catalog — product snapshots referenced by carts and orders.

    from storefront import catalog

    shirt = catalog.Product(
        id="p1",
        name="Linen Shirt",
        price=Decimal("20"),
        variants=(catalog.Variant("red", "red.jpg"),),
        sizes=("M", "L"),
    )
"""

from storefront.catalog._types import (
    Size,
    SIZES,
    Variant,
    Product,
)

__all__ = (
    "Size",
    "SIZES",
    "Variant",
    "Product",
)
