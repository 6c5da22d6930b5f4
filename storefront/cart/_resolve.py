"""
Product reference resolver — (product, variant, size) → LineItem snapshot.

Pure functions, no I/O.
"""

from __future__ import annotations

from storefront._types import to_money
from storefront.catalog import Product, SIZES
from storefront.cart._types import LineItem


# ═══════════════════════════════════════════════════════════════════════════════
# Identity Derivation
# ═══════════════════════════════════════════════════════════════════════════════


def line_item_id(product_id: str, variant_index: int, size: str) -> str:
    """
    Derive the line item key.

    Example:
        line_item_id("p1", 0, "M")  # "p1-0-M"
    """
    return f"{product_id}-{variant_index}-{size}"


def parse_line_item_id(item_id: str, product_id: str) -> tuple[int, str] | None:
    """
    Recover (variant_index, size) from a line item key.

    Note: product ids may contain "-" (UUIDs), so the known product id is
    stripped as a prefix instead of splitting the whole key.
    Returns None when the key does not belong to product_id or is malformed.
    """
    prefix = f"{product_id}-"
    if not item_id.startswith(prefix):
        return None

    index_str, sep, size = item_id[len(prefix):].partition("-")
    if not sep or not size or not index_str.isdigit():
        return None
    return int(index_str), size


# ═══════════════════════════════════════════════════════════════════════════════
# resolve()
# ═══════════════════════════════════════════════════════════════════════════════


def resolve(
    product: Product,
    variant_index: int,
    size: str,
    quantity: int = 1,
) -> LineItem:
    """
    Snapshot a product variant/size into a LineItem.

    The size is checked against the global size grid only; whether this
    product is actually offered in that size is a UI concern.

    Raises:
        ValueError: no variants, bad variant index, unknown size,
            non-positive price or quantity < 1.
    """
    if not product.variants:
        raise ValueError(f"Product {product.id} has no variants")
    if not 0 <= variant_index < len(product.variants):
        raise ValueError(
            f"Variant index {variant_index} out of range for product {product.id} "
            f"({len(product.variants)} variants)"
        )
    if not size:
        raise ValueError("size must be non-empty")
    if size not in SIZES:
        raise ValueError(f"Unknown size {size!r}, expected one of {', '.join(SIZES)}")
    if quantity < 1:
        raise ValueError(f"quantity must be >= 1, got {quantity}")

    price = to_money(product.price)
    if price <= 0:
        raise ValueError(f"Product {product.id} has non-positive price {price}")

    return LineItem(
        id=line_item_id(product.id, variant_index, size),
        product_id=product.id,
        name=product.name,
        price=price,
        variant=product.variants[variant_index],
        variant_index=variant_index,
        size=size,
        quantity=quantity,
    )


__all__ = (
    "line_item_id",
    "parse_line_item_id",
    "resolve",
)
