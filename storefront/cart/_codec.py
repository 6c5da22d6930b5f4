"""
Local cart codec — CartAggregate ⇄ JSON document.

Document shape:

    {"cartItems": [{"id": "p1-0-M", "productId": "p1", "name": "...",
                    "price": "20", "variant": {"color": "red", "image": "..."},
                    "variantIndex": 0, "size": "M", "quantity": 2}]}

Corrupt documents decode to an empty cart, never an exception.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from storefront.catalog import SIZES, Variant
from storefront.cart._types import LineItem
from storefront.cart._aggregate import CartAggregate
from storefront.cart._resolve import line_item_id, parse_line_item_id

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# Wire Models
# ═══════════════════════════════════════════════════════════════════════════════


class _Camel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoredVariant(_Camel):
    color: str
    image: str


class StoredLineItem(_Camel):
    id: str
    product_id: str
    name: str
    price: Decimal = Field(gt=0)
    variant: StoredVariant
    # Older documents only carry the id; the index is recovered from it
    variant_index: int | None = Field(default=None, ge=0)
    size: str
    quantity: int = Field(ge=1)
    color: str | None = None

    @classmethod
    def from_item(cls, item: LineItem) -> StoredLineItem:
        return cls(
            id=item.id,
            product_id=item.product_id,
            name=item.name,
            price=item.price,
            variant=StoredVariant(color=item.variant.color, image=item.variant.image),
            variant_index=item.variant_index,
            size=item.size,
            quantity=item.quantity,
            color=item.color,
        )

    def to_item(self) -> LineItem | None:
        """Domain item, or None if the entry cannot be trusted."""
        if self.size not in SIZES:
            return None

        variant_index = self.variant_index
        if variant_index is None:
            parsed = parse_line_item_id(self.id, self.product_id)
            if parsed is None:
                return None
            variant_index = parsed[0]

        if self.id != line_item_id(self.product_id, variant_index, self.size):
            return None

        return LineItem(
            id=self.id,
            product_id=self.product_id,
            name=self.name,
            price=self.price,
            variant=Variant(self.variant.color, self.variant.image),
            variant_index=variant_index,
            size=self.size,
            quantity=self.quantity,
            color=self.color,
        )


class StoredCart(_Camel):
    cart_items: list[StoredLineItem] = Field(default_factory=list)


# ═══════════════════════════════════════════════════════════════════════════════
# encode / decode
# ═══════════════════════════════════════════════════════════════════════════════


def encode_cart(cart: CartAggregate) -> str:
    doc = StoredCart(cart_items=[StoredLineItem.from_item(i) for i in cart.items])
    return doc.model_dump_json(by_alias=True)


def decode_cart(raw: str | None, *, key: str = "<unknown>") -> CartAggregate:
    """
    Parse a stored document.

    Absent or corrupt → empty cart. Individual untrustworthy entries are
    skipped; duplicate ids are merged so the uniqueness invariant holds.
    """
    if raw is None:
        return CartAggregate()

    try:
        doc = StoredCart.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("Discarding corrupt cart document %s: %d error(s)", key, e.error_count())
        return CartAggregate()

    cart = CartAggregate()
    for stored in doc.cart_items:
        item = stored.to_item()
        if item is None:
            logger.warning("Skipping unreadable cart entry %r in %s", stored.id, key)
            continue
        cart = cart.add_item(item)
    return cart


__all__ = (
    "StoredVariant",
    "StoredLineItem",
    "StoredCart",
    "encode_cart",
    "decode_cart",
)
