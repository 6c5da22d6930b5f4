"""
Cart aggregate — ordered, id-keyed line items.

Immutable: every operation returns a new CartAggregate.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from storefront._types import Money, ZERO
from storefront.catalog import Product
from storefront.cart._types import LineItem
from storefront.cart._resolve import resolve


@dataclass(frozen=True, slots=True)
class CartAggregate:
    """
    Line items in insertion (display) order, unique by id.

    Example:
        cart = CartAggregate().add(shirt, 0, "M").add(shirt, 0, "M", 2)
        cart.item_count()  # 3
        len(cart)          # 1
    """

    items: tuple[LineItem, ...] = ()

    # ─────────────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────────────

    def add(
        self,
        product: Product,
        variant_index: int,
        size: str,
        quantity: int = 1,
    ) -> CartAggregate:
        """Resolve and add; see add_item() for merge rules."""
        return self.add_item(resolve(product, variant_index, size, quantity))

    def add_item(self, item: LineItem) -> CartAggregate:
        """
        Add a resolved item.

        Note: On id collision only the quantity changes; the existing
        snapshot (price, name, variant) is kept.
        """
        if item.quantity < 1:
            raise ValueError(f"quantity must be >= 1, got {item.quantity}")

        if self.get(item.id) is None:
            return CartAggregate(self.items + (item,))

        return CartAggregate(tuple(
            existing.with_quantity(existing.quantity + item.quantity)
            if existing.id == item.id
            else existing
            for existing in self.items
        ))

    def remove(self, item_id: str) -> CartAggregate:
        """Drop the item. Unknown ids are a no-op."""
        if self.get(item_id) is None:
            return self
        return CartAggregate(tuple(i for i in self.items if i.id != item_id))

    def update_quantity(self, item_id: str, quantity: int) -> CartAggregate:
        """Set quantity (not additive). quantity <= 0 removes the item."""
        if quantity <= 0:
            return self.remove(item_id)
        if self.get(item_id) is None:
            return self
        return CartAggregate(tuple(
            i.with_quantity(quantity) if i.id == item_id else i
            for i in self.items
        ))

    def clear(self) -> CartAggregate:
        return CartAggregate()

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def get(self, item_id: str) -> LineItem | None:
        return next((i for i in self.items if i.id == item_id), None)

    def total(self) -> Money:
        """Sum of price * quantity; 0 for an empty cart."""
        return sum((i.line_total for i in self.items), ZERO)

    def item_count(self) -> int:
        """Sum of quantities; 0 for an empty cart."""
        return sum(i.quantity for i in self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[LineItem]:
        return iter(self.items)


EMPTY_CART = CartAggregate()


__all__ = ("CartAggregate", "EMPTY_CART")
