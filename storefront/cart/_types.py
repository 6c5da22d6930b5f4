"""
Cart types — line items, identities and persistence states.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto

from storefront._types import Money
from storefront.catalog import Variant


# ═══════════════════════════════════════════════════════════════════════════════
# Line Item
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class LineItem:
    """
    One cart entry.

    Note: price/name/variant are snapshots taken when the item was resolved.
    `id` is derived from (product_id, variant_index, size), so resolving the
    same triple twice always collides.

    color: Explicit color override (buy-now items carry one). Order lines
    fall back to variant.color when it is None.
    """

    id: str
    product_id: str
    name: str
    price: Money
    variant: Variant
    variant_index: int
    size: str
    quantity: int
    color: str | None = None

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity

    @property
    def display_color(self) -> str:
        return self.color if self.color is not None else self.variant.color

    def with_quantity(self, quantity: int) -> LineItem:
        return replace(self, quantity=quantity)


# ═══════════════════════════════════════════════════════════════════════════════
# Identity — persistence key
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartIdentity:
    """
    Who owns a cart: an authenticated user id, or the guest sentinel.

    Example:
        CartIdentity.user("42").storage_key   # "cart-42"
        GUEST.storage_key                     # "cart-guest"
    """

    user_id: str | None = None

    @classmethod
    def user(cls, user_id: str) -> CartIdentity:
        if not user_id:
            raise ValueError("user_id must be non-empty; use GUEST for anonymous carts")
        return cls(user_id)

    @classmethod
    def of(cls, user_id: str | None) -> CartIdentity:
        """Identity for an optional user id (None or "" means guest)."""
        return cls(user_id) if user_id else GUEST

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    @property
    def storage_key(self) -> str:
        return "cart-guest" if self.user_id is None else f"cart-{self.user_id}"

    def __str__(self) -> str:
        return "guest" if self.user_id is None else self.user_id


GUEST = CartIdentity()


# ═══════════════════════════════════════════════════════════════════════════════
# Lifecycle & Outcomes
# ═══════════════════════════════════════════════════════════════════════════════


class LoadState(Enum):
    """
    Cart load lifecycle of a CartService.

        UNLOADED → LOADING → LOADED
                      ↑         │
                      └─────────┘  (identity change)
    """

    UNLOADED = auto()
    LOADING = auto()
    LOADED = auto()


class SaveOutcome(Enum):
    """Where a save ended up."""

    LOCAL = auto()  # Guest or local-only adapter
    REMOTE = auto()  # Remote replace succeeded
    LOCAL_FALLBACK = auto()  # Remote failed, written locally
    FAILED = auto()  # Nothing could be written


# ═══════════════════════════════════════════════════════════════════════════════
# Store Error
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class StoreError:
    """Cart storage operation error."""

    message: str
    cause: Exception | None = None


__all__ = (
    "LineItem",
    "CartIdentity",
    "GUEST",
    "LoadState",
    "SaveOutcome",
    "StoreError",
)
