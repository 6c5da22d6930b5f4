"""
Checkout totals — subtotal, tax, shipping, total.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from storefront._types import Money, ZERO
from storefront.checkout._policy import CheckoutPolicy, DEFAULT_POLICY

_CENT = Decimal("0.01")


class Priced(Protocol):
    """Anything with a unit price and a quantity (cart items, order lines)."""

    @property
    def price(self) -> Money: ...

    @property
    def quantity(self) -> int: ...


@dataclass(frozen=True, slots=True)
class Totals:
    """
    Exact (unrounded) checkout amounts.

    Invariant: total == subtotal + tax + shipping.
    """

    subtotal: Money
    tax: Money
    shipping: Money
    total: Money

    @property
    def free_shipping(self) -> bool:
        return self.shipping == 0

    def rounded(self) -> Totals:
        """Cent-rounded copy for display."""
        return Totals(
            subtotal=_cents(self.subtotal),
            tax=_cents(self.tax),
            shipping=_cents(self.shipping),
            total=_cents(self.total),
        )


ZERO_TOTALS = Totals(ZERO, ZERO, ZERO, ZERO)


def _cents(amount: Money) -> Money:
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def compute_totals(items: Iterable[Priced], policy: CheckoutPolicy = DEFAULT_POLICY) -> Totals:
    """
    Example:
        compute_totals([item(price=20, qty=2), item(price=5, qty=1)])
        # Totals(subtotal=45, tax=3.60, shipping=9.99, total=58.59)

    No items → all zero (no shipping is charged on nothing).
    """
    items = tuple(items)
    if not items:
        return ZERO_TOTALS

    subtotal = sum((i.price * i.quantity for i in items), ZERO)
    tax = subtotal * policy.tax_rate
    shipping = policy.shipping_for(subtotal)
    return Totals(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=subtotal + tax + shipping,
    )


def amount_to_free_shipping(subtotal: Money, policy: CheckoutPolicy = DEFAULT_POLICY) -> Money:
    """
    How much more (to the cent) the customer must add for free shipping.

    Free shipping needs subtotal strictly above the threshold, hence the
    extra cent. 0 when shipping is already free.
    """
    if subtotal > policy.free_shipping_threshold:
        return ZERO
    return policy.free_shipping_threshold - subtotal + _CENT


__all__ = (
    "Priced",
    "Totals",
    "ZERO_TOTALS",
    "compute_totals",
    "amount_to_free_shipping",
)
