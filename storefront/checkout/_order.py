"""
Order builder — line items → OrderPayload.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from kungfu import Result, Ok, Error

from storefront.catalog import Product
from storefront.cart import LineItem, resolve
from storefront.checkout._policy import CheckoutPolicy, DEFAULT_POLICY
from storefront.checkout._totals import compute_totals
from storefront.checkout._types import (
    CheckoutError,
    CheckoutErrorKind,
    CustomerInfo,
    EphemeralCart,
    OrderLine,
    OrderPayload,
    PaymentMethod,
)


def buy_now(
    product: Product,
    variant_index: int,
    size: str,
    quantity: int = 1,
) -> EphemeralCart:
    """
    One-off cart for "buy now".

    The color is pinned on the item so the order line does not depend on
    the variant snapshot.
    """
    item = resolve(product, variant_index, size, quantity)
    return EphemeralCart(replace(item, color=item.variant.color))


def to_order_line(item: LineItem) -> OrderLine:
    return OrderLine(
        product_id=item.product_id,
        name=item.name,
        color=item.display_color,
        size=item.size,
        price=item.price,
        quantity=item.quantity,
    )


def build_order(
    items: Sequence[LineItem],
    customer: CustomerInfo,
    payment_method: PaymentMethod,
    policy: CheckoutPolicy = DEFAULT_POLICY,
) -> Result[OrderPayload, CheckoutError]:
    """
    Build the payload. total = subtotal * (1 + tax) + shipping(subtotal).

    Field-level customer validation happens in validate_form(); here only
    the item list is checked.
    """
    if not items:
        return Error(CheckoutError(
            kind=CheckoutErrorKind.EMPTY_CART,
            message="Order items are required",
        ))

    lines = tuple(to_order_line(item) for item in items)
    totals = compute_totals(lines, policy)

    return Ok(OrderPayload(
        customer_name=customer.name,
        email=customer.email,
        phone=customer.phone,
        location=customer.location,
        payment_method=payment_method,
        items=lines,
        total=totals.total,
    ))


__all__ = (
    "buy_now",
    "to_order_line",
    "build_order",
)
