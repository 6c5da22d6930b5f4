"""
Checkout service — validate, build, submit, clear.

    submit(cart, customer, method)
        │
        ▼
    build_order ── empty ──▶ Error(EMPTY_CART)      (no network call)
        │
        ▼
    OrderService.create_order ── fail ──▶ Error(SUBMISSION), cart untouched
        │
        ▼
    PersistedCart → CartService.clear()
    EphemeralCart → nothing
"""

from __future__ import annotations

import logging

from kungfu import Result, Ok, Error

from storefront.cart import CartService
from storefront.checkout._form import CheckoutForm, validate_form
from storefront.checkout._order import build_order
from storefront.checkout._orders import OrderService
from storefront.checkout._policy import CheckoutPolicy, DEFAULT_POLICY
from storefront.checkout._totals import Totals, compute_totals
from storefront.checkout._types import (
    CheckoutCart,
    CheckoutError,
    CheckoutErrorKind,
    CustomerInfo,
    EphemeralCart,
    Order,
    OrderError,
    OrderErrorKind,
    PaymentMethod,
    PersistedCart,
)

logger = logging.getLogger(__name__)


class CheckoutService:
    """
    Example:
        checkout = CheckoutService(carts, orders, CheckoutPolicy.from_env())

        result = await checkout.checkout(checkout.current_cart(), form, PaymentMethod.CASH)
        match result:
            case Ok(order):
                show_confirmation(order)
            case Error(e):
                show_error(e.message, e.fields)
    """

    def __init__(
        self,
        carts: CartService,
        orders: OrderService,
        policy: CheckoutPolicy = DEFAULT_POLICY,
    ) -> None:
        self._carts = carts
        self._orders = orders
        self._policy = policy

    @property
    def policy(self) -> CheckoutPolicy:
        return self._policy

    def current_cart(self) -> PersistedCart:
        """The session cart, tagged for checkout."""
        return PersistedCart(self._carts.identity, self._carts.cart)

    def totals(self, cart: CheckoutCart) -> Totals:
        return compute_totals(cart.items, self._policy)

    async def submit(
        self,
        cart: CheckoutCart,
        customer: CustomerInfo,
        payment_method: PaymentMethod,
    ) -> Result[Order, CheckoutError]:
        """
        Create the order. No automatic retry: on failure the caller shows
        the error and the user resubmits.
        """
        match build_order(cart.items, customer, payment_method, self._policy):
            case Error(e):
                return Error(e)
            case Ok(payload):
                pass

        try:
            result = await self._orders.create_order(payload)
        except Exception as e:
            logger.exception("Order service raised")
            result = Error(OrderError(OrderErrorKind.BACKEND, str(e) or type(e).__name__, e))

        match result:
            case Ok(order):
                logger.info("Order %s created (%d line(s), total %s)",
                            order.id, len(payload.items), payload.total)
                self._after_success(cart)
                return Ok(order)
            case Error(e):
                logger.warning("Order submission failed: %s", e.message)
                return Error(CheckoutError(
                    kind=CheckoutErrorKind.SUBMISSION,
                    message=e.message,
                    cause=e,
                ))

    async def checkout(
        self,
        cart: CheckoutCart,
        form: CheckoutForm,
        payment_method: PaymentMethod,
    ) -> Result[Order, CheckoutError]:
        """validate_form() then submit()."""
        match validate_form(form, payment_method):
            case Error(e):
                return Error(e)
            case Ok(customer):
                return await self.submit(cart, customer, payment_method)

    def _after_success(self, cart: CheckoutCart) -> None:
        match cart:
            case EphemeralCart():
                pass
            case PersistedCart(identity=identity):
                if identity != self._carts.identity:
                    # Identity switched while the order was in flight; that
                    # cart is no longer the session cart.
                    logger.warning("Not clearing cart for %s: session is now %s",
                                   identity, self._carts.identity)
                    return
                self._carts.clear()


__all__ = ("CheckoutService",)
