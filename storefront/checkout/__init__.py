"""
Checkout — totals, form validation, order building and submission.

    from storefront import checkout as K

    policy = K.CheckoutPolicy().with_free_shipping(threshold="300", fee="30")
    totals = K.compute_totals(carts.items, policy)

    service = K.CheckoutService(carts, K.SQLAlchemyOrderService(session_factory), policy)
    result = await service.checkout(service.current_cart(), form, K.PaymentMethod.CARD)

    # Buy now: does not touch the session cart
    result = await service.submit(K.buy_now(shirt, 0, "M"), customer, K.PaymentMethod.CASH)
"""

from storefront.checkout._policy import CheckoutPolicy, DEFAULT_POLICY
from storefront.checkout._types import (
    PersistedCart,
    EphemeralCart,
    CheckoutCart,
    PaymentMethod,
    CustomerInfo,
    OrderLine,
    OrderPayload,
    OrderStatus,
    Order,
    OrderErrorKind,
    OrderError,
    CheckoutErrorKind,
    CheckoutError,
)
from storefront.checkout._totals import (
    Priced,
    Totals,
    ZERO_TOTALS,
    compute_totals,
    amount_to_free_shipping,
)
from storefront.checkout._form import CheckoutForm, validate_form
from storefront.checkout._order import buy_now, to_order_line, build_order
from storefront.checkout._wire import (
    OrderLineModel,
    OrderPayloadModel,
    payload_to_wire,
    payload_from_wire,
)
from storefront.checkout._orders import OrderService, MemoryOrderService
from storefront.checkout._sqlalchemy import SQLAlchemyOrderService
from storefront.checkout._service import CheckoutService

__all__ = (
    # Policy
    "CheckoutPolicy",
    "DEFAULT_POLICY",
    # Types
    "PersistedCart",
    "EphemeralCart",
    "CheckoutCart",
    "PaymentMethod",
    "CustomerInfo",
    "OrderLine",
    "OrderPayload",
    "OrderStatus",
    "Order",
    "OrderErrorKind",
    "OrderError",
    "CheckoutErrorKind",
    "CheckoutError",
    # Totals
    "Priced",
    "Totals",
    "ZERO_TOTALS",
    "compute_totals",
    "amount_to_free_shipping",
    # Form
    "CheckoutForm",
    "validate_form",
    # Orders
    "buy_now",
    "to_order_line",
    "build_order",
    "OrderLineModel",
    "OrderPayloadModel",
    "payload_to_wire",
    "payload_from_wire",
    "OrderService",
    "MemoryOrderService",
    "SQLAlchemyOrderService",
    # Service
    "CheckoutService",
)
