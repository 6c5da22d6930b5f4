"""
Checkout types — carts at checkout, customer data, orders and errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, StrEnum, auto

from storefront._types import Money, ZERO
from storefront.cart import CartAggregate, CartIdentity, LineItem


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout Cart — Persisted | Ephemeral
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PersistedCart:
    """The session's real cart. Cleared after a successful order."""

    identity: CartIdentity
    cart: CartAggregate

    @property
    def items(self) -> tuple[LineItem, ...]:
        return self.cart.items


@dataclass(frozen=True, slots=True)
class EphemeralCart:
    """
    A buy-now cart: one ad-hoc item.

    Never persisted, never cleared. Checking it out leaves the real cart
    alone.
    """

    item: LineItem

    @property
    def items(self) -> tuple[LineItem, ...]:
        return (self.item,)


type CheckoutCart = PersistedCart | EphemeralCart


# ═══════════════════════════════════════════════════════════════════════════════
# Customer
# ═══════════════════════════════════════════════════════════════════════════════


class PaymentMethod(StrEnum):
    CASH = "cash"
    CARD = "card"


@dataclass(frozen=True, slots=True)
class CustomerInfo:
    """Validated customer data as it goes into an order."""

    name: str
    email: str
    phone: str = ""
    location: str = ""


# ═══════════════════════════════════════════════════════════════════════════════
# Order
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderLine:
    product_id: str
    name: str
    color: str
    size: str
    price: Money
    quantity: int

    @property
    def line_total(self) -> Money:
        return self.price * self.quantity


@dataclass(frozen=True, slots=True)
class OrderPayload:
    """
    What gets submitted to the order service.

    Note: total is computed client-side and trusted as submitted; the
    order service does not recompute it.
    """

    customer_name: str
    email: str
    phone: str
    location: str
    payment_method: PaymentMethod
    items: tuple[OrderLine, ...]
    total: Money

    @property
    def subtotal(self) -> Money:
        return sum((line.line_total for line in self.items), ZERO)

    def to_wire(self) -> dict[str, object]:
        """camelCase JSON-ready dict for the order API."""
        from storefront.checkout._wire import payload_to_wire

        return payload_to_wire(self)


class OrderStatus(StrEnum):
    PENDING = "pending"


@dataclass(frozen=True, slots=True)
class Order:
    id: str
    payload: OrderPayload
    status: OrderStatus
    created_at: datetime


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class OrderErrorKind(Enum):
    """Kinds of order service errors."""

    VALIDATION = auto()  # Service rejected the payload
    NOT_FOUND = auto()  # Unknown order id
    BACKEND = auto()  # Network / database failure


@dataclass(frozen=True, slots=True)
class OrderError:
    kind: OrderErrorKind
    message: str
    cause: Exception | None = None


class CheckoutErrorKind(Enum):
    """Kinds of checkout errors."""

    EMPTY_CART = auto()  # Nothing to order
    INVALID_FORM = auto()  # Missing required checkout fields
    SUBMISSION = auto()  # Order service failed; cart untouched


@dataclass(frozen=True, slots=True)
class CheckoutError:
    """
    Checkout error, ready for display.

    fields: per-field messages for INVALID_FORM (e.g. {"email": "Email is required"}).
    cause: the order service error for SUBMISSION.
    """

    kind: CheckoutErrorKind
    message: str
    fields: dict[str, str] = field(default_factory=dict)
    cause: OrderError | None = None


__all__ = (
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
)
