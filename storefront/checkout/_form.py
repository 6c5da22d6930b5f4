"""
Checkout form — required-field validation before anything hits the network.
"""

from __future__ import annotations

from dataclasses import dataclass

from kungfu import Result, Ok, Error

from storefront.checkout._types import (
    CheckoutError,
    CheckoutErrorKind,
    CustomerInfo,
    PaymentMethod,
)


@dataclass(frozen=True, slots=True)
class CheckoutForm:
    """Raw checkout form input. Card fields only matter for card payments."""

    customer_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    card_name: str = ""
    card_number: str = ""
    cvv: str = ""
    expiry_date: str = ""

    @classmethod
    def prefill(cls, name: str | None = None, email: str | None = None) -> CheckoutForm:
        """
        Start a form from the signed-in user.

        Example:
            CheckoutForm.prefill(email="sara@example.com").customer_name  # "sara"
        """
        email = email or ""
        customer_name = name or (email.split("@")[0] if email else "")
        return cls(customer_name=customer_name, email=email)


_REQUIRED: tuple[tuple[str, str], ...] = (
    ("customer_name", "Full name is required"),
    ("email", "Email is required"),
    ("phone", "Phone number is required"),
    ("address", "Address is required"),
    ("city", "City is required"),
)

_REQUIRED_CARD: tuple[tuple[str, str], ...] = (
    ("card_name", "Cardholder name is required"),
    ("card_number", "Card number is required"),
    ("cvv", "CVV is required"),
    ("expiry_date", "Expiry date is required"),
)


def validate_form(
    form: CheckoutForm,
    payment_method: PaymentMethod,
) -> Result[CustomerInfo, CheckoutError]:
    """
    Check required fields; on success build the CustomerInfo for the order.

    location is "<address>, <city>".
    """
    required = _REQUIRED + (_REQUIRED_CARD if payment_method is PaymentMethod.CARD else ())
    errors = {
        name: message
        for name, message in required
        if not getattr(form, name).strip()
    }
    if errors:
        return Error(CheckoutError(
            kind=CheckoutErrorKind.INVALID_FORM,
            message=f"{len(errors)} required field(s) missing",
            fields=errors,
        ))

    return Ok(CustomerInfo(
        name=form.customer_name.strip(),
        email=form.email.strip(),
        phone=form.phone.strip(),
        location=f"{form.address.strip()}, {form.city.strip()}",
    ))


__all__ = (
    "CheckoutForm",
    "validate_form",
)
