import pytest

from kungfu import Ok, Error

from storefront.checkout import (
    CheckoutErrorKind,
    CheckoutForm,
    PaymentMethod,
    validate_form,
)

FILLED = CheckoutForm(
    customer_name="Sara Ali",
    email="sara@example.com",
    phone="0612345678",
    address="12 Main St",
    city="Springfield",
)


def test_empty_cash_form() -> None:
    match validate_form(CheckoutForm(), PaymentMethod.CASH):
        case Ok(customer):
            pytest.fail(f"Expected Error, got Ok: {customer}")
        case Error(e):
            assert e.kind is CheckoutErrorKind.INVALID_FORM
            assert e.message == "5 required field(s) missing"
            assert e.fields == {
                "customer_name": "Full name is required",
                "email": "Email is required",
                "phone": "Phone number is required",
                "address": "Address is required",
                "city": "City is required",
            }


def test_card_requires_card_fields() -> None:
    match validate_form(FILLED, PaymentMethod.CARD):
        case Ok(customer):
            pytest.fail(f"Expected Error, got Ok: {customer}")
        case Error(e):
            assert set(e.fields) == {"card_name", "card_number", "cvv", "expiry_date"}
            assert e.fields["cvv"] == "CVV is required"


def test_whitespace_counts_as_missing() -> None:
    form = CheckoutForm(
        customer_name="   ",
        email="sara@example.com",
        phone="0612345678",
        address="12 Main St",
        city="Springfield",
    )

    match validate_form(form, PaymentMethod.CASH):
        case Ok(customer):
            pytest.fail(f"Expected Error, got Ok: {customer}")
        case Error(e):
            assert list(e.fields) == ["customer_name"]


def test_valid_cash_form() -> None:
    match validate_form(FILLED, PaymentMethod.CASH):
        case Ok(customer):
            assert customer.name == "Sara Ali"
            assert customer.email == "sara@example.com"
            assert customer.phone == "0612345678"
            assert customer.location == "12 Main St, Springfield"
        case Error(e):
            pytest.fail(f"Expected Ok, got Error: {e}")


def test_valid_card_form() -> None:
    form = CheckoutForm(
        customer_name="Sara Ali",
        email="sara@example.com",
        phone="0612345678",
        address="12 Main St",
        city="Springfield",
        card_name="S ALI",
        card_number="4242424242424242",
        cvv="123",
        expiry_date="12/29",
    )

    match validate_form(form, PaymentMethod.CARD):
        case Ok(customer):
            assert customer.name == "Sara Ali"
        case Error(e):
            pytest.fail(f"Expected Ok, got Error: {e}")


def test_prefill() -> None:
    assert CheckoutForm.prefill(email="sara@example.com").customer_name == "sara"
    assert CheckoutForm.prefill("Sara Ali", "sara@example.com").customer_name == "Sara Ali"
    assert CheckoutForm.prefill() == CheckoutForm()
