from decimal import Decimal

import pytest

from storefront.checkout import CheckoutPolicy, DEFAULT_POLICY

_VARS = (
    "STOREFRONT_TAX_RATE",
    "STOREFRONT_FREE_SHIPPING_THRESHOLD",
    "STOREFRONT_SHIPPING_FEE",
    "STOREFRONT_CURRENCY",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults() -> None:
    assert DEFAULT_POLICY.tax_rate == Decimal("0.08")
    assert DEFAULT_POLICY.free_shipping_threshold == Decimal("50")
    assert DEFAULT_POLICY.shipping_fee == Decimal("9.99")
    assert DEFAULT_POLICY.currency == "USD"


def test_builders_return_new_policy() -> None:
    policy = (
        DEFAULT_POLICY
        .with_tax_rate("0.2")
        .with_free_shipping(threshold="300")
        .with_currency("MAD")
    )

    assert policy == CheckoutPolicy(Decimal("0.2"), Decimal("300"), Decimal("9.99"), "MAD")
    assert DEFAULT_POLICY.tax_rate == Decimal("0.08")


def test_with_free_shipping_keeps_unspecified() -> None:
    policy = DEFAULT_POLICY.with_free_shipping(fee="4.50")

    assert policy.free_shipping_threshold == Decimal("50")
    assert policy.shipping_fee == Decimal("4.50")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"tax_rate": Decimal("-0.01")},
        {"free_shipping_threshold": Decimal("-1")},
        {"shipping_fee": Decimal("-9.99")},
    ],
)
def test_negative_values_rejected(kwargs: dict[str, Decimal]) -> None:
    with pytest.raises(ValueError):
        CheckoutPolicy(**kwargs)


def test_shipping_for() -> None:
    assert DEFAULT_POLICY.shipping_for(Decimal("50")) == Decimal("9.99")
    assert DEFAULT_POLICY.shipping_for(Decimal("50.01")) == 0


def test_from_env_defaults(clean_env: pytest.MonkeyPatch) -> None:
    assert CheckoutPolicy.from_env(dotenv=False) == DEFAULT_POLICY


def test_from_env_overrides(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("STOREFRONT_TAX_RATE", "0.05")
    clean_env.setenv("STOREFRONT_FREE_SHIPPING_THRESHOLD", "300")
    clean_env.setenv("STOREFRONT_SHIPPING_FEE", " 30 ")
    clean_env.setenv("STOREFRONT_CURRENCY", "MAD")

    policy = CheckoutPolicy.from_env(dotenv=False)

    assert policy == CheckoutPolicy(Decimal("0.05"), Decimal("300"), Decimal("30"), "MAD")


def test_from_env_custom_prefix(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("SHOP_TAX_RATE", "0.1")

    assert CheckoutPolicy.from_env("SHOP_", dotenv=False).tax_rate == Decimal("0.1")


def test_from_env_blank_keeps_default(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("STOREFRONT_SHIPPING_FEE", "")

    assert CheckoutPolicy.from_env(dotenv=False).shipping_fee == Decimal("9.99")


def test_from_env_invalid(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("STOREFRONT_TAX_RATE", "eight percent")

    with pytest.raises(ValueError, match="STOREFRONT_TAX_RATE"):
        CheckoutPolicy.from_env(dotenv=False)


def test_from_env_negative(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("STOREFRONT_SHIPPING_FEE", "-1")

    with pytest.raises(ValueError, match="shipping_fee"):
        CheckoutPolicy.from_env(dotenv=False)
