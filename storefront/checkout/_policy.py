"""
Checkout policy — pricing rules configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

from storefront._types import Money, ZERO


# ═══════════════════════════════════════════════════════════════════════════════
# Policy — Full Configuration
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CheckoutPolicy:
    """
    Tax and shipping rules.

    Fluent builder pattern — chain methods to configure.

    Example:
        policy = (
            CheckoutPolicy()
            .with_tax_rate("0.05")
            .with_free_shipping(threshold="300", fee="30")
            .with_currency("MAD")
        )

    Defaults: 8% tax, free shipping strictly above 50, otherwise 9.99.
    Note: Immutable, each method returns a new policy.
    """

    tax_rate: Decimal = Decimal("0.08")
    free_shipping_threshold: Decimal = Decimal("50")
    shipping_fee: Decimal = Decimal("9.99")
    currency: str = "USD"

    def __post_init__(self) -> None:
        if self.tax_rate < 0:
            raise ValueError(f"tax_rate must be >= 0, got {self.tax_rate}")
        if self.free_shipping_threshold < 0:
            raise ValueError(
                f"free_shipping_threshold must be >= 0, got {self.free_shipping_threshold}"
            )
        if self.shipping_fee < 0:
            raise ValueError(f"shipping_fee must be >= 0, got {self.shipping_fee}")

    # ─────────────────────────────────────────────────────────────────────────
    # Rules
    # ─────────────────────────────────────────────────────────────────────────

    def shipping_for(self, subtotal: Money) -> Money:
        """Free only when the subtotal is strictly above the threshold."""
        return ZERO if subtotal > self.free_shipping_threshold else self.shipping_fee

    # ─────────────────────────────────────────────────────────────────────────
    # Builders
    # ─────────────────────────────────────────────────────────────────────────

    def with_tax_rate(self, rate: Decimal | str) -> CheckoutPolicy:
        """
        Example:
            .with_tax_rate("0.05")  # 5%
        """
        return CheckoutPolicy(
            tax_rate=Decimal(rate),
            free_shipping_threshold=self.free_shipping_threshold,
            shipping_fee=self.shipping_fee,
            currency=self.currency,
        )

    def with_free_shipping(
        self,
        *,
        threshold: Decimal | str | None = None,
        fee: Decimal | str | None = None,
    ) -> CheckoutPolicy:
        """
        Example:
            .with_free_shipping(threshold="300", fee="30")
        """
        return CheckoutPolicy(
            tax_rate=self.tax_rate,
            free_shipping_threshold=(
                Decimal(threshold) if threshold is not None else self.free_shipping_threshold
            ),
            shipping_fee=Decimal(fee) if fee is not None else self.shipping_fee,
            currency=self.currency,
        )

    def with_currency(self, currency: str) -> CheckoutPolicy:
        return CheckoutPolicy(
            tax_rate=self.tax_rate,
            free_shipping_threshold=self.free_shipping_threshold,
            shipping_fee=self.shipping_fee,
            currency=currency,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Environment
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def from_env(cls, prefix: str = "STOREFRONT_", *, dotenv: bool = True) -> CheckoutPolicy:
        """
        Read overrides from the environment (and a .env file when dotenv=True).

        Variables: <prefix>TAX_RATE, <prefix>FREE_SHIPPING_THRESHOLD,
        <prefix>SHIPPING_FEE, <prefix>CURRENCY. Unset ones keep defaults.
        """
        if dotenv:
            load_dotenv()

        defaults = cls()
        return cls(
            tax_rate=_env_decimal(f"{prefix}TAX_RATE", defaults.tax_rate),
            free_shipping_threshold=_env_decimal(
                f"{prefix}FREE_SHIPPING_THRESHOLD", defaults.free_shipping_threshold
            ),
            shipping_fee=_env_decimal(f"{prefix}SHIPPING_FEE", defaults.shipping_fee),
            currency=os.getenv(f"{prefix}CURRENCY", defaults.currency),
        )


def _env_decimal(name: str, default: Decimal) -> Decimal:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return Decimal(raw.strip())
    except InvalidOperation:
        raise ValueError(f"{name}={raw!r} is not a decimal number") from None


DEFAULT_POLICY = CheckoutPolicy()


__all__ = (
    "CheckoutPolicy",
    "DEFAULT_POLICY",
)
