"""
Core types for storefront.

Re-exports from kungfu + money helpers.
"""

from __future__ import annotations

from decimal import Decimal

# Re-export from kungfu
from kungfu import Result, Ok, Error

# ═══════════════════════════════════════════════════════════════════════════════
# Money
# ═══════════════════════════════════════════════════════════════════════════════

type Money = Decimal
"""Monetary amount. Never a float inside the library."""

ZERO = Decimal("0")


def to_money(value: Decimal | int | float | str) -> Money:
    """
    Coerce a catalog price into Decimal.

    Floats go through str() so 19.99 stays 19.99 instead of its binary
    expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    # Money
    "Money",
    "ZERO",
    "to_money",
)
