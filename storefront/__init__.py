"""
storefront — cart and checkout engine for an e-commerce client.

    from storefront import cart as C      # Cart aggregate + persistence
    from storefront import checkout as K  # Totals, orders, submission
    from storefront import catalog        # Product snapshots
"""

from storefront import catalog
from storefront import cart
from storefront import checkout
from storefront._db import create_database
from storefront._types import (
    Result,
    Ok,
    Error,
    Money,
    to_money,
)

__version__ = "0.1.0"

__all__ = (
    "catalog",
    "cart",
    "checkout",
    "create_database",
    "Result",
    "Ok",
    "Error",
    "Money",
    "to_money",
)
