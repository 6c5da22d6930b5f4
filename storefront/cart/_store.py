"""
Remote cart store — typed storage protocol.

Rows are `{id, product_id, quantity}` keyed by user id, joined against the
current product snapshot on fetch. All methods return Result for explicit
error handling.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Protocol

from kungfu import Result, Ok

from storefront.catalog import Product
from storefront.cart._types import LineItem, StoreError


# ═══════════════════════════════════════════════════════════════════════════════
# Cart Row
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartRow:
    """
    A persisted cart row joined with its product.

    Note: product is None when the referenced product no longer exists.
    """

    id: str
    product_id: str
    quantity: int
    product: Product | None


# ═══════════════════════════════════════════════════════════════════════════════
# Store Protocol — Result-based
# ═══════════════════════════════════════════════════════════════════════════════


class CartStore(Protocol):
    """
    Remote cart store protocol.

    Example — HTTP-backed implementation:

        class ApiCartStore:
            async def fetch_rows(self, user_id: str) -> Result[list[CartRow], StoreError]:
                try:
                    rows = await self.client.get(f"/carts/{user_id}")
                    return Ok([to_row(r) for r in rows])
                except Exception as e:
                    return Error(StoreError("Failed to fetch", e))

            # ... other methods
    """

    async def fetch_rows(self, user_id: str) -> Result[list[CartRow], StoreError]:
        """All rows for the user, joined with current products."""
        ...

    async def delete_rows(self, user_id: str) -> Result[None, StoreError]:
        """Delete every row for the user."""
        ...

    async def insert_rows(
        self, user_id: str, items: Sequence[LineItem]
    ) -> Result[None, StoreError]:
        """Insert one row per item."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Function-based Store Builder
# ═══════════════════════════════════════════════════════════════════════════════

type FetchRowsFn = Callable[[str], Awaitable[Result[list[CartRow], StoreError]]]
type DeleteRowsFn = Callable[[str], Awaitable[Result[None, StoreError]]]
type InsertRowsFn = Callable[
    [str, Sequence[LineItem]], Awaitable[Result[None, StoreError]]
]


@dataclass(frozen=True)
class FunctionalCartStore:
    """
    Store built from functions.

    Example:
        store = cart_store_from(
            fetch_rows=repo.fetch_cart,
            delete_rows=repo.delete_cart,
            insert_rows=repo.insert_cart,
        )
    """

    _fetch_rows: FetchRowsFn
    _delete_rows: DeleteRowsFn
    _insert_rows: InsertRowsFn

    async def fetch_rows(self, user_id: str) -> Result[list[CartRow], StoreError]:
        return await self._fetch_rows(user_id)

    async def delete_rows(self, user_id: str) -> Result[None, StoreError]:
        return await self._delete_rows(user_id)

    async def insert_rows(
        self, user_id: str, items: Sequence[LineItem]
    ) -> Result[None, StoreError]:
        return await self._insert_rows(user_id, items)


def cart_store_from(
    fetch_rows: FetchRowsFn,
    delete_rows: DeleteRowsFn,
    insert_rows: InsertRowsFn,
) -> FunctionalCartStore:
    """Create CartStore from functions."""
    return FunctionalCartStore(
        _fetch_rows=fetch_rows,
        _delete_rows=delete_rows,
        _insert_rows=insert_rows,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Store — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class _StoredRow:
    id: str
    product_id: str
    quantity: int


class MemoryCartStore:
    """
    In-memory remote store with a product table for the join.

    Note: Only for single-instance use and tests.
    """

    def __init__(self, products: Sequence[Product] = ()) -> None:
        self._products: dict[str, Product] = {p.id: p for p in products}
        self._rows: dict[str, list[_StoredRow]] = {}
        self._lock = asyncio.Lock()

    def put_product(self, product: Product) -> None:
        self._products[product.id] = product

    def drop_product(self, product_id: str) -> None:
        self._products.pop(product_id, None)

    def row_count(self, user_id: str) -> int:
        return len(self._rows.get(user_id, []))

    async def fetch_rows(self, user_id: str) -> Result[list[CartRow], StoreError]:
        async with self._lock:
            return Ok([
                CartRow(
                    id=row.id,
                    product_id=row.product_id,
                    quantity=row.quantity,
                    product=self._products.get(row.product_id),
                )
                for row in self._rows.get(user_id, [])
            ])

    async def delete_rows(self, user_id: str) -> Result[None, StoreError]:
        async with self._lock:
            self._rows.pop(user_id, None)
            return Ok(None)

    async def insert_rows(
        self, user_id: str, items: Sequence[LineItem]
    ) -> Result[None, StoreError]:
        async with self._lock:
            rows = self._rows.setdefault(user_id, [])
            rows.extend(_StoredRow(i.id, i.product_id, i.quantity) for i in items)
            return Ok(None)


__all__ = (
    "CartRow",
    "CartStore",
    "FunctionalCartStore",
    "cart_store_from",
    "MemoryCartStore",
)
