"""
SQLAlchemy integration — remote cart store over the cart_items table.

Usage:

    session_factory, engine = await create_database("postgresql+asyncpg://...")
    store = SQLAlchemyCartStore(session_factory)
    persistence = CartPersistence(local=FileLocalStorage(path), remote=store)
"""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kungfu import Result, Ok, Error

from storefront._db import CartItemTable, ProductTable
from storefront.catalog import Product
from storefront.cart._types import LineItem, StoreError
from storefront.cart._store import CartRow


class SQLAlchemyCartStore:
    """
    CartStore backed by SQLAlchemy.

    Note: fetch_rows LEFT JOINs products so rows pointing at deleted products
    come back with product=None instead of disappearing silently.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def fetch_rows(self, user_id: str) -> Result[list[CartRow], StoreError]:
        try:
            async with self._session_factory() as session:
                stmt = (
                    select(CartItemTable, ProductTable)
                    .outerjoin(ProductTable, CartItemTable.product_id == ProductTable.id)
                    .where(CartItemTable.user_id == user_id)
                    .order_by(CartItemTable.position)
                )
                result = await session.execute(stmt)
                return Ok([
                    CartRow(
                        id=row.id,
                        product_id=row.product_id,
                        quantity=row.quantity,
                        product=product.to_domain() if product is not None else None,
                    )
                    for row, product in result.tuples()
                ])

        except Exception as e:
            return Error(StoreError(f"Failed to fetch cart rows: {e}", e))

    async def delete_rows(self, user_id: str) -> Result[None, StoreError]:
        try:
            async with self._session_factory() as session:
                await session.execute(
                    delete(CartItemTable).where(CartItemTable.user_id == user_id)
                )
                await session.commit()
                return Ok(None)

        except Exception as e:
            return Error(StoreError(f"Failed to delete cart rows: {e}", e))

    async def insert_rows(
        self, user_id: str, items: Sequence[LineItem]
    ) -> Result[None, StoreError]:
        try:
            async with self._session_factory() as session:
                session.add_all(
                    CartItemTable(
                        user_id=user_id,
                        id=item.id,
                        product_id=item.product_id,
                        quantity=item.quantity,
                        position=position,
                    )
                    for position, item in enumerate(items)
                )
                await session.commit()
                return Ok(None)

        except Exception as e:
            return Error(StoreError(f"Failed to insert cart rows: {e}", e))

    async def upsert_product(self, product: Product) -> Result[None, StoreError]:
        """Insert or refresh the product snapshot rows are joined against."""
        try:
            async with self._session_factory() as session:
                await session.merge(ProductTable.from_domain(product))
                await session.commit()
                return Ok(None)

        except Exception as e:
            return Error(StoreError(f"Failed to upsert product: {e}", e))


__all__ = ("SQLAlchemyCartStore",)
