"""
SQLAlchemy integration — order service over the orders table.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kungfu import Result, Ok, Error

from storefront._db import OrderTable
from storefront.checkout._types import (
    Order,
    OrderError,
    OrderErrorKind,
    OrderPayload,
    OrderStatus,
    PaymentMethod,
)
from storefront.checkout._orders import new_order_id, reject_empty
from storefront.checkout._wire import lines_from_record, lines_to_record


class SQLAlchemyOrderService:
    """
    OrderService backed by SQLAlchemy.

    Example:
        session_factory, _ = await create_database()
        orders = SQLAlchemyOrderService(session_factory)
        result = await orders.create_order(payload)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_order(self, payload: OrderPayload) -> Result[Order, OrderError]:
        if (rejected := reject_empty(payload)) is not None:
            return Error(rejected)

        try:
            async with self._session_factory() as session:
                row = OrderTable(
                    id=new_order_id(),
                    customer_name=payload.customer_name,
                    email=payload.email,
                    phone=payload.phone,
                    location=payload.location,
                    payment_method=payload.payment_method.value,
                    items=lines_to_record(payload.items),
                    total=payload.total,
                    status=OrderStatus.PENDING.value,
                    created_at=datetime.now(),
                )
                session.add(row)
                await session.commit()
                return Ok(Order(
                    id=row.id,
                    payload=payload,
                    status=OrderStatus.PENDING,
                    created_at=row.created_at,
                ))

        except Exception as e:
            return Error(OrderError(OrderErrorKind.BACKEND, f"Failed to create order: {e}", e))

    async def list_orders(self) -> Result[list[Order], OrderError]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(OrderTable).order_by(OrderTable.created_at.desc())
                )
                return Ok([self._to_order(row) for row in result.scalars()])

        except Exception as e:
            return Error(OrderError(OrderErrorKind.BACKEND, f"Failed to list orders: {e}", e))

    async def delete_order(self, order_id: str) -> Result[None, OrderError]:
        try:
            async with self._session_factory() as session:
                row = await session.get(OrderTable, order_id)
                if row is None:
                    return Error(OrderError(OrderErrorKind.NOT_FOUND, f"Order {order_id} not found"))

                await session.delete(row)
                await session.commit()
                return Ok(None)

        except Exception as e:
            return Error(OrderError(OrderErrorKind.BACKEND, f"Failed to delete order: {e}", e))

    def _to_order(self, row: OrderTable) -> Order:
        payload = OrderPayload(
            customer_name=row.customer_name,
            email=row.email,
            phone=row.phone or "",
            location=row.location or "",
            payment_method=PaymentMethod(row.payment_method),
            items=lines_from_record(row.items),
            total=row.total,
        )
        return Order(
            id=row.id,
            payload=payload,
            status=OrderStatus(row.status),
            created_at=row.created_at,
        )


__all__ = ("SQLAlchemyOrderService",)
