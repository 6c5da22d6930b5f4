"""
Order service — where payloads become orders.

All methods return Result for explicit error handling.
"""

from __future__ import annotations

import asyncio
import uuid
from datetime import datetime
from typing import Protocol

from kungfu import Result, Ok, Error

from storefront.checkout._types import (
    Order,
    OrderError,
    OrderErrorKind,
    OrderPayload,
    OrderStatus,
)


# ═══════════════════════════════════════════════════════════════════════════════
# Protocol
# ═══════════════════════════════════════════════════════════════════════════════


class OrderService(Protocol):
    """
    Order creation collaborator.

    Implementations must reject a payload without items with a VALIDATION
    error. The submitted total is stored as-is.
    """

    async def create_order(self, payload: OrderPayload) -> Result[Order, OrderError]:
        ...

    async def list_orders(self) -> Result[list[Order], OrderError]:
        """Newest first."""
        ...

    async def delete_order(self, order_id: str) -> Result[None, OrderError]:
        """NOT_FOUND if the order does not exist."""
        ...


def reject_empty(payload: OrderPayload) -> OrderError | None:
    if not payload.items:
        return OrderError(OrderErrorKind.VALIDATION, "Order items are required")
    return None


def new_order_id() -> str:
    return uuid.uuid4().hex


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Service — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryOrderService:
    """In-memory orders. Lost on restart."""

    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = asyncio.Lock()

    async def create_order(self, payload: OrderPayload) -> Result[Order, OrderError]:
        if (rejected := reject_empty(payload)) is not None:
            return Error(rejected)

        async with self._lock:
            order = Order(
                id=new_order_id(),
                payload=payload,
                status=OrderStatus.PENDING,
                created_at=datetime.now(),
            )
            self._orders[order.id] = order
            return Ok(order)

    async def list_orders(self) -> Result[list[Order], OrderError]:
        async with self._lock:
            # dict keeps insertion order; reversed() gives newest first on ties
            orders = list(reversed(self._orders.values()))
            return Ok(sorted(orders, key=lambda o: o.created_at, reverse=True))

    async def delete_order(self, order_id: str) -> Result[None, OrderError]:
        async with self._lock:
            if self._orders.pop(order_id, None) is None:
                return Error(OrderError(OrderErrorKind.NOT_FOUND, f"Order {order_id} not found"))
            return Ok(None)


__all__ = (
    "OrderService",
    "reject_empty",
    "new_order_id",
    "MemoryOrderService",
)
