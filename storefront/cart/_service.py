"""
Cart service — the cart of the current session.

Explicit object passed to whoever needs the cart; there is no module-level
store. Holds the in-memory aggregate (source of truth for the session),
loads it per identity and persists it after every mutation.
"""

from __future__ import annotations

import asyncio
import logging

from storefront._types import Money
from storefront.catalog import Product
from storefront.cart._types import CartIdentity, GUEST, LineItem, LoadState
from storefront.cart._aggregate import CartAggregate
from storefront.cart._latch import LoadLatch
from storefront.cart._persistence import CartPersistence
from storefront.cart._queue import SaveQueue

logger = logging.getLogger(__name__)


class CartService:
    """
    Session cart.

    Lifecycle:
        UNLOADED ──load()──▶ LOADING ──▶ LOADED ──mutation──▶ save enqueued

    Mutations are applied in memory immediately and never fail because of
    storage. Before the first load completes they are kept in memory only
    and the loaded cart replaces them.

    Example:
        carts = CartService(CartPersistence(local, remote))
        await carts.load(CartIdentity.user("42"))
        carts.add(shirt, variant_index=0, size="M")
        await carts.flush()
    """

    def __init__(self, persistence: CartPersistence, identity: CartIdentity = GUEST) -> None:
        self._persistence = persistence
        self._queue = SaveQueue(persistence)
        self._latch = LoadLatch()
        self._identity = identity
        self._cart = CartAggregate()
        self._state = LoadState.UNLOADED
        self._inflight: dict[CartIdentity, asyncio.Task[CartAggregate]] = {}

    # ─────────────────────────────────────────────────────────────────────────
    # State
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def identity(self) -> CartIdentity:
        return self._identity

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def cart(self) -> CartAggregate:
        return self._cart

    @property
    def items(self) -> tuple[LineItem, ...]:
        return self._cart.items

    @property
    def saves(self) -> SaveQueue:
        return self._queue

    # ─────────────────────────────────────────────────────────────────────────
    # Load
    # ─────────────────────────────────────────────────────────────────────────

    async def load(self, identity: CartIdentity | None = None) -> CartAggregate:
        """
        Load the cart for identity (default: current identity) and install it.

        Concurrent loads for the same identity share one fetch. When loads
        for different identities overlap, only the most recently requested
        one is installed; a stale result is returned to its caller but
        never replaces the session cart.

        Saves already queued for identity finish before the fetch starts,
        so a load never observes a half-replaced remote cart.
        """
        if identity is None:
            identity = self._identity

        ticket = self._latch.begin(identity)
        self._state = LoadState.LOADING

        await self._queue.drain(identity)
        cart = await asyncio.shield(self._fetch(identity))

        if not self._latch.is_current(ticket):
            latest = self._latch.latest
            logger.info("Discarding stale cart load for %s (superseded by %s)",
                        identity, latest.identity if latest else "?")
            return cart

        self._identity = identity
        self._cart = cart
        self._state = LoadState.LOADED
        logger.debug("Cart for %s loaded with %d item(s)", identity, len(cart))
        return cart

    def _fetch(self, identity: CartIdentity) -> asyncio.Task[CartAggregate]:
        task = self._inflight.get(identity)
        if task is not None:
            return task

        task = asyncio.get_running_loop().create_task(
            self._persistence.load(identity),
            name=f"cart-load:{identity}",
        )
        self._inflight[identity] = task

        def forget(t: asyncio.Task[CartAggregate]) -> None:
            if self._inflight.get(identity) is t:
                del self._inflight[identity]

        task.add_done_callback(forget)
        return task

    # ─────────────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────────────

    def add(
        self,
        product: Product,
        variant_index: int,
        size: str,
        quantity: int = 1,
    ) -> CartAggregate:
        return self._apply(self._cart.add(product, variant_index, size, quantity))

    def add_item(self, item: LineItem) -> CartAggregate:
        return self._apply(self._cart.add_item(item))

    def remove(self, item_id: str) -> CartAggregate:
        return self._apply(self._cart.remove(item_id))

    def update_quantity(self, item_id: str, quantity: int) -> CartAggregate:
        return self._apply(self._cart.update_quantity(item_id, quantity))

    def clear(self) -> CartAggregate:
        return self._apply(self._cart.clear())

    def _apply(self, cart: CartAggregate) -> CartAggregate:
        self._cart = cart
        if self._state is LoadState.LOADED:
            self._queue.enqueue(cart, self._identity)
        else:
            logger.debug("Cart mutated while %s; not persisted", self._state.name)
        return cart

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def total(self) -> Money:
        return self._cart.total()

    def item_count(self) -> int:
        return self._cart.item_count()

    async def flush(self) -> None:
        """Wait for every pending save of this session."""
        await self._queue.drain()


__all__ = ("CartService",)
