"""
Save queue — explicit per-identity asynchronous save pipeline.

Saves for one identity run strictly in enqueue order, so the remote copy
always ends at the last mutation. Saves for different identities are
independent. Each enqueue returns the task, so callers and tests can await
the outcome of a specific save.
"""

from __future__ import annotations

import asyncio
import logging

from storefront.cart._types import CartIdentity, SaveOutcome
from storefront.cart._aggregate import CartAggregate
from storefront.cart._persistence import CartPersistence

logger = logging.getLogger(__name__)


class SaveQueue:
    """
    Example:
        queue = SaveQueue(persistence)
        task = queue.enqueue(cart, identity)   # fire-and-forget…
        outcome = await task                   # …or observe it
        await queue.drain()                    # wait for everything
    """

    def __init__(self, persistence: CartPersistence) -> None:
        self._persistence = persistence
        self._tails: dict[CartIdentity, asyncio.Task[SaveOutcome]] = {}
        self._pending: dict[asyncio.Task[SaveOutcome], CartIdentity] = {}
        self._last: dict[CartIdentity, SaveOutcome] = {}

    # ─────────────────────────────────────────────────────────────────────────
    # Enqueue
    # ─────────────────────────────────────────────────────────────────────────

    def enqueue(self, cart: CartAggregate, identity: CartIdentity) -> asyncio.Task[SaveOutcome]:
        """
        Schedule a save of this cart snapshot.

        Must be called from inside a running event loop.
        """
        previous = self._tails.get(identity)
        task = asyncio.get_running_loop().create_task(
            self._run(previous, cart, identity),
            name=f"cart-save:{identity}",
        )
        self._tails[identity] = task
        self._pending[task] = identity
        task.add_done_callback(self._on_done)
        return task

    async def _run(
        self,
        previous: asyncio.Task[SaveOutcome] | None,
        cart: CartAggregate,
        identity: CartIdentity,
    ) -> SaveOutcome:
        if previous is not None:
            # wait() never raises the previous task's error into this one
            await asyncio.wait([previous])
        return await self._persistence.save(cart, identity)

    def _on_done(self, task: asyncio.Task[SaveOutcome]) -> None:
        identity = self._pending.pop(task)
        if self._tails.get(identity) is task:
            del self._tails[identity]

        if task.cancelled():
            logger.info("Cart save for %s was cancelled", identity)
            return

        exc = task.exception()
        if exc is not None:
            logger.error("Cart save for %s crashed", identity, exc_info=exc)
            self._last[identity] = SaveOutcome.FAILED
            return

        outcome = task.result()
        self._last[identity] = outcome
        logger.debug("Cart save for %s finished: %s", identity, outcome.name)

    # ─────────────────────────────────────────────────────────────────────────
    # Observe
    # ─────────────────────────────────────────────────────────────────────────

    def pending(self, identity: CartIdentity | None = None) -> int:
        if identity is None:
            return len(self._pending)
        return sum(1 for i in self._pending.values() if i == identity)

    def last_outcome(self, identity: CartIdentity) -> SaveOutcome | None:
        """Outcome of the most recently finished save for identity."""
        return self._last.get(identity)

    async def drain(self, identity: CartIdentity | None = None) -> None:
        """Wait until no saves (for identity, or at all) are pending."""
        while True:
            tasks = [
                t for t, i in self._pending.items()
                if identity is None or i == identity
            ]
            if not tasks:
                return
            await asyncio.wait(tasks)


__all__ = ("SaveQueue",)
