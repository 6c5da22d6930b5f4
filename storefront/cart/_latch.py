"""
Load latch — latest request wins.

Every load is stamped with a generation. A load whose generation is no
longer the latest finished too late: its result must not be installed.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.cart._types import CartIdentity


@dataclass(frozen=True, slots=True)
class LoadTicket:
    generation: int
    identity: CartIdentity


class LoadLatch:
    """
    Example:
        a = latch.begin(alice)
        b = latch.begin(bob)      # supersedes a
        latch.is_current(a)       # False, a's result is dropped
        latch.is_current(b)       # True
    """

    def __init__(self) -> None:
        self._generation = 0
        self._latest: LoadTicket | None = None

    @property
    def latest(self) -> LoadTicket | None:
        return self._latest

    def begin(self, identity: CartIdentity) -> LoadTicket:
        self._generation += 1
        self._latest = LoadTicket(self._generation, identity)
        return self._latest

    def is_current(self, ticket: LoadTicket) -> bool:
        return self._latest is not None and self._latest.generation == ticket.generation


__all__ = ("LoadTicket", "LoadLatch")
