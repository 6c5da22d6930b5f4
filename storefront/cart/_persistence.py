"""
Cart persistence adapter — remote store with local-storage fallback.

    load(identity)             guest  → local["cart-guest"]
                               user   → remote rows ─┬─ ok   → re-snapshot from products
                                                     └─ fail → local["cart-<id>"] → empty

    save(aggregate, identity)  guest  → local write
                               user   → remote delete-all + insert ─┬─ ok   → REMOTE
                                                                    └─ fail → local write

Neither operation raises. Remote errors are logged and absorbed.

Snapshot policy: an item loaded from the remote store is rebuilt from the
product's *current* name/price/variant (rows carry no snapshot). An item
loaded from local storage keeps the snapshot taken when it was added, since
no product source is available on that path.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from kungfu import Result, Ok, Error

from storefront.cart._types import CartIdentity, SaveOutcome, StoreError
from storefront.cart._aggregate import CartAggregate
from storefront.cart._codec import decode_cart, encode_cart
from storefront.cart._local import LocalStorage
from storefront.cart._resolve import parse_line_item_id, resolve
from storefront.cart._store import CartRow, CartStore

logger = logging.getLogger(__name__)


async def _guarded[T](
    call: Callable[[], Awaitable[Result[T, StoreError]]],
) -> Result[T, StoreError]:
    """Run a store call; a store that raises instead of returning Error is treated the same."""
    try:
        return await call()
    except Exception as e:
        return Error(StoreError(f"Store raised: {e}", e))


def rows_to_cart(rows: list[CartRow], *, user_id: str = "?") -> CartAggregate:
    """
    Rebuild a cart from joined rows using the current product snapshot.

    Rows that no longer resolve (product gone, variant removed, malformed
    id, bad quantity) are dropped.
    """
    cart = CartAggregate()
    for row in rows:
        if row.product is None:
            logger.warning("Dropping cart row %r for %s: product %s no longer exists",
                           row.id, user_id, row.product_id)
            continue

        parsed = parse_line_item_id(row.id, row.product_id)
        if parsed is None:
            logger.warning("Dropping cart row %r for %s: malformed id", row.id, user_id)
            continue

        variant_index, size = parsed
        try:
            item = resolve(row.product, variant_index, size, row.quantity)
        except ValueError as e:
            logger.warning("Dropping cart row %r for %s: %s", row.id, user_id, e)
            continue

        cart = cart.add_item(item)
    return cart


class CartPersistence:
    """
    Synchronizes cart aggregates with durable storage.

    Args:
        local: Synchronous scoped storage (always required, it is the fallback).
        remote: Remote store for authenticated identities. None means
            local-only for everyone.

    Example:
        persistence = CartPersistence(MemoryLocalStorage(), MemoryCartStore(products))
        cart = await persistence.load(CartIdentity.user("42"))
        outcome = await persistence.save(cart.add(shirt, 0, "M"), CartIdentity.user("42"))
    """

    def __init__(self, local: LocalStorage, remote: CartStore | None = None) -> None:
        self._local = local
        self._remote = remote

    @property
    def has_remote(self) -> bool:
        return self._remote is not None

    # ─────────────────────────────────────────────────────────────────────────
    # Load
    # ─────────────────────────────────────────────────────────────────────────

    async def load(self, identity: CartIdentity) -> CartAggregate:
        if identity.user_id is None or self._remote is None:
            return self._read_local(identity)

        remote = self._remote
        user_id = identity.user_id
        result = await _guarded(lambda: remote.fetch_rows(user_id))

        match result:
            case Ok(rows):
                cart = rows_to_cart(rows, user_id=user_id)
                logger.debug("Loaded %d item(s) for %s from remote", len(cart), identity)
                return cart
            case Error(e):
                logger.warning("Remote cart load failed for %s, using local copy: %s",
                               identity, e.message)
                return self._read_local(identity)

    def _read_local(self, identity: CartIdentity) -> CartAggregate:
        key = identity.storage_key
        try:
            raw = self._local.get(key)
        except Exception:
            logger.exception("Local storage read failed for %s", key)
            return CartAggregate()
        return decode_cart(raw, key=key)

    # ─────────────────────────────────────────────────────────────────────────
    # Save
    # ─────────────────────────────────────────────────────────────────────────

    async def save(self, cart: CartAggregate, identity: CartIdentity) -> SaveOutcome:
        if identity.user_id is None or self._remote is None:
            return SaveOutcome.LOCAL if self._write_local(cart, identity) else SaveOutcome.FAILED

        result = await self._replace_remote(cart, identity.user_id)

        match result:
            case Ok(_):
                return SaveOutcome.REMOTE
            case Error(e):
                logger.warning("Remote cart save failed for %s, writing local copy: %s",
                               identity, e.message)
                if self._write_local(cart, identity):
                    return SaveOutcome.LOCAL_FALLBACK
                return SaveOutcome.FAILED

    async def _replace_remote(self, cart: CartAggregate, user_id: str) -> Result[None, StoreError]:
        remote = self._remote
        assert remote is not None

        match await _guarded(lambda: remote.delete_rows(user_id)):
            case Error(e):
                return Error(e)

        if cart.is_empty:
            return Ok(None)
        return await _guarded(lambda: remote.insert_rows(user_id, cart.items))

    def _write_local(self, cart: CartAggregate, identity: CartIdentity) -> bool:
        key = identity.storage_key
        try:
            self._local.set(key, encode_cart(cart))
            return True
        except Exception:
            logger.exception("Local storage write failed for %s", key)
            return False


__all__ = (
    "rows_to_cart",
    "CartPersistence",
)
