"""
Cart — client-held aggregate with remote/local persistence.

    from storefront import cart as C

    persistence = C.CartPersistence(
        local=C.FileLocalStorage("~/.storefront"),
        remote=C.SQLAlchemyCartStore(session_factory),
    )
    carts = C.CartService(persistence)

    await carts.load(C.CartIdentity.user("42"))
    carts.add(shirt, variant_index=0, size="M")
    carts.update_quantity("p1-0-M", 3)
    await carts.flush()

Architecture:

    CartService ── mutation ──▶ CartAggregate (new value)
         │                           │
         │ load()                    ▼
         ▼                       SaveQueue (per identity, ordered)
    LoadLatch (latest wins)          │
         │                           ▼
         └────────────────▶ CartPersistence
                              │            │
                              ▼            ▼
                         CartStore    LocalStorage
                         (remote)     (fallback / guest)
"""

from storefront.cart._types import (
    LineItem,
    CartIdentity,
    GUEST,
    LoadState,
    SaveOutcome,
    StoreError,
)
from storefront.cart._resolve import (
    line_item_id,
    parse_line_item_id,
    resolve,
)
from storefront.cart._aggregate import CartAggregate, EMPTY_CART
from storefront.cart._local import (
    LocalStorage,
    MemoryLocalStorage,
    FileLocalStorage,
)
from storefront.cart._codec import encode_cart, decode_cart
from storefront.cart._store import (
    CartRow,
    CartStore,
    FunctionalCartStore,
    cart_store_from,
    MemoryCartStore,
)
from storefront.cart._persistence import CartPersistence, rows_to_cart
from storefront.cart._latch import LoadLatch, LoadTicket
from storefront.cart._queue import SaveQueue
from storefront.cart._service import CartService
from storefront.cart._sqlalchemy import SQLAlchemyCartStore

__all__ = (
    # Types
    "LineItem",
    "CartIdentity",
    "GUEST",
    "LoadState",
    "SaveOutcome",
    "StoreError",
    # Resolver
    "line_item_id",
    "parse_line_item_id",
    "resolve",
    # Aggregate
    "CartAggregate",
    "EMPTY_CART",
    # Local storage
    "LocalStorage",
    "MemoryLocalStorage",
    "FileLocalStorage",
    "encode_cart",
    "decode_cart",
    # Remote store
    "CartRow",
    "CartStore",
    "FunctionalCartStore",
    "cart_store_from",
    "MemoryCartStore",
    "SQLAlchemyCartStore",
    # Persistence
    "CartPersistence",
    "rows_to_cart",
    "LoadLatch",
    "LoadTicket",
    "SaveQueue",
    # Service
    "CartService",
)
