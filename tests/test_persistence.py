import json
from collections.abc import Sequence
from dataclasses import replace
from decimal import Decimal
from pathlib import Path

import pytest

from kungfu import Error

from storefront.catalog import Product
from storefront.cart import (
    GUEST,
    CartAggregate,
    CartIdentity,
    CartPersistence,
    CartRow,
    FileLocalStorage,
    LineItem,
    MemoryCartStore,
    MemoryLocalStorage,
    SaveOutcome,
    StoreError,
    cart_store_from,
    encode_cart,
    rows_to_cart,
)

USER = CartIdentity.user("42")


def _failing_store():
    async def fetch_rows(user_id: str):
        return Error(StoreError("remote down"))

    async def delete_rows(user_id: str):
        return Error(StoreError("remote down"))

    async def insert_rows(user_id: str, items: Sequence[LineItem]):
        return Error(StoreError("remote down"))

    return cart_store_from(fetch_rows=fetch_rows, delete_rows=delete_rows, insert_rows=insert_rows)


def _raising_store():
    async def fetch_rows(user_id: str):
        raise ConnectionError("socket closed")

    async def delete_rows(user_id: str):
        raise ConnectionError("socket closed")

    async def insert_rows(user_id: str, items: Sequence[LineItem]):
        raise ConnectionError("socket closed")

    return cart_store_from(fetch_rows=fetch_rows, delete_rows=delete_rows, insert_rows=insert_rows)


class _BrokenStorage:
    def get(self, key: str) -> str | None:
        raise OSError("disk gone")

    def set(self, key: str, value: str) -> None:
        raise OSError("disk gone")


# ═══════════════════════════════════════════════════════════════════════════════
# Identity
# ═══════════════════════════════════════════════════════════════════════════════


def test_storage_keys() -> None:
    assert GUEST.storage_key == "cart-guest"
    assert USER.storage_key == "cart-42"
    assert CartIdentity.of(None) == GUEST
    assert CartIdentity.of("") == GUEST
    assert CartIdentity.of("42") == USER


def test_user_identity_requires_id() -> None:
    with pytest.raises(ValueError):
        CartIdentity.user("")


# ═══════════════════════════════════════════════════════════════════════════════
# Guest / local-only
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_guest_uses_local_storage(shirt: Product) -> None:
    local = MemoryLocalStorage()
    remote = MemoryCartStore([shirt])
    persistence = CartPersistence(local, remote)
    cart = CartAggregate().add(shirt, 0, "M")

    outcome = await persistence.save(cart, GUEST)

    assert outcome is SaveOutcome.LOCAL
    assert local.keys() == ["cart-guest"]
    assert await persistence.load(GUEST) == cart


@pytest.mark.asyncio
async def test_without_remote_users_are_local(shirt: Product) -> None:
    local = MemoryLocalStorage()
    persistence = CartPersistence(local)

    outcome = await persistence.save(CartAggregate().add(shirt, 0, "M"), USER)

    assert outcome is SaveOutcome.LOCAL
    assert local.get("cart-42") is not None
    assert len(await persistence.load(USER)) == 1


@pytest.mark.asyncio
async def test_load_missing_is_empty() -> None:
    persistence = CartPersistence(MemoryLocalStorage())
    assert (await persistence.load(GUEST)).is_empty


# ═══════════════════════════════════════════════════════════════════════════════
# Remote
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_user_saves_remotely(shirt: Product, cap: Product) -> None:
    local = MemoryLocalStorage()
    remote = MemoryCartStore([shirt, cap])
    persistence = CartPersistence(local, remote)
    cart = CartAggregate().add(shirt, 0, "M", 2).add(cap, 0, "M")

    outcome = await persistence.save(cart, USER)

    assert outcome is SaveOutcome.REMOTE
    assert remote.row_count("42") == 2
    assert local.get("cart-42") is None
    assert await persistence.load(USER) == cart


@pytest.mark.asyncio
async def test_save_replaces_remote_rows(shirt: Product, cap: Product) -> None:
    remote = MemoryCartStore([shirt, cap])
    persistence = CartPersistence(MemoryLocalStorage(), remote)

    await persistence.save(CartAggregate().add(shirt, 0, "M").add(cap, 0, "M"), USER)
    await persistence.save(CartAggregate().add(cap, 0, "M", 4), USER)

    assert remote.row_count("42") == 1
    loaded = await persistence.load(USER)
    assert [(i.id, i.quantity) for i in loaded] == [("p2-0-M", 4)]


@pytest.mark.asyncio
async def test_saving_empty_cart_clears_remote(shirt: Product) -> None:
    remote = MemoryCartStore([shirt])
    persistence = CartPersistence(MemoryLocalStorage(), remote)
    await persistence.save(CartAggregate().add(shirt, 0, "M"), USER)

    outcome = await persistence.save(CartAggregate(), USER)

    assert outcome is SaveOutcome.REMOTE
    assert remote.row_count("42") == 0


@pytest.mark.asyncio
async def test_remote_load_uses_current_product(shirt: Product) -> None:
    remote = MemoryCartStore([shirt])
    persistence = CartPersistence(MemoryLocalStorage(), remote)
    await persistence.save(CartAggregate().add(shirt, 0, "M"), USER)

    remote.put_product(replace(shirt, name="Shirt (new)", price=Decimal("25")))
    item = (await persistence.load(USER)).items[0]

    assert item.price == Decimal("25")
    assert item.name == "Shirt (new)"


@pytest.mark.asyncio
async def test_remote_load_drops_deleted_product(shirt: Product, cap: Product) -> None:
    remote = MemoryCartStore([shirt, cap])
    persistence = CartPersistence(MemoryLocalStorage(), remote)
    await persistence.save(CartAggregate().add(shirt, 0, "M").add(cap, 0, "M"), USER)

    remote.drop_product("p1")

    assert [i.id for i in await persistence.load(USER)] == ["p2-0-M"]


def test_rows_to_cart_drops_unresolvable_rows(shirt: Product) -> None:
    rows = [
        CartRow("p1-0-M", "p1", 2, shirt),
        CartRow("p1-7-M", "p1", 1, shirt),  # variant gone
        CartRow("p1-0", "p1", 1, shirt),  # malformed id
        CartRow("p1-1-L", "p1", 0, shirt),  # bad quantity
    ]

    cart = rows_to_cart(rows, user_id="42")

    assert [(i.id, i.quantity) for i in cart] == [("p1-0-M", 2)]


# ═══════════════════════════════════════════════════════════════════════════════
# Fallback
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_remote_load_failure_falls_back_to_local(shirt: Product) -> None:
    local = MemoryLocalStorage({"cart-42": encode_cart(CartAggregate().add(shirt, 1, "S"))})
    persistence = CartPersistence(local, _failing_store())

    cart = await persistence.load(USER)

    assert [i.id for i in cart] == ["p1-1-S"]


@pytest.mark.asyncio
async def test_remote_load_failure_without_local_copy_is_empty() -> None:
    persistence = CartPersistence(MemoryLocalStorage(), _failing_store())
    assert (await persistence.load(USER)).is_empty


@pytest.mark.asyncio
async def test_raising_store_never_raises(shirt: Product) -> None:
    local = MemoryLocalStorage()
    persistence = CartPersistence(local, _raising_store())

    assert (await persistence.load(USER)).is_empty
    outcome = await persistence.save(CartAggregate().add(shirt, 0, "M"), USER)

    assert outcome is SaveOutcome.LOCAL_FALLBACK
    assert local.get("cart-42") is not None


@pytest.mark.asyncio
async def test_remote_save_failure_writes_local(shirt: Product) -> None:
    local = MemoryLocalStorage()
    persistence = CartPersistence(local, _failing_store())
    cart = CartAggregate().add(shirt, 0, "M")

    outcome = await persistence.save(cart, USER)

    assert outcome is SaveOutcome.LOCAL_FALLBACK
    assert await persistence.load(USER) == cart


@pytest.mark.asyncio
async def test_nothing_writable_is_failed(shirt: Product) -> None:
    persistence = CartPersistence(_BrokenStorage(), _failing_store())

    assert await persistence.save(CartAggregate().add(shirt, 0, "M"), USER) is SaveOutcome.FAILED
    assert await persistence.save(CartAggregate(), GUEST) is SaveOutcome.FAILED
    assert (await persistence.load(USER)).is_empty


# ═══════════════════════════════════════════════════════════════════════════════
# File storage
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_file_storage(tmp_path: Path, shirt: Product) -> None:
    storage = FileLocalStorage(tmp_path / "carts")
    persistence = CartPersistence(storage)
    cart = CartAggregate().add(shirt, 0, "M", 3)

    await persistence.save(cart, USER)

    assert (tmp_path / "carts" / "cart-42.json").exists()
    assert json.loads(storage.get("cart-42") or "")["cartItems"][0]["quantity"] == 3
    assert await CartPersistence(FileLocalStorage(tmp_path / "carts")).load(USER) == cart


@pytest.mark.asyncio
async def test_file_storage_corrupt_document(tmp_path: Path) -> None:
    (tmp_path / "cart-guest.json").write_text("{broken", encoding="utf-8")
    persistence = CartPersistence(FileLocalStorage(tmp_path))

    assert (await persistence.load(GUEST)).is_empty


def test_file_storage_sanitizes_keys(tmp_path: Path) -> None:
    storage = FileLocalStorage(tmp_path)
    storage.set("cart-../../etc", "x")

    assert storage.get("cart-../../etc") == "x"
    assert [p.parent for p in tmp_path.iterdir()] == [tmp_path]


def test_file_storage_keys_never_collide(tmp_path: Path) -> None:
    storage = FileLocalStorage(tmp_path)
    keys = ["cart-a/b", "cart-a_b", "cart-a%2Fb", "cart-a b", "cart-a+b"]

    for key in keys:
        storage.set(key, key)

    assert [storage.get(key) for key in keys] == keys
    assert len(list(tmp_path.iterdir())) == len(keys)


@pytest.mark.asyncio
async def test_file_storage_identities_stay_separate(tmp_path: Path, shirt: Product) -> None:
    persistence = CartPersistence(FileLocalStorage(tmp_path))
    cart = CartAggregate().add(shirt, 0, "M")

    await persistence.save(cart, CartIdentity.user("a/b"))

    assert (await persistence.load(CartIdentity.user("a_b"))).is_empty
    assert await persistence.load(CartIdentity.user("a/b")) == cart
