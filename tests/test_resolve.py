from decimal import Decimal

import pytest

from storefront.catalog import Product, Variant
from storefront.cart import line_item_id, parse_line_item_id, resolve


def test_line_item_id() -> None:
    assert line_item_id("p1", 0, "M") == "p1-0-M"
    assert line_item_id("p1", 1, "2XL") == "p1-1-2XL"


def test_parse_line_item_id_with_dashed_product_id() -> None:
    pid = "3f2a-91bc-77"
    assert parse_line_item_id(line_item_id(pid, 1, "3XL"), pid) == (1, "3XL")


@pytest.mark.parametrize(
    "item_id",
    ["p9-0-M", "p1-x-M", "p1-0", "p1-0-", "p1--M"],
)
def test_parse_line_item_id_rejects_foreign_or_malformed(item_id: str) -> None:
    assert parse_line_item_id(item_id, "p1") is None


def test_resolve_takes_snapshot(shirt: Product) -> None:
    item = resolve(shirt, 1, "L", 2)

    assert item.id == "p1-1-L"
    assert item.product_id == "p1"
    assert item.name == "Shirt"
    assert item.price == Decimal("20")
    assert item.variant == Variant("blue", "blue.png")
    assert item.variant_index == 1
    assert item.quantity == 2
    assert item.color is None
    assert item.display_color == "blue"
    assert item.line_total == Decimal("40")


def test_resolve_same_triple_collides(shirt: Product) -> None:
    assert resolve(shirt, 0, "M").id == resolve(shirt, 0, "M", 5).id
    assert resolve(shirt, 0, "M").id != resolve(shirt, 0, "L").id
    assert resolve(shirt, 0, "M").id != resolve(shirt, 1, "M").id


def test_resolve_ignores_product_size_list(cap: Product) -> None:
    # Only the global grid is enforced
    assert resolve(cap, 0, "XL").size == "XL"


def test_resolve_accepts_float_price() -> None:
    product = Product("p3", "Socks", 19.99, (Variant("white", "w.png"),))  # type: ignore[arg-type]
    assert resolve(product, 0, "S").price == Decimal("19.99")


def test_resolve_bad_variant_index(shirt: Product) -> None:
    with pytest.raises(ValueError, match="out of range"):
        resolve(shirt, 2, "M")
    with pytest.raises(ValueError, match="out of range"):
        resolve(shirt, -1, "M")


def test_resolve_unknown_size(shirt: Product) -> None:
    with pytest.raises(ValueError, match="Unknown size"):
        resolve(shirt, 0, "XS")


def test_resolve_empty_size(shirt: Product) -> None:
    with pytest.raises(ValueError, match="non-empty"):
        resolve(shirt, 0, "")


def test_resolve_bad_quantity(shirt: Product) -> None:
    with pytest.raises(ValueError, match="quantity"):
        resolve(shirt, 0, "M", 0)


def test_resolve_without_variants() -> None:
    with pytest.raises(ValueError, match="no variants"):
        resolve(Product("p4", "Ghost", Decimal("10"), ()), 0, "M")


def test_resolve_non_positive_price() -> None:
    free = Product("p5", "Sticker", Decimal("0"), (Variant("clear", "c.png"),))
    with pytest.raises(ValueError, match="non-positive price"):
        resolve(free, 0, "M")
