from decimal import Decimal

import pytest

from storefront.catalog import Product, Variant


@pytest.fixture
def shirt() -> Product:
    return Product(
        id="p1",
        name="Shirt",
        price=Decimal("20"),
        variants=(Variant("red", "red.png"), Variant("blue", "blue.png")),
        sizes=("S", "M", "L"),
    )


@pytest.fixture
def cap() -> Product:
    return Product(
        id="p2",
        name="Cap",
        price=Decimal("5"),
        variants=(Variant("black", "black.png"),),
        sizes=("M",),
    )
