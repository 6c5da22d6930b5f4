"""
Cart & Checkout Example

Run: python examples/checkout_demo.py
"""

import asyncio
import logging
import tempfile
from decimal import Decimal

from kungfu import Ok, Error

from storefront import create_database
from storefront.catalog import Product, Variant
from storefront.cart import (
    CartIdentity,
    CartPersistence,
    CartService,
    FileLocalStorage,
    SQLAlchemyCartStore,
)
from storefront.checkout import (
    CheckoutForm,
    CheckoutPolicy,
    CheckoutService,
    PaymentMethod,
    SQLAlchemyOrderService,
    amount_to_free_shipping,
    buy_now,
)

SHIRT = Product(
    id="p1",
    name="Linen Shirt",
    price=Decimal("20"),
    variants=(Variant("red", "shirt-red.png"), Variant("blue", "shirt-blue.png")),
    sizes=("S", "M", "L", "XL"),
)
CAP = Product(
    id="p2",
    name="Cap",
    price=Decimal("5"),
    variants=(Variant("black", "cap-black.png"),),
    sizes=("M",),
)


def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


async def main() -> None:
    banner("Cart & Checkout")

    session_factory, engine = await create_database()
    carts_db = SQLAlchemyCartStore(session_factory)
    for product in (SHIRT, CAP):
        await carts_db.upsert_product(product)

    policy = CheckoutPolicy.from_env()
    user = CartIdentity.user("42")

    try:
        with tempfile.TemporaryDirectory() as root:
            carts = CartService(CartPersistence(FileLocalStorage(root), carts_db))
            checkout = CheckoutService(carts, SQLAlchemyOrderService(session_factory), policy)

            # 1. Fill the cart
            print("1. Cart:")
            await carts.load(user)
            carts.add(SHIRT, variant_index=1, size="M", quantity=2)
            carts.add(CAP, variant_index=0, size="M")
            await carts.flush()
            for item in carts.items:
                print(f"   {item.quantity} x {item.name} ({item.display_color}, {item.size})")

            totals = checkout.totals(checkout.current_cart()).rounded()
            print(f"   Subtotal {totals.subtotal}  Tax {totals.tax}  "
                  f"Shipping {totals.shipping}  Total {totals.total} {policy.currency}")
            print(f"   Add {amount_to_free_shipping(totals.subtotal, policy)} more for free shipping\n")

            # 2. Incomplete form
            print("2. Checkout with missing fields:")
            form = CheckoutForm.prefill(email="sara@example.com")
            match await checkout.checkout(checkout.current_cart(), form, PaymentMethod.CASH):
                case Ok(order):
                    print(f"   Order: {order.id}")
                case Error(e):
                    print(f"   {e.message}: {', '.join(e.fields.values())}\n")

            # 3. Buy now
            print("3. Buy now (cart untouched):")
            form = CheckoutForm(
                customer_name="Sara Ali",
                email="sara@example.com",
                phone="0612345678",
                address="12 Main St",
                city="Springfield",
            )
            match await checkout.checkout(buy_now(SHIRT, 0, "L"), form, PaymentMethod.CASH):
                case Ok(order):
                    print(f"   Order: {order.id}, total {order.payload.total}")
                case Error(e):
                    print(f"   Error: {e.message}")
            print(f"   Cart still holds {carts.item_count()} item(s)\n")

            # 4. Checkout the cart
            print("4. Checkout:")
            match await checkout.checkout(checkout.current_cart(), form, PaymentMethod.CASH):
                case Ok(order):
                    print(f"   Order: {order.id}")
                    print(f"   Payload: {order.payload.to_wire()}")
                case Error(e):
                    print(f"   Error: {e.message}")
            await carts.flush()
            print(f"   Cart now holds {carts.item_count()} item(s)")

    finally:
        await engine.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(main())
