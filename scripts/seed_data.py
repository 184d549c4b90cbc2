from __future__ import annotations

import argparse
from datetime import datetime
from uuid import uuid4

from services.storefront.app.db.database import Database
from services.storefront.app.db.init_db import init_db
from services.storefront.app.db.models import Product, User
from services.storefront.app.services.order_base import CartLine
from services.storefront.app.services.sql_stores import SqlCartStore
from sqlalchemy import select

_PRODUCTS = (
    ("Wireless Earbuds", "Audio", "Sonix", 2499),
    ("USB-C Charger 65W", "Accessories", "Voltra", 1899),
    ("Mechanical Keyboard", "Peripherals", "Keyforge", 5499),
)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed minimal ElectroHub demo data")
    parser.add_argument("--user-id", default="u-1")
    parser.add_argument("--user-name", default="Demo Shopper")
    parser.add_argument("--user-email", default="shopper@example.com")
    parser.add_argument("--with-cart", action="store_true", help="Put one of each product in the cart")
    args = parser.parse_args()

    database = Database.from_env()
    database.open()
    init_db(database)

    db = database.session()
    try:
        if db.get(User, args.user_id) is None:
            db.add(User(id=args.user_id, user_name=args.user_name, user_email=args.user_email))

        existing = set(db.execute(select(Product.product_name)).scalars().all())
        now = datetime.utcnow()
        for name, category, brand, price in _PRODUCTS:
            if name in existing:
                continue
            db.add(
                Product(
                    id=uuid4().hex,
                    product_name=name,
                    product_description="",
                    product_price=price,
                    product_category=category,
                    product_brand=brand,
                    product_image="",
                    created_at=now,
                    updated_at=now,
                )
            )
        db.commit()

        if args.with_cart:
            products = db.execute(select(Product)).scalars().all()
            SqlCartStore(db).upsert_push(
                args.user_id,
                [
                    CartLine(
                        product_id=p.id,
                        product_name=p.product_name,
                        quantity=1,
                        price=p.product_price,
                    )
                    for p in products
                ],
            )

        print(f"Seeded user={args.user_id}")
        return 0
    finally:
        db.close()
        database.close()


if __name__ == "__main__":
    raise SystemExit(main())
