from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import datetime
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
    db_path = tmp_path / "electrohub_test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("ELECTROHUB_DB_AUTO_CREATE", "true")
    monkeypatch.setenv("ELECTROHUB_NOTIFIER", "mock")

    from services.storefront.app.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db(client: TestClient) -> Generator[Session, None, None]:
    session = client.app.state.database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def make_user(db: Session) -> Callable[..., str]:
    from services.storefront.app.db.models import User

    def _make(user_id: str = "u-1", name: str = "Asha", email: str = "asha@example.com") -> str:
        db.add(User(id=user_id, user_name=name, user_email=email))
        db.commit()
        return user_id

    return _make


@pytest.fixture()
def make_product(db: Session) -> Callable[..., str]:
    from services.storefront.app.db.models import Product

    def _make(name: str = "Phone Case", price: int = 100) -> str:
        now = datetime.utcnow()
        product_id = uuid4().hex
        db.add(
            Product(
                id=product_id,
                product_name=name,
                product_description="",
                product_price=price,
                product_category="Accessories",
                product_brand="Generic",
                product_image="",
                created_at=now,
                updated_at=now,
            )
        )
        db.commit()
        return product_id

    return _make


@pytest.fixture()
def fill_cart(db: Session) -> Callable[..., None]:
    from services.storefront.app.services.order_base import CartLine
    from services.storefront.app.services.sql_stores import SqlCartStore

    def _fill(user_id: str, *lines: tuple[str, int]) -> None:
        SqlCartStore(db).upsert_push(
            user_id,
            [
                CartLine(product_id=pid, product_name="", quantity=qty, price=0)
                for pid, qty in lines
            ],
        )

    return _fill


@pytest.fixture()
def address() -> dict:
    return {
        "street": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "postalCode": "560001",
    }
