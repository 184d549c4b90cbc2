"""SQLAlchemy-backed collaborators for the order workflow.

Each write commits on its own. Order creation and cart deletion are therefore two
separate commits; OrderService surfaces a failure between them as CartNotClearedError.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import datetime
from uuid import uuid4

import structlog
from services.storefront.app.db.models import Cart, CartItem, Product, User
from services.storefront.app.db.models import Order as OrderRow
from services.storefront.app.models.order import (
    Address,
    Order,
    OrderItem,
    OrderStatus,
    PaymentInfo,
    PaymentMethod,
)
from services.storefront.app.models.product import ProductOut
from services.storefront.app.services.order_base import (
    CartLine,
    CartSnapshot,
    OrderIdConflictError,
    PersistenceError,
    UserProfile,
)
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

logger = structlog.get_logger(__name__)


@contextmanager
def _guarded(db: Session, message: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(message, error=str(e))
        raise PersistenceError(message) from e


def product_to_out(row: Product) -> ProductOut:
    return ProductOut.model_validate(row, from_attributes=True)


def _order_from_row(row: OrderRow) -> Order:
    return Order(
        order_id=row.order_id,
        user_id=row.user_id,
        username=row.username,
        items=[OrderItem.model_validate(item) for item in row.items_json],
        total_price=row.total_price,
        address=Address.model_validate(row.address_json),
        payment_method=PaymentMethod(row.payment_method),
        payment_info=(
            PaymentInfo.model_validate(row.payment_info_json) if row.payment_info_json else None
        ),
        status=OrderStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class SqlUserDirectory:
    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, user_id: str) -> UserProfile | None:
        with _guarded(self._db, "Could not look up user"):
            row = self._db.get(User, user_id)

        if row is None:
            return None
        return UserProfile(id=row.id, name=row.user_name, email=row.user_email)


class SqlCartStore:
    def __init__(self, db: Session) -> None:
        self._db = db

    def _cart_row(self, user_id: str) -> Cart | None:
        return self._db.execute(select(Cart).where(Cart.user_id == user_id)).scalar_one_or_none()

    def find_by_user(self, user_id: str) -> CartSnapshot | None:
        """Read the cart with names and prices resolved from the current catalog."""

        with _guarded(self._db, "Could not read cart"):
            cart = self._cart_row(user_id)
            if cart is None:
                return None

            rows = self._db.execute(
                select(CartItem, Product)
                .outerjoin(Product, Product.id == CartItem.product_id)
                .where(CartItem.cart_id == cart.id)
                .order_by(CartItem.id)
            ).all()

        lines: list[CartLine] = []
        for item, product in rows:
            if product is not None:
                name, price = product.product_name, product.product_price
            else:
                name, price = item.product_name or "", item.price or 0
            lines.append(
                CartLine(
                    product_id=item.product_id,
                    product_name=name,
                    quantity=item.quantity,
                    price=price,
                )
            )

        return CartSnapshot(user_id=user_id, lines=tuple(lines))

    def delete_by_user(self, user_id: str) -> bool:
        with _guarded(self._db, "Could not clear cart"):
            cart = self._cart_row(user_id)
            if cart is None:
                return False

            self._db.execute(delete(CartItem).where(CartItem.cart_id == cart.id))
            self._db.delete(cart)
            self._db.commit()
        return True

    def upsert_push(self, user_id: str, lines: Iterable[CartLine]) -> CartSnapshot:
        """Append lines to the user's cart, creating the cart if there is none."""

        with _guarded(self._db, "Could not update cart"):
            now = datetime.utcnow()
            cart = self._cart_row(user_id)
            if cart is None:
                cart = Cart(id=uuid4().hex, user_id=user_id, created_at=now)
                self._db.add(cart)
            cart.updated_at = now

            for line in lines:
                self._db.add(
                    CartItem(
                        cart_id=cart.id,
                        product_id=line.product_id,
                        quantity=line.quantity,
                        product_name=line.product_name,
                        price=line.price,
                    )
                )
            self._db.commit()

        snapshot = self.find_by_user(user_id)
        assert snapshot is not None
        return snapshot


class SqlOrderStore:
    def __init__(self, db: Session) -> None:
        self._db = db

    def create(self, order: Order) -> Order:
        now = datetime.utcnow()
        row = OrderRow(
            order_id=order.order_id,
            user_id=order.user_id,
            username=order.username,
            items_json=[item.model_dump(mode="json") for item in order.items],
            total_price=order.total_price,
            address_json=order.address.model_dump(mode="json"),
            payment_method=order.payment_method.value,
            payment_info_json=(
                order.payment_info.model_dump(mode="json") if order.payment_info else None
            ),
            status=order.status.value,
            created_at=now,
            updated_at=now,
        )

        try:
            self._db.add(row)
            self._db.commit()
        except IntegrityError as e:
            self._db.rollback()
            if self.find_by_id(order.order_id) is not None:
                raise OrderIdConflictError(order.order_id) from e
            logger.error("Could not save order", order_id=order.order_id, error=str(e))
            raise PersistenceError("Could not save order") from e
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("Could not save order", order_id=order.order_id, error=str(e))
            raise PersistenceError("Could not save order") from e

        return _order_from_row(row)

    def find_by_id(self, order_id: str) -> Order | None:
        with _guarded(self._db, "Could not read order"):
            row = self._db.get(OrderRow, order_id)
        return _order_from_row(row) if row is not None else None

    def find_all(self) -> list[Order]:
        with _guarded(self._db, "Could not list orders"):
            rows = self._db.execute(select(OrderRow).order_by(OrderRow.created_at)).scalars().all()
        return [_order_from_row(r) for r in rows]

    def find_by_user(self, user_id: str) -> list[Order]:
        with _guarded(self._db, "Could not list orders"):
            rows = (
                self._db.execute(
                    select(OrderRow)
                    .where(OrderRow.user_id == user_id)
                    .order_by(OrderRow.created_at.desc())
                )
                .scalars()
                .all()
            )
        return [_order_from_row(r) for r in rows]

    def update_by_id(self, order_id: str, status: OrderStatus) -> Order | None:
        with _guarded(self._db, "Could not update order"):
            row = self._db.get(OrderRow, order_id)
            if row is None:
                return None
            row.status = status.value
            row.updated_at = datetime.utcnow()
            self._db.commit()
        return _order_from_row(row)

    def delete_by_id(self, order_id: str) -> bool:
        with _guarded(self._db, "Could not delete order"):
            row = self._db.get(OrderRow, order_id)
            if row is None:
                return False
            self._db.delete(row)
            self._db.commit()
        return True


class SqlProductCatalog:
    def __init__(self, db: Session) -> None:
        self._db = db

    def get_many(self, product_ids: Iterable[str]) -> dict[str, ProductOut]:
        ids = set(product_ids)
        if not ids:
            return {}

        with _guarded(self._db, "Could not read products"):
            rows = self._db.execute(select(Product).where(Product.id.in_(ids))).scalars().all()
        return {row.id: product_to_out(row) for row in rows}
