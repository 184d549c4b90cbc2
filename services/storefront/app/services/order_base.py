from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from services.storefront.app.models.order import Order, OrderStatus
from services.storefront.app.models.product import ProductOut


class OrderWorkflowError(Exception):
    """Base class for order workflow errors."""


class UserNotFoundError(OrderWorkflowError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class EmptyCartError(OrderWorkflowError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"Cart is empty for user {user_id}")
        self.user_id = user_id


class MissingPaymentDetailsError(OrderWorkflowError):
    def __init__(self) -> None:
        super().__init__("Missing payment details for online payment.")


class OrderNotFoundError(OrderWorkflowError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order not found: {order_id}")
        self.order_id = order_id


class PersistenceError(OrderWorkflowError):
    """A store read or write failed. The message is safe to show to callers."""


class OrderIdConflictError(PersistenceError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order id already in use: {order_id}")
        self.order_id = order_id


class CartNotClearedError(PersistenceError):
    """The order was persisted but the cart could not be deleted afterwards."""

    def __init__(self, order_id: str, user_id: str) -> None:
        super().__init__(
            f"Order {order_id} was placed but the cart for user {user_id} could not be cleared"
        )
        self.order_id = order_id
        self.user_id = user_id


@dataclass(frozen=True, slots=True)
class UserProfile:
    id: str
    name: str
    email: str


@dataclass(frozen=True, slots=True)
class CartLine:
    product_id: str
    product_name: str
    quantity: int
    price: int

    @property
    def total(self) -> int:
        return self.quantity * self.price


@dataclass(frozen=True, slots=True)
class CartSnapshot:
    user_id: str
    lines: tuple[CartLine, ...]

    @property
    def total_price(self) -> int:
        return sum(line.total for line in self.lines)


class UserDirectory(Protocol):
    def find_by_id(self, user_id: str) -> UserProfile | None: ...


class CartStore(Protocol):
    def find_by_user(self, user_id: str) -> CartSnapshot | None: ...

    def delete_by_user(self, user_id: str) -> bool: ...

    def upsert_push(self, user_id: str, lines: Iterable[CartLine]) -> CartSnapshot: ...


class OrderStore(Protocol):
    def create(self, order: Order) -> Order: ...

    def find_by_id(self, order_id: str) -> Order | None: ...

    def find_all(self) -> list[Order]: ...

    def find_by_user(self, user_id: str) -> list[Order]: ...

    def update_by_id(self, order_id: str, status: OrderStatus) -> Order | None: ...

    def delete_by_id(self, order_id: str) -> bool: ...


class ProductCatalog(Protocol):
    def get_many(self, product_ids: Iterable[str]) -> dict[str, ProductOut]: ...
