"""Order placement and order administration.

PlaceOrder runs: user lookup -> cart read -> validation -> order write -> cart delete
-> confirmation email. Validation failures happen before any write. The email is a
post-commit step; its outcome is reported in the result and never fails the order.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from uuid import uuid4

import structlog
from services.storefront.app.models.order import (
    Address,
    Order,
    OrderItem,
    OrderItemView,
    OrderStatus,
    OrderView,
    PaymentInfo,
    PaymentMethod,
    UserSummary,
)
from services.storefront.app.services.notifier_base import Notifier, NotificationError
from services.storefront.app.services.order_base import (
    CartLine,
    CartNotClearedError,
    CartSnapshot,
    CartStore,
    EmptyCartError,
    MissingPaymentDetailsError,
    OrderIdConflictError,
    OrderNotFoundError,
    OrderStore,
    PersistenceError,
    ProductCatalog,
    UserDirectory,
    UserNotFoundError,
    UserProfile,
)
from services.storefront.app.services.order_email import build_order_confirmation

logger = structlog.get_logger(__name__)

ORDER_ID_PREFIX = "ORD-"
MAX_ORDER_ID_ATTEMPTS = 3


def new_order_id() -> str:
    return f"{ORDER_ID_PREFIX}{uuid4().hex[:8]}"


@dataclass(slots=True)
class _LockEntry:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


class KeyedLocks:
    """One lock per key, held in the map only while someone is using it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._entries: dict[str, _LockEntry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    @contextmanager
    def for_key(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = self._entries[key] = _LockEntry()
            entry.holders += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._entries[key]


# Serialises placements and cancellations for the same user within this process.
_placement_locks = KeyedLocks()


@dataclass(frozen=True, slots=True)
class NotificationOutcome:
    sent: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class PlacedOrder:
    order: Order
    notification: NotificationOutcome


class OrderService:
    def __init__(
        self,
        users: UserDirectory,
        carts: CartStore,
        orders: OrderStore,
        catalog: ProductCatalog,
        notifier: Notifier,
        *,
        shop_name: str = "ElectroHub",
        order_id_factory: Callable[[], str] = new_order_id,
        locks: KeyedLocks | None = None,
    ) -> None:
        self._users = users
        self._carts = carts
        self._orders = orders
        self._catalog = catalog
        self._notifier = notifier
        self._shop_name = shop_name
        self._new_order_id = order_id_factory
        self._locks = locks if locks is not None else _placement_locks

    def place_order(
        self,
        user_id: str,
        address: Address,
        payment_method: PaymentMethod,
        payment_info: PaymentInfo | None = None,
    ) -> PlacedOrder:
        with self._locks.for_key(user_id):
            user, order = self._place(user_id, address, payment_method, payment_info)

        notification = self.notify_order_placed(user, order)
        return PlacedOrder(order=order, notification=notification)

    def _place(
        self,
        user_id: str,
        address: Address,
        payment_method: PaymentMethod,
        payment_info: PaymentInfo | None,
    ) -> tuple[UserProfile, Order]:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        cart = self._carts.find_by_user(user_id)
        if cart is None or not cart.lines:
            raise EmptyCartError(user_id)

        stored_payment_info: PaymentInfo | None = None
        if payment_method == PaymentMethod.ONLINE:
            if payment_info is None or not payment_info.payment_id:
                raise MissingPaymentDetailsError()
            stored_payment_info = PaymentInfo(
                payment_id=payment_info.payment_id, status=payment_info.status
            )

        order = self._persist(user, cart, address, payment_method, stored_payment_info)

        try:
            self._carts.delete_by_user(user_id)
        except PersistenceError as e:
            logger.error(
                "Order persisted but cart was not cleared",
                order_id=order.order_id,
                user_id=user_id,
            )
            raise CartNotClearedError(order.order_id, user_id) from e

        logger.info(
            "Order placed",
            order_id=order.order_id,
            user_id=user_id,
            total_price=order.total_price,
            payment_method=payment_method.value,
        )
        return user, order

    def _persist(
        self,
        user: UserProfile,
        cart: CartSnapshot,
        address: Address,
        payment_method: PaymentMethod,
        payment_info: PaymentInfo | None,
    ) -> Order:
        items = [
            OrderItem(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity,
                price=line.price,
                total=line.total,
            )
            for line in cart.lines
        ]

        for attempt in range(1, MAX_ORDER_ID_ATTEMPTS + 1):
            order = Order(
                order_id=self._new_order_id(),
                user_id=user.id,
                username=user.name,
                items=items,
                total_price=cart.total_price,
                address=address,
                payment_method=payment_method,
                payment_info=payment_info,
                status=OrderStatus.PLACED,
            )
            try:
                return self._orders.create(order)
            except OrderIdConflictError:
                logger.warning("Order id collision", order_id=order.order_id, attempt=attempt)

        raise PersistenceError(
            f"Could not allocate a unique order id after {MAX_ORDER_ID_ATTEMPTS} attempts"
        )

    def notify_order_placed(self, user: UserProfile, order: Order) -> NotificationOutcome:
        email = build_order_confirmation(user, order, self._shop_name)
        try:
            self._notifier.send(user.email, email.subject, email.text, email.html)
        except NotificationError as e:
            logger.warning(
                "Order confirmation email failed", order_id=order.order_id, error=str(e)
            )
            return NotificationOutcome(sent=False, error=str(e))
        except Exception as e:
            # A placed order stays placed whatever the notifier does.
            logger.exception("Order confirmation email crashed", order_id=order.order_id)
            return NotificationOutcome(sent=False, error=str(e))

        return NotificationOutcome(sent=True)

    def list_all_orders(self) -> list[OrderView]:
        orders = self._orders.find_all()

        users: dict[str, UserProfile | None] = {}
        for order in orders:
            if order.user_id not in users:
                users[order.user_id] = self._users.find_by_id(order.user_id)

        return self._resolve(orders, users)

    def list_user_orders(self, user_id: str) -> list[OrderView]:
        return self._resolve(self._orders.find_by_user(user_id), users=None)

    def _resolve(
        self, orders: list[Order], users: dict[str, UserProfile | None] | None
    ) -> list[OrderView]:
        products = self._catalog.get_many(
            item.product_id for order in orders for item in order.items
        )

        views: list[OrderView] = []
        for order in orders:
            user = users.get(order.user_id) if users is not None else None
            views.append(
                OrderView(
                    **order.model_dump(exclude={"items"}),
                    items=[
                        OrderItemView(**item.model_dump(), product=products.get(item.product_id))
                        for item in order.items
                    ],
                    user=(
                        UserSummary(id=user.id, user_name=user.name, user_email=user.email)
                        if user is not None
                        else None
                    ),
                )
            )
        return views

    def update_order_status(self, order_id: str, status: OrderStatus) -> Order:
        order = self._orders.update_by_id(order_id, status)
        if order is None:
            raise OrderNotFoundError(order_id)

        logger.info("Order status updated", order_id=order_id, status=status.value)
        return order

    def cancel_order(self, order_id: str) -> Order:
        """Delete the order and push its items back onto the user's cart.

        Lines are appended to whatever the cart already holds. Catalog stock is untouched.
        """

        order = self._orders.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        # Same lock as placement, so a concurrent cart delete cannot drop the restored lines.
        with self._locks.for_key(order.user_id):
            self._carts.upsert_push(
                order.user_id,
                [
                    CartLine(
                        product_id=item.product_id,
                        product_name=item.product_name,
                        quantity=item.quantity,
                        price=item.price,
                    )
                    for item in order.items
                ],
            )
            self._orders.delete_by_id(order_id)

        logger.info("Order cancelled", order_id=order_id, user_id=order.user_id)
        return order
