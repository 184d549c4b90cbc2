from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import Field
from services.storefront.app.models.base import CamelModel
from services.storefront.app.models.product import ProductOut


class PaymentMethod(str, Enum):
    ONLINE = "Online"
    OFFLINE = "Offline"
    CASH_ON_DELIVERY = "Cash on Delivery"


class OrderStatus(str, Enum):
    PLACED = "Placed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"


class Address(CamelModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)


class PaymentInfo(CamelModel):
    # Both optional here: a missing payment_id is a workflow error, not a schema error.
    payment_id: str | None = None
    status: str | None = None


class OrderItem(CamelModel):
    product_id: str
    product_name: str
    quantity: int = Field(..., ge=1)
    price: int
    total: int


class Order(CamelModel):
    order_id: str
    user_id: str
    username: str
    items: list[OrderItem] = Field(..., min_length=1)
    total_price: int
    address: Address
    payment_method: PaymentMethod
    payment_info: PaymentInfo | None = None
    status: OrderStatus = OrderStatus.PLACED

    created_at: datetime | None = None
    updated_at: datetime | None = None


class PlaceOrderRequest(CamelModel):
    user_id: str = Field(..., min_length=1)
    address: Address
    payment_method: PaymentMethod
    payment_info: PaymentInfo | None = None


class PlaceOrderResponse(CamelModel):
    message: str
    order: Order
    email_sent: bool


class UpdateOrderStatusRequest(CamelModel):
    status: OrderStatus


class OrderResponse(CamelModel):
    message: str
    order: Order


class UserSummary(CamelModel):
    id: str
    user_name: str
    user_email: str


class OrderItemView(OrderItem):
    product: ProductOut | None = None


class OrderView(Order):
    """An order with its references resolved to current (not snapshot) data."""

    items: list[OrderItemView] = Field(..., min_length=1)
    user: UserSummary | None = None


class OrderListResponse(CamelModel):
    message: str
    orders: list[OrderView]
