from __future__ import annotations

from dataclasses import dataclass
from html import escape

from services.storefront.app.models.order import Address, Order
from services.storefront.app.services.order_base import UserProfile

CURRENCY = "₹"


@dataclass(frozen=True, slots=True)
class ConfirmationEmail:
    subject: str
    text: str
    html: str


def _format_address(address: Address) -> str:
    return f"{address.street}, {address.city}, {address.state}, {address.postal_code}"


def build_order_confirmation(
    user: UserProfile, order: Order, shop_name: str = "ElectroHub"
) -> ConfirmationEmail:
    payment = order.payment_method.value
    address = _format_address(order.address)

    text_lines = [
        f"Hello {user.name},",
        "",
        "Your order has been placed successfully.",
        "",
        f"Order ID: {order.order_id}",
    ]
    for item in order.items:
        text_lines.append(
            f"  {item.product_name} - {item.quantity} x {CURRENCY}{item.price}"
            f" = {CURRENCY}{item.total}"
        )
    text_lines += [
        f"Total: {CURRENCY}{order.total_price}",
        f"Payment: {payment}",
        f"Delivery address: {address}",
        "",
        "We will notify you once it is shipped.",
        "",
        f"- {shop_name}",
    ]

    rows = "".join(
        f"<li>{escape(item.product_name)} - {item.quantity} x {CURRENCY}{item.price}"
        f" = {CURRENCY}{item.total}</li>"
        for item in order.items
    )
    html = (
        f"<h2>Thank You for Your Order, {escape(user.name)}!</h2>"
        f"<p><strong>Order ID:</strong> {escape(order.order_id)}</p>"
        "<p><strong>Order Summary:</strong></p>"
        f"<ul>{rows}</ul>"
        f"<p><strong>Total Amount:</strong> {CURRENCY}{order.total_price}</p>"
        f"<p><strong>Payment Method:</strong> {escape(payment)}</p>"
        f"<p><strong>Delivery Address:</strong> {escape(address)}</p>"
        "<p>We will notify you once your order is shipped.</p>"
        "<br>"
        "<p>Thanks for shopping with us!</p>"
        f"<strong>{escape(shop_name)}</strong>"
    )

    return ConfirmationEmail(
        subject="Your Order Invoice - Thank You!",
        text="\n".join(text_lines),
        html=html,
    )
