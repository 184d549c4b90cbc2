from services.storefront.app.models.order import Address, Order, OrderItem, PaymentMethod
from services.storefront.app.services.order_base import UserProfile
from services.storefront.app.services.order_email import build_order_confirmation


def _order() -> Order:
    return Order(
        order_id="ORD-1a2b3c4d",
        user_id="u-1",
        username="Asha",
        items=[
            OrderItem(product_id="p-1", product_name="Earbuds <Pro>", quantity=2, price=100, total=200),
            OrderItem(product_id="p-2", product_name="Cable", quantity=1, price=50, total=50),
        ],
        total_price=250,
        address=Address(street="12 MG Road", city="Bengaluru", state="Karnataka", postal_code="560001"),
        payment_method=PaymentMethod.ONLINE,
    )


def test_confirmation_contains_order_summary() -> None:
    user = UserProfile(id="u-1", name="Asha", email="asha@example.com")
    email = build_order_confirmation(user, _order(), shop_name="ElectroHub")

    assert email.subject == "Your Order Invoice - Thank You!"
    assert "Hello Asha," in email.text
    assert "Order ID: ORD-1a2b3c4d" in email.text
    assert "Cable - 1 x ₹50 = ₹50" in email.text
    assert "Total: ₹250" in email.text
    assert "Payment: Online" in email.text
    assert email.text.endswith("- ElectroHub")

    assert "<strong>Order ID:</strong> ORD-1a2b3c4d" in email.html
    assert "₹250" in email.html
    assert "12 MG Road, Bengaluru, Karnataka, 560001" in email.html


def test_confirmation_html_is_escaped() -> None:
    user = UserProfile(id="u-1", name="<script>", email="x@example.com")
    email = build_order_confirmation(user, _order())

    assert "<script>" not in email.html
    assert "&lt;script&gt;" in email.html
    assert "Earbuds &lt;Pro&gt;" in email.html
