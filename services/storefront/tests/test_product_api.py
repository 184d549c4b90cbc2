from __future__ import annotations

from fastapi.testclient import TestClient


def _add(client: TestClient, **overrides) -> dict:
    payload = {
        "product_name": "Smart Watch",
        "product_description": "AMOLED, 7 day battery",
        "product_price": 4999,
        "product_category": "Wearables",
        "product_brand": "Pulse",
        "product_image": "https://cdn.example.com/watch.png",
        **overrides,
    }
    resp = client.post("/addProduct", json=payload)
    assert resp.status_code == 200
    return resp.json()


def test_add_and_get_product(client: TestClient) -> None:
    created = _add(client)
    assert created["message"] == "Product added successfully"

    product_id = created["data"]["id"]
    resp = client.get(f"/getProductById/{product_id}")
    assert resp.status_code == 200

    data = resp.json()
    assert data["product_name"] == "Smart Watch"
    assert data["product_price"] == 4999
    assert data["product_image"] == "https://cdn.example.com/watch.png"


def test_add_product_validates_price(client: TestClient) -> None:
    resp = client.post("/addProduct", json={"product_name": "Freebie", "product_price": -1})
    assert resp.status_code == 422


def test_get_missing_product_is_404(client: TestClient) -> None:
    resp = client.get("/getProductById/missing")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Product not found"


def test_edit_product_updates_only_given_fields(client: TestClient) -> None:
    product_id = _add(client)["data"]["id"]

    resp = client.put(f"/editProduct/{product_id}", json={"product_price": 3999})
    assert resp.status_code == 200
    assert resp.json()["message"] == "Product updated successfully"

    data = resp.json()["data"]
    assert data["product_price"] == 3999
    assert data["product_name"] == "Smart Watch"
    assert data["product_brand"] == "Pulse"


def test_edit_missing_product_is_404(client: TestClient) -> None:
    resp = client.put("/editProduct/missing", json={"product_price": 1})
    assert resp.status_code == 404


def test_delete_product(client: TestClient) -> None:
    product_id = _add(client)["data"]["id"]

    resp = client.delete(f"/deleteProduct/{product_id}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Product deleted successfully"}

    assert client.get(f"/getProductById/{product_id}").status_code == 404
    assert client.delete(f"/deleteProduct/{product_id}").status_code == 404


def test_cart_falls_back_to_line_snapshot_for_deleted_product(
    client: TestClient, make_user, make_product, db, address: dict
) -> None:
    from services.storefront.app.services.order_base import CartLine
    from services.storefront.app.services.sql_stores import SqlCartStore

    user_id = make_user()
    product_id = make_product(name="Old Cable", price=300)
    SqlCartStore(db).upsert_push(
        user_id, [CartLine(product_id=product_id, product_name="Old Cable", quantity=1, price=250)]
    )
    assert client.delete(f"/deleteProduct/{product_id}").status_code == 200

    resp = client.post(
        "/placeOrder",
        json={"userId": user_id, "address": address, "paymentMethod": "Offline"},
    )
    assert resp.status_code == 201
    assert resp.json()["order"]["items"][0]["productName"] == "Old Cable"
    assert resp.json()["order"]["totalPrice"] == 250
