from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from src.storefront.storefront.core.enums import Role
from src.storefront.storefront.payments.gateway.fake_adapter import WEBHOOK_SIGNATURE


def _auth(tokens, user) -> dict:
    return {"Authorization": f"Bearer {tokens.issue_access(user)}"}


@pytest.fixture
def admin(store):
    return store.add_user(name="Boss", email="boss@x.com", role=Role.ADMIN)


def test_health(client):
    res = client.get("/health")

    assert res.status_code == 200
    assert res.get_json() == {"success": True, "message": "Server is running"}


def test_ann_registers_logs_in_and_checks_out(store, client):
    store.add_product(name="Notebook", price="9.99", inventory=3, product_id=7)

    res = client.post("/api/v1/auth/register", json={"name": "Ann", "email": "ann@x.com", "password": "secret123"})
    assert res.status_code == 201
    assert res.get_json()["data"]["email"] == "ann@x.com"

    res = client.post("/api/v1/auth/login", json={"email": "ann@x.com", "password": "secret123"})
    assert res.status_code == 200
    headers = {"Authorization": f"Bearer {res.get_json()['token']}"}

    res = client.post("/api/v1/cart/items", json={"productId": 7, "quantity": 2}, headers=headers)
    assert res.get_json()["data"]["total"] == 19.98

    res = client.post("/api/v1/orders", headers=headers)
    assert res.status_code == 201
    assert res.get_json()["data"]["total"] == 19.98
    assert res.get_json()["data"]["status"] == "pending"

    assert store.products[7].inventory == 1
    assert client.get("/api/v1/cart", headers=headers).get_json()["data"]["items"] == []


def test_login_cookie_authenticates_and_refreshes(store, client):
    store.add_user()
    client.post("/api/v1/auth/login", json={"email": "ann@x.com", "password": "secret123"})

    assert client.get("/api/v1/auth/me").get_json()["data"]["email"] == "ann@x.com"

    res = client.post("/api/v1/auth/refresh-token")
    assert res.status_code == 200
    assert res.get_json()["token"]


def test_logout_overwrites_cookies(store, tokens, client):
    ann = store.add_user()

    res = client.get("/api/v1/auth/logout", headers=_auth(tokens, ann))

    cookies = res.headers.getlist("Set-Cookie")
    assert res.status_code == 200
    assert any(c.startswith("token=none") for c in cookies)
    assert any(c.startswith("refreshToken=none") for c in cookies)


def test_logout_with_expired_access_cookie_still_clears_both(store, tokens, client):
    ann = store.add_user()
    yesterday = datetime.now(timezone.utc) - timedelta(days=1)
    client.set_cookie("token", tokens.issue_access(ann, now=yesterday))
    client.set_cookie("refreshToken", tokens.issue_refresh(ann))

    res = client.get("/api/v1/auth/logout")

    cookies = res.headers.getlist("Set-Cookie")
    assert res.status_code == 200
    assert any(c.startswith("token=none") for c in cookies)
    assert any(c.startswith("refreshToken=none") for c in cookies)


def test_bad_login_is_401_envelope(store, client):
    store.add_user()

    res = client.post("/api/v1/auth/login", json={"email": "ann@x.com", "password": "nope"})

    assert res.status_code == 401
    assert res.get_json() == {"success": False, "message": "Invalid credentials", "error": "unauthenticated"}


def test_protected_route_without_token(client):
    res = client.get("/api/v1/cart")

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_admin_routes_reject_regular_users(store, tokens, client):
    ann = store.add_user()

    res = client.post("/api/v1/products", json={"name": "Lamp", "price": 10}, headers=_auth(tokens, ann))

    assert res.status_code == 403
    assert res.get_json()["error"] == "forbidden"


def test_admin_manages_products_and_inventory(tokens, admin, client):
    headers = _auth(tokens, admin)

    res = client.post("/api/v1/products", json={"name": "Lamp", "price": 10, "inventory": 2}, headers=headers)
    assert res.status_code == 201
    product_id = res.get_json()["data"]["id"]

    res = client.put(f"/api/v1/products/{product_id}/inventory", json={"inventory": 9}, headers=headers)
    assert res.get_json()["data"]["inventory"] == 9

    res = client.get("/api/v1/products?category=&minPrice=5&page=1&limit=5")
    assert res.get_json()["count"] == 1
    assert res.get_json()["pagination"] == {"page": 1, "limit": 5}

    assert client.delete(f"/api/v1/products/{product_id}", headers=headers).status_code == 200
    assert client.get(f"/api/v1/products/{product_id}").status_code == 404


def test_validation_error_is_400(tokens, admin, client):
    res = client.post("/api/v1/products", json={"name": "Lamp", "price": -1}, headers=_auth(tokens, admin))

    assert res.status_code == 400
    assert res.get_json()["error"] == "validation_error"


def test_insufficient_inventory_is_409_with_product_id(store, tokens, client):
    ann = store.add_user()
    lamp = store.add_product(name="Lamp", inventory=1)

    res = client.post("/api/v1/cart/items", json={"productId": lamp.product_id, "quantity": 2}, headers=_auth(tokens, ann))

    assert res.status_code == 409
    assert res.get_json()["error"] == "insufficient_inventory"
    assert res.get_json()["productId"] == lamp.product_id


def test_empty_cart_order_is_400(store, tokens, client):
    ann = store.add_user()

    res = client.post("/api/v1/orders", headers=_auth(tokens, ann))

    assert res.status_code == 400
    assert res.get_json()["error"] == "empty_cart"


def test_other_users_order_is_403(store, tokens, container, client):
    ann = store.add_user()
    bob = store.add_user(name="Bob", email="bob@x.com")
    pen = store.add_product(name="Pen", inventory=5)
    container.cart_service.add_item(ann.user_id, pen.product_id, 1)
    order = container.order_service.create_from_cart(ann.user_id)

    assert client.get(f"/api/v1/orders/{order.order_id}", headers=_auth(tokens, bob)).status_code == 403
    assert client.get(f"/api/v1/orders/{order.order_id}", headers=_auth(tokens, ann)).status_code == 200


def test_admin_order_status_and_listing(store, tokens, admin, container, client):
    ann = store.add_user()
    pen = store.add_product(name="Pen", inventory=5)
    container.cart_service.add_item(ann.user_id, pen.product_id, 1)
    order = container.order_service.create_from_cart(ann.user_id)
    headers = _auth(tokens, admin)

    res = client.put(f"/api/v1/orders/{order.order_id}/status", json={"status": "processing"}, headers=headers)
    assert res.get_json()["data"]["status"] == "processing"

    res = client.get("/api/v1/orders/admin/all?status=processing", headers=headers)
    assert [o["id"] for o in res.get_json()["data"]] == [order.order_id]


def test_payment_flow_over_http(store, tokens, gateway, client):
    ann = store.add_user()
    pen = store.add_product(name="Pen", price="2.50", inventory=5)
    headers = _auth(tokens, ann)
    client.post("/api/v1/cart/items", json={"productId": pen.product_id, "quantity": 2}, headers=headers)

    intent_id = client.post("/api/v1/payments/create-payment-intent", headers=headers).get_json()["data"]["paymentIntentId"]
    gateway.complete(intent_id)
    res = client.post("/api/v1/payments/confirm-payment", json={"paymentIntentId": intent_id}, headers=headers)
    assert res.status_code == 201
    order_id = res.get_json()["data"]["id"]

    payload = json.dumps(
        {"type": "payment_intent.succeeded", "data": {"object": {"object": "payment_intent", "id": intent_id}}}
    )
    res = client.post("/api/v1/payments/webhook", data=payload, headers={"Stripe-Signature": WEBHOOK_SIGNATURE})
    assert res.get_json() == {"received": True}

    receipt = client.get(f"/api/v1/payments/receipt/{order_id}", headers=headers).get_json()["data"]
    assert receipt["order"]["status"] == "processing"
    assert receipt["payment"]["amount"] == 5.0


def test_webhook_with_bad_signature_is_400(client):
    res = client.post("/api/v1/payments/webhook", data=b"{}", headers={"Stripe-Signature": "nope"})

    assert res.status_code == 400
    assert res.get_json()["message"].startswith("Webhook Error")


def test_admin_dashboard_and_users(store, tokens, admin, client):
    ann = store.add_user()
    headers = _auth(tokens, admin)

    assert client.get("/api/v1/admin/dashboard", headers=headers).get_json()["data"]["totalUsers"] == 2
    res = client.put(f"/api/v1/admin/users/{ann.user_id}/role", json={"role": "admin"}, headers=headers)
    assert res.get_json()["data"]["role"] == "admin"
    assert client.get("/api/v1/admin/sales-report?period=yearly", headers=headers).status_code == 200


def test_unknown_route_is_json_404(client):
    res = client.get("/api/v1/nothing-here")

    assert res.status_code == 404
    assert res.get_json()["error"] == "not_found"


def test_non_object_json_body_is_treated_as_empty(store, tokens, client):
    ann = store.add_user()

    res = client.post("/api/v1/auth/login", json=["ann@x.com", "secret123"])
    assert res.status_code == 400
    assert res.get_json()["message"] == "Please provide an email and password"

    res = client.post("/api/v1/cart/items", json=[1, 2], headers=_auth(tokens, ann))
    assert res.status_code == 400


def test_login_with_non_string_email_is_400(store, client):
    store.add_user()

    res = client.post("/api/v1/auth/login", json={"email": 1, "password": "secret123"})

    assert res.status_code == 400
    assert res.get_json()["error"] == "validation_error"
