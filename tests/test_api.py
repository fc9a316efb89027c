from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_cart_repo, get_product_client, get_store
from app.data.database import get_db
from app.main import app
from tests.conftest import FlakyStore


CART = {"X-Cart-Session": "browser-1"}


@pytest.fixture
def client(session_factory, cart_repo, product_client):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cart_repo] = lambda: cart_repo
    app.dependency_overrides[get_product_client] = lambda: product_client

    with patch("app.services.notification_service.send_new_order_task") as task:
        with TestClient(app) as c:
            c.announce_task = task
            yield c

    app.dependency_overrides.clear()


def _register(client, user_id, display_name=None, role="buyer"):
    resp = client.post("/users/", json={"id": user_id, "display_name": display_name, "role": role})
    assert resp.status_code == 200
    return {"X-User-Id": user_id}


def _add(client, item_id, price, quantity=1, user_id=None, name=None):
    payload = {"id": item_id, "name": name or item_id, "price": price, "quantity": quantity}
    if user_id:
        payload["userId"] = user_id
    return client.post("/cart/items", json=payload, headers=CART)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_users_roundtrip(client):
    _register(client, "farmer-1", "Ramesh", role="farmer")

    assert client.get("/users/farmer-1").json() == {"id": "farmer-1", "display_name": "Ramesh", "role": "farmer"}
    assert client.get("/users/nobody").status_code == 404

    me = client.get("/users/me", headers={"X-User-Id": "farmer-1"})
    assert me.json() == {"uid": "farmer-1", "display_name": "Ramesh"}
    assert client.get("/users/me").status_code == 401


def test_cart_crud(client):
    _add(client, "x", 2.0, quantity=1)
    resp = _add(client, "x", 2.0, quantity=2)

    body = resp.json()
    assert body["count"] == 3
    assert body["total"] == 6.0
    assert body["items"][0]["quantity"] == 3

    resp = client.patch("/cart/items/x", json={"quantity": 5}, headers=CART)
    assert resp.json()["count"] == 5

    resp = client.patch("/cart/items/nope", json={"quantity": 2}, headers=CART)
    assert resp.status_code == 200
    assert resp.json()["count"] == 5

    resp = client.delete("/cart/items/x", headers=CART)
    assert resp.json()["items"] == []


def test_cart_is_scoped_to_session_header(client):
    _add(client, "x", 1.0)

    assert client.get("/cart/", headers={"X-Cart-Session": "other"}).json()["count"] == 0
    assert client.get("/cart/", headers=CART).json()["count"] == 1
    assert client.get("/cart/").status_code == 422


def test_add_shop_item_and_missing_product(client):
    resp = client.post("/cart/shop-items", json={"product_id": "prod-01", "quantity": 2}, headers=CART)
    assert resp.json()["items"][0]["userId"] is None

    resp = client.post("/cart/shop-items", json={"product_id": "prod-99"}, headers=CART)
    assert resp.status_code == 404


def test_add_listing_and_sample(client, session_factory):
    db = session_factory()
    try:
        from app.data.seed import seed
        seed(db)
    finally:
        db.close()

    client.post("/cart/listings/crop-01", json={"quantity": 2}, headers=CART)
    resp = client.post("/cart/listings/crop-01/sample", headers=CART)

    items = resp.json()["items"]
    assert [i["id"] for i in items] == ["crop-01", "crop-01-sample"]
    assert items[1]["price"] == 0
    assert items[1]["isSample"] is True

    assert client.post("/cart/listings/crop-02/sample", headers=CART).status_code == 400


def test_checkout_requires_identity(client):
    _add(client, "c1", 10, user_id="u1")

    resp = client.post("/cart/checkout", headers=CART)

    assert resp.status_code == 401
    assert resp.json()["detail"]["message_key"] == "marketplace.authErrorDescription"
    assert client.get("/cart/", headers=CART).json()["count"] == 1


def test_checkout_creates_orders_and_notifications(client):
    buyer = _register(client, "buyer-1", "Asha")
    farmer = _register(client, "u1", "Ramesh", role="farmer")

    _add(client, "c1", 10, quantity=2, user_id="u1", name="wheat")
    _add(client, "c2", 5, quantity=1, user_id="u1", name="rice")
    _add(client, "s1", 20, quantity=1)

    resp = client.post("/cart/checkout", headers={**CART, **buyer})

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "marketplace"
    assert body["message_key"] == "cart.checkoutSuccessDescription"
    assert [(s["seller_id"], s["total_amount"]) for s in body["sellers"]] == [("u1", 25.0)]
    assert client.get("/cart/", headers=CART).json()["count"] == 0

    orders = client.get("/orders/", headers=farmer).json()
    assert len(orders) == 1
    assert orders[0]["buyerName"] == "Asha"
    assert orders[0]["totalAmount"] == 25.0
    assert orders[0]["status"] == "Processing"
    assert client.get(f"/orders/{orders[0]['id']}", headers=farmer).status_code == 200
    assert client.get("/orders/", headers=buyer).json() == []

    notes = client.get("/notifications/?lang=hi", headers=farmer).json()
    assert notes[0]["message"] == "Asha ने ऑर्डर दिया: गेहूं (x2), चावल (x1)"
    assert notes[0]["read"] is False

    client.announce_task.delay.assert_called_once_with("u1", orders[0]["id"])

    assert client.delete("/notifications/", headers=farmer).json() == {"removed": 1}
    assert client.get("/notifications/", headers=farmer).json() == []


def test_checkout_shop_only(client):
    buyer = _register(client, "buyer-1")
    client.post("/cart/shop-items", json={"product_id": "prod-01"}, headers=CART)

    body = client.post("/cart/checkout", headers={**CART, **buyer}).json()

    assert body["status"] == "shop_only"
    assert body["message_key"] == "cart.shopCheckoutSuccessDescription"
    assert client.get("/cart/", headers=CART).json()["count"] == 0


def test_checkout_when_cart_storage_is_down(client, cart_repo):
    buyer = _register(client, "buyer-1")
    _add(client, "c1", 10, user_id="u1")
    stored = cart_repo.data["cart:browser-1"]

    cart_repo.fail_load = True
    resp = client.post("/cart/checkout?lang=en", headers={**CART, **buyer})
    cart_repo.fail_load = False

    assert resp.status_code == 503
    assert resp.json()["detail"]["message_key"] == "cart.unavailableDescription"
    assert cart_repo.data["cart:browser-1"] == stored
    assert client.get("/cart/", headers=CART).json()["count"] == 1


def test_checkout_partial_failure_reports_committed_sellers(client, session_factory):
    buyer = _register(client, "buyer-1")

    def flaky_store():
        db = session_factory()
        try:
            yield FlakyStore(db, fail_on=2)
        finally:
            db.close()

    app.dependency_overrides[get_store] = flaky_store

    _add(client, "a", 1, user_id="A")
    _add(client, "b", 1, user_id="B")

    resp = client.post("/cart/checkout?lang=en", headers={**CART, **buyer})

    assert resp.status_code == 502
    detail = resp.json()["detail"]
    assert detail["message_key"] == "cart.checkoutFailedDescription"
    assert detail["message"] == "There was a problem with your checkout. Please try again."
    assert detail["failed_seller_id"] == "B"
    assert [s["seller_id"] for s in detail["committed_sellers"]] == ["A"]
    assert client.get("/cart/", headers=CART).json()["count"] == 2

    del app.dependency_overrides[get_store]
    assert len(client.get("/orders/", headers=_register(client, "A")).json()) == 1


def test_orders_require_identity(client):
    assert client.get("/orders/").status_code == 401
    assert client.get("/notifications/").status_code == 401


LISTING = {
    "cropName": "wheat",
    "retailPrice": 1.5,
    "wholesalePrice": 1.1,
    "retailQuantity": 100,
    "wholesaleQuantity": 1000,
    "unit": "kg",
    "hasSampleBag": True,
}


def test_listings_crud(client):
    farmer = _register(client, "f1", "Ramesh", role="farmer")
    other = _register(client, "f2", role="farmer")

    created = client.post("/listings/", json=LISTING, headers=farmer).json()
    assert created["userId"] == "f1"
    assert created["imageId"] == "market-wheat"
    assert created["createdAt"]

    client.post("/listings/", json={**LISTING, "cropName": "rice"}, headers=other)
    assert [l["id"] for l in client.get("/listings/", headers=farmer).json()] == [created["id"]]

    resp = client.put(f"/listings/{created['id']}", json={**LISTING, "retailPrice": 2.0}, headers=farmer)
    assert resp.json()["retailPrice"] == 2.0
    assert resp.json()["createdAt"] == created["createdAt"]

    assert client.delete(f"/listings/{created['id']}", headers=other).status_code == 403
    assert client.delete(f"/listings/{created['id']}", headers=farmer).status_code == 204
    assert client.get(f"/listings/{created['id']}").status_code == 404
    assert client.post("/listings/", json=LISTING).status_code == 401


def test_offer_flow_notifies_farmer_then_buyer(client):
    farmer = _register(client, "f1", "Ramesh", role="farmer")
    buyer = _register(client, "b1", "Asha")
    listing = client.post("/listings/", json=LISTING, headers=farmer).json()

    resp = client.post("/offers/", json={"cropListingId": listing["id"], "quantity": 200}, headers=buyer)
    assert resp.status_code == 200
    offer = resp.json()
    assert offer["status"] == "pending"
    assert offer["offerPrice"] == 1.1
    assert offer["farmerId"] == "f1"

    assert [o["id"] for o in client.get("/offers/received", headers=farmer).json()] == [offer["id"]]
    assert [o["id"] for o in client.get("/offers/made", headers=buyer).json()] == [offer["id"]]

    notes = client.get("/notifications/?lang=en", headers=farmer).json()
    assert notes[0]["message"] == "Asha made an offer on your Wheat."

    patch_url = f"/offers/{offer['id']}"
    assert client.patch(patch_url, json={"status": "accepted"}, headers=buyer).status_code == 403
    assert client.patch(patch_url, json={"status": "accepted"}, headers=farmer).json()["status"] == "accepted"
    assert client.patch(patch_url, json={"status": "rejected"}, headers=farmer).status_code == 409

    notes = client.get("/notifications/?lang=en", headers=buyer).json()
    assert notes[0]["message"] == "Your offer for Wheat was accepted."
    assert notes[0]["link"] == "/dashboard/my-offers"


def test_offer_on_unknown_listing(client):
    buyer = _register(client, "b1")

    resp = client.post("/offers/", json={"cropListingId": "nope", "quantity": 1}, headers=buyer)

    assert resp.status_code == 404
    assert client.patch("/offers/nope", json={"status": "accepted"}, headers=buyer).status_code == 404
