import pytest
from fastapi.testclient import TestClient

from cart_engine.core.config import Settings
from cart_engine.main import create_app


@pytest.fixture
def client(tmp_path):
    settings = Settings(
        storage_backend="file",
        storage_dir=str(tmp_path),
        mock_delay_scale=0,
    )
    with TestClient(create_app(settings)) as client:
        yield client


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_empty_cart(client):
    body = client.get("/api/cart").json()

    assert body["cart"]["items"] == []
    assert body["cart"]["summary"]["total_payable"] == 0
    assert body["insights"]["free_delivery"]["remaining"] == 500


def test_add_update_remove(client):
    body = client.post("/api/cart/items", json={"product_id": "prod-002", "quantity": 2}).json()
    item = body["cart"]["items"][0]
    assert item["total_price"] == 54
    assert body["cart"]["summary"]["total_payable"] == 54 + 50 + 10

    body = client.put(f"/api/cart/items/{item['id']}", json={"quantity": 4}).json()
    assert body["cart"]["items"][0]["quantity"] == 4

    body = client.delete(f"/api/cart/items/{item['id']}").json()
    assert body["cart"]["items"] == []
    assert body["cart"]["summary"]["total_payable"] == 60


def test_unknown_product_and_item(client):
    assert client.post("/api/cart/items", json={"product_id": "nope"}).status_code == 404
    assert client.put("/api/cart/items/nope", json={"quantity": 1}).status_code == 404
    assert client.post("/api/cart/items", json={"product_id": "prod-006"}).status_code == 400


def test_coupon_flow(client):
    client.post("/api/cart/items", json={"product_id": "prod-004"})

    rejected = client.post("/api/cart/coupon", json={"code": "FLAT50"}).json()
    assert rejected["result"]["applied"] is False
    assert rejected["result"]["shortfall"] == 180
    assert rejected["cart"]["applied_coupon"] is None

    applied = client.post("/api/cart/coupon", json={"code": "SAVE10"}).json()
    assert applied["result"]["applied"] is True
    assert applied["cart"]["summary"]["discount"] == 32

    removed = client.delete("/api/cart/coupon").json()
    assert removed["cart"]["applied_coupon"] is None
    assert client.delete("/api/cart/coupon").status_code == 200


def test_address_and_checkout(client):
    client.post("/api/cart/items", json={"product_id": "prod-003", "option_id": "opt-003-5kg"})
    client.put("/api/cart/delivery-option", json={"type": "instant"})

    address = client.get("/api/catalog/addresses").json()[0]
    body = client.put("/api/cart/address", json=address).json()
    assert body["result"]["selected"] is True
    assert body["cart"]["delivery_time"] == "30-60 mins"

    receipt = client.post("/api/cart/checkout").json()
    assert receipt["summary"]["total_payable"] == 899 + 10
    assert client.get("/api/cart").json()["cart"]["items"] == []


def test_checkout_empty_cart(client):
    assert client.post("/api/cart/checkout").status_code == 400


def test_cart_survives_restart(tmp_path):
    settings = Settings(storage_backend="file", storage_dir=str(tmp_path), mock_delay_scale=0)

    with TestClient(create_app(settings)) as client:
        client.post("/api/cart/items", json={"product_id": "prod-005", "quantity": 3})

    with TestClient(create_app(settings)) as client:
        cart = client.get("/api/cart").json()["cart"]

    assert cart["items"][0]["product_id"] == "prod-005"
    assert cart["summary"]["item_total"] == 150


def test_catalog_routes(client):
    assert client.get("/api/catalog/coupons/SAVE10").status_code == 200
    assert client.get("/api/catalog/coupons/BOGUS").status_code == 404
    assert client.get("/api/catalog/products/prod-001").json()["options"][0]["id"] == "opt-001-1kg"
    assert len(client.get("/api/cart/recommendations").json()) == 4


def test_startup_survives_unreadable_snapshot(tmp_path):
    (tmp_path / "cart.json").write_bytes(b"\xff\xfe\x00garbage")
    settings = Settings(storage_backend="file", storage_dir=str(tmp_path), mock_delay_scale=0)

    with TestClient(create_app(settings)) as client:
        assert client.get("/api/cart").json()["cart"]["items"] == []
        response = client.post("/api/cart/items", json={"product_id": "prod-005"})

    assert response.status_code == 200
