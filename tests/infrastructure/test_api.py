"""HTTP API tests with FastAPI's TestClient over in-memory fakes."""

import json

import pytest
from fastapi.testclient import TestClient

from storefront.infrastructure.api.app_factory import create_app
from storefront.infrastructure.api.security import CSRF_HEADER
from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.config.settings import Settings
from tests.fakes import (
    FakeCartRepository,
    FakeOrderRepository,
    FakePaymentGateway,
    FakeProductRepository,
    make_product,
)

BILLING = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada@example.com",
    "address_1": "1 Rue de Rivoli",
    "postcode": "75001",
    "city": "Paris",
    "country": "FR",
    "phone": "0100000000",
}


@pytest.fixture
def container(tmp_path) -> Container:
    settings = Settings(csrf_secret="test-secret", data_dir=tmp_path, _env_file=None)
    return Container(
        settings,
        product_repo=FakeProductRepository([
            make_product(1, 1000, "20", name="Mug"),
            make_product(2, 500, "20", currency="USD"),
        ]),
        order_repo=FakeOrderRepository(),
        cart_repo=FakeCartRepository(),
        gateway=FakePaymentGateway(),
    )


@pytest.fixture
def client(container) -> TestClient:
    return TestClient(create_app(container=container))


def _session(client: TestClient) -> dict:
    response = client.get("/api/v1/session")
    assert response.status_code == 200
    return {CSRF_HEADER: response.json()["csrf_token"]}


def _completed_event(session_id: str, token: str) -> bytes:
    return json.dumps({
        "type": "checkout.session.completed",
        "session_id": session_id,
        "cart_token": token,
        "amount_total": 2000,
        "currency": "EUR",
    }).encode()


class TestSecurity:

    def test_health_is_open(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_no_session_cookie(self, client):
        response = client.get("/api/v1/cart")
        assert response.status_code == 403

    def test_missing_csrf_token(self, client):
        _session(client)
        response = client.post("/api/v1/cart/add", json={"product_id": 1})
        assert response.status_code == 403

    def test_wrong_csrf_token(self, client):
        _session(client)
        response = client.get("/api/v1/cart", headers={CSRF_HEADER: "forged"})
        assert response.status_code == 403

    def test_session_keeps_existing_cookie(self, client):
        first = _session(client)
        assert _session(client) == first


class TestCartEndpoints:

    def test_add_then_show(self, client):
        headers = _session(client)
        response = client.post("/api/v1/cart/add", json={"product_id": 1, "qty": 2}, headers=headers)
        assert response.status_code == 200
        body = response.json()
        assert body["total_gross"] == 2000
        assert body["lines"][0]["name"] == "Mug"

        shown = client.get("/api/v1/cart", headers=headers).json()
        assert shown == body

    def test_set_qty_remove_clear(self, client):
        headers = _session(client)
        client.post("/api/v1/cart/add", json={"product_id": 1}, headers=headers)
        body = client.post("/api/v1/cart/set-qty", json={"product_id": 1, "qty": 4}, headers=headers).json()
        assert body["item_count"] == 4

        body = client.post("/api/v1/cart/remove", json={"product_id": 1}, headers=headers).json()
        assert body["lines"] == []

        client.post("/api/v1/cart/add", json={"product_id": 1}, headers=headers)
        body = client.post("/api/v1/cart/clear", headers=headers).json()
        assert body["lines"] == []

    def test_invalid_product(self, client):
        headers = _session(client)
        response = client.post("/api/v1/cart/add", json={"product_id": 99}, headers=headers)
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid product."

    def test_malformed_body(self, client):
        headers = _session(client)
        response = client.post("/api/v1/cart/add", json={"qty": 1}, headers=headers)
        assert response.status_code == 400
        assert response.json()["detail"][0]["field"] == "product_id"


class TestCheckoutEndpoints:

    def test_save_customer(self, client, container):
        headers = _session(client)
        response = client.post("/api/v1/checkout/customer", json={"billing": BILLING}, headers=headers)
        assert response.json() == {"ok": True}
        assert container.gateway.customers[0].email == "ada@example.com"

    def test_save_customer_missing_field(self, client):
        headers = _session(client)
        billing = dict(BILLING, city="")
        response = client.post("/api/v1/checkout/customer", json={"billing": billing}, headers=headers)
        assert response.status_code == 400
        assert response.json()["field"] == "city"

    @pytest.mark.parametrize("email", ["a@", "a b@c"])
    def test_save_customer_malformed_email(self, client, container, email):
        headers = _session(client)
        billing = dict(BILLING, email=email)
        response = client.post("/api/v1/checkout/customer", json={"billing": billing}, headers=headers)
        assert response.status_code == 400
        assert response.json()["field"] == "email"
        assert container.gateway.customers == []

    def test_empty_cart_checkout(self, client, container):
        headers = _session(client)
        response = client.post("/api/v1/checkout", headers=headers)
        assert response.status_code == 400
        assert container.gateway.sessions == []

    def test_mixed_currency_checkout(self, client, container):
        headers = _session(client)
        client.post("/api/v1/cart/add", json={"product_id": 1}, headers=headers)
        client.post("/api/v1/cart/add", json={"product_id": 2}, headers=headers)
        response = client.post("/api/v1/checkout", headers=headers)
        assert response.status_code == 400
        assert "currencies" in response.json()["error"]

    def test_provider_failure_is_generic_500(self, client, container):
        headers = _session(client)
        client.post("/api/v1/cart/add", json={"product_id": 1}, headers=headers)
        container.gateway.fail = True
        response = client.post("/api/v1/checkout", headers=headers)
        assert response.status_code == 500
        assert response.json() == {"error": "Payment provider error."}

    def test_full_flow_with_duplicate_webhook(self, client, container):
        headers = _session(client)
        client.post("/api/v1/cart/add", json={"product_id": 1, "qty": 2}, headers=headers)
        checkout = client.post("/api/v1/checkout", headers=headers).json()
        token = client.cookies.get("storefront_cart")

        payload = _completed_event(checkout["session_id"], token)
        first = client.post("/api/v1/webhook/stripe", content=payload,
                            headers={"Stripe-Signature": "valid"})
        second = client.post("/api/v1/webhook/stripe", content=payload,
                             headers={"Stripe-Signature": "valid"})

        assert first.json()["order_id"] == 1
        assert second.json() == {"ok": True, "order_id": 1, "already_processed": True, "ignored": False}
        assert len(container.order_repo.list_all()) == 1
        assert client.get("/api/v1/cart", headers=headers).json()["lines"] == []

    def test_webhook_bad_signature(self, client):
        response = client.post("/api/v1/webhook/stripe", content=b"{}",
                               headers={"Stripe-Signature": "forged"})
        assert response.status_code == 400
