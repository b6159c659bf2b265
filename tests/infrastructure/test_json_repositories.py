"""Tests for the JSON-file-backed repositories, against a temp directory."""

import json
from datetime import timedelta
from decimal import Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import Cart
from storefront.domain.model.customer import CustomerDetails
from storefront.domain.model.order import Order
from storefront.domain.model.priced_cart import RawLine
from storefront.domain.model.store_config import StoreConfig
from storefront.domain.service.pricing_engine import PricingEngine
from storefront.domain.service.vat import TaxRateTable
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_product_repository import JsonProductRepository
from tests.fakes import NOW, FakeProductRepository, make_product

CUSTOMER = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada@example.com",
    "address_1": "1 Rue",
    "postcode": "75001",
    "city": "Paris",
    "country": "FR",
    "phone": "0100",
}


class _Clock:

    def __init__(self) -> None:
        self.now = NOW

    def __call__(self):
        return self.now


def _order(number: int, session_id: str) -> Order:
    engine = PricingEngine(FakeProductRepository([make_product(1, 1000, "20")]), TaxRateTable())
    priced = engine.price([RawLine(1, 2)], StoreConfig(flat_shipping_rate=500), NOW)
    return Order.create(
        number,
        priced,
        session_id,
        customer=CustomerDetails.create(CUSTOMER),
        payment_amount_total=2500,
        payment_currency="eur",
        payment_metadata={"cart_id": "tok"},
    )


# ── Products ────────────────────────────────────────────────────────


class TestJsonProductRepository:

    def test_creates_file(self, tmp_path):
        path = tmp_path / "nested" / "products.json"
        JsonProductRepository(path)
        assert json.loads(path.read_text()) == []

    def test_save_and_reload(self, tmp_path):
        path = tmp_path / "products.json"
        product = make_product(
            1, 1999, "5.5",
            sale_price_cents=1500,
            sale_start=NOW,
            sale_end=NOW + timedelta(days=3),
            requires_shipping=False,
        )
        JsonProductRepository(path).save(product)

        loaded = JsonProductRepository(path).get_by_id(1)
        assert loaded == product
        assert loaded.vat_rate_percent == Decimal("5.5")

    def test_next_id(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        assert repo.next_id() == 1
        repo.save(make_product(4, 100))
        assert repo.next_id() == 5

    def test_naive_sale_dates_are_utc(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text(json.dumps([{
            "id": 1, "name": "Mug", "price_cents": 1000,
            "sale_price_cents": 800, "sale_start": "2026-01-01T00:00:00",
        }]))
        product = JsonProductRepository(path).get_by_id(1)
        assert product.sale_start.tzinfo is not None
        assert product.effective_price(NOW) == 800


# ── Orders ──────────────────────────────────────────────────────────


class TestJsonOrderRepository:

    def test_add_assigns_id_and_round_trips(self, tmp_path):
        path = tmp_path / "orders.json"
        order = _order(1, "cs_1")

        saved = JsonOrderRepository(path).add(order)
        assert saved.id == 1

        loaded = JsonOrderRepository(path).get_by_id(1)
        assert loaded == saved
        assert loaded.priced_cart.total_gross == 2500
        assert loaded.customer.billing.city == "Paris"

    def test_lookup_by_session(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.add(_order(1, "cs_1"))
        repo.add(_order(2, "cs_2"))
        assert repo.get_by_payment_session("cs_2").number == 2
        assert repo.get_by_payment_session("cs_9") is None

    def test_next_number_follows_highest(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        assert repo.next_number() == 1
        repo.add(_order(41, "cs_1"))
        assert repo.next_number() == 42

    def test_refuses_second_order_for_session(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.add(_order(1, "cs_1"))
        with pytest.raises(ValidationError):
            repo.add(_order(2, "cs_1"))
        assert len(repo.list_all()) == 1


# ── Carts ───────────────────────────────────────────────────────────


class TestJsonCartRepository:

    def test_save_and_get(self, tmp_path):
        repo = JsonCartRepository(tmp_path / "carts.json")
        cart = Cart(token="tok")
        cart.add(1, 2)
        cart.attach_customer(CustomerDetails.create(CUSTOMER))
        repo.save(cart)

        loaded = JsonCartRepository(tmp_path / "carts.json").get("tok")
        assert loaded == cart

    def test_missing_token(self, tmp_path):
        assert JsonCartRepository(tmp_path / "carts.json").get("nope") is None

    def test_expires_after_retention(self, tmp_path):
        clock = _Clock()
        repo = JsonCartRepository(tmp_path / "carts.json", clock=clock)
        repo.save(Cart(token="tok"))

        clock.now = NOW + timedelta(days=6, hours=23)
        assert repo.get("tok") is not None

        clock.now = NOW + timedelta(days=7)
        assert repo.get("tok") is None

    def test_save_refreshes_expiry(self, tmp_path):
        clock = _Clock()
        repo = JsonCartRepository(tmp_path / "carts.json", clock=clock)
        repo.save(Cart(token="tok"))
        clock.now = NOW + timedelta(days=5)
        repo.save(repo.get("tok"))
        clock.now = NOW + timedelta(days=10)
        assert repo.get("tok") is not None

    def test_expired_entries_purged_on_write(self, tmp_path):
        path = tmp_path / "carts.json"
        clock = _Clock()
        repo = JsonCartRepository(path, clock=clock)
        repo.save(Cart(token="old"))
        clock.now = NOW + timedelta(days=8)
        repo.save(Cart(token="new"))
        assert set(json.loads(path.read_text())) == {"new"}

    def test_delete(self, tmp_path):
        repo = JsonCartRepository(tmp_path / "carts.json")
        repo.save(Cart(token="tok"))
        repo.delete("tok")
        repo.delete("tok")
        assert repo.get("tok") is None
