"""Tests for the Stripe adapter. No network: SDK calls are patched."""

import hashlib
import hmac
import json
import time
from dataclasses import asdict
from unittest.mock import patch

import pytest
import stripe

from storefront.domain.exceptions import PaymentProviderError, SignatureVerificationError
from storefront.domain.model.customer import CustomerDetails
from storefront.domain.model.priced_cart import RawLine
from storefront.domain.model.store_config import StoreConfig
from storefront.domain.service.pricing_engine import PricingEngine
from storefront.domain.service.vat import TaxRateTable
from storefront.infrastructure.payments.stripe_gateway import StripeCheckoutGateway
from tests.fakes import NOW, FakeProductRepository, make_product

WEBHOOK_SECRET = "whsec_test"

CUSTOMER = CustomerDetails.create({
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada@example.com",
    "address_1": "1 Rue",
    "postcode": "75001",
    "city": "Paris",
    "country": "FR",
    "phone": "0100",
})


def _gateway(secret_key: str = "sk_test_123") -> StripeCheckoutGateway:
    return StripeCheckoutGateway(
        secret_key=secret_key,
        webhook_secret=WEBHOOK_SECRET,
        success_url="https://shop.example/thanks",
        cancel_url="https://shop.example/cart",
    )


def _priced():
    engine = PricingEngine(FakeProductRepository([make_product(1, 1000, "20")]), TaxRateTable())
    return engine.price([RawLine(1, 2)], StoreConfig(), NOW)


def _sign(payload: bytes, secret: str = WEBHOOK_SECRET) -> str:
    timestamp = int(time.time())
    signed = f"{timestamp}.{payload.decode()}".encode()
    signature = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


# ── Checkout sessions ───────────────────────────────────────────────


class TestCreateCheckoutSession:

    def test_single_order_total_line(self):
        with patch("stripe.checkout.Session.create") as create:
            create.return_value = {"id": "cs_1", "url": "https://checkout.stripe.com/cs_1"}
            session = _gateway().create_checkout_session(_priced(), "tok", None)

        assert session.id == "cs_1"
        kwargs = create.call_args.kwargs
        assert kwargs["api_key"] == "sk_test_123"
        assert kwargs["mode"] == "payment"
        item = kwargs["line_items"][0]
        assert item["price_data"]["unit_amount"] == 2000
        assert item["price_data"]["currency"] == "eur"
        assert item["quantity"] == 1
        assert kwargs["metadata"]["cart_id"] == "tok"
        assert kwargs["success_url"].endswith("?session_id={CHECKOUT_SESSION_ID}")
        assert "customer_email" not in kwargs

    def test_known_customer_is_reused(self):
        customer = CUSTOMER.with_provider_customer("cus_9")
        with patch("stripe.checkout.Session.create") as create:
            create.return_value = {"id": "cs_1", "url": "u"}
            _gateway().create_checkout_session(_priced(), "tok", customer)
        assert create.call_args.kwargs["customer"] == "cus_9"

    def test_new_customer_prefills_email(self):
        with patch("stripe.checkout.Session.create") as create:
            create.return_value = {"id": "cs_1", "url": "u"}
            _gateway().create_checkout_session(_priced(), "tok", CUSTOMER)
        kwargs = create.call_args.kwargs
        assert kwargs["customer_email"] == "ada@example.com"
        assert kwargs["metadata"]["email"] == "ada@example.com"

    def test_stripe_error_is_wrapped(self):
        with patch("stripe.checkout.Session.create", side_effect=stripe.StripeError("boom")):
            with pytest.raises(PaymentProviderError) as exc_info:
                _gateway().create_checkout_session(_priced(), "tok", None)
        assert "boom" not in str(exc_info.value)

    def test_missing_key(self):
        with pytest.raises(PaymentProviderError):
            _gateway(secret_key="").create_checkout_session(_priced(), "tok", None)


# ── Customers ───────────────────────────────────────────────────────


class TestUpsertCustomer:

    def test_creates_new_customer(self):
        with patch("stripe.Customer.create", return_value={"id": "cus_1"}) as create:
            assert _gateway().upsert_customer(CUSTOMER) == "cus_1"
        kwargs = create.call_args.kwargs
        assert kwargs["name"] == "Ada Lovelace"
        assert kwargs["address"]["postal_code"] == "75001"

    def test_modifies_known_customer(self):
        with patch("stripe.Customer.modify", return_value={"id": "cus_9"}) as modify:
            assert _gateway().upsert_customer(CUSTOMER.with_provider_customer("cus_9")) == "cus_9"
        assert modify.call_args.args[0] == "cus_9"

    def test_blank_fields_are_not_sent(self):
        customer = CustomerDetails.create(
            {**asdict(CUSTOMER.billing), "email": CUSTOMER.email},
            {"city": "Lyon", "country": "FR"},
        )
        with patch("stripe.Customer.create", return_value={"id": "cus_2"}) as create:
            _gateway().upsert_customer(customer)
        kwargs = create.call_args.kwargs
        assert "line2" not in kwargs["address"]
        assert kwargs["shipping"]["address"] == {"city": "Lyon", "country": "FR"}
        assert kwargs["shipping"]["name"] == "Ada Lovelace"


# ── Webhooks ────────────────────────────────────────────────────────


class TestParseEvent:

    def _payload(self) -> bytes:
        return json.dumps({
            "type": "checkout.session.completed",
            "data": {"object": {
                "id": "cs_1",
                "amount_total": 2000,
                "currency": "eur",
                "metadata": {"cart_id": "tok", "email": "ada@example.com"},
                "customer_details": {"email": "ada@example.com"},
            }},
        }).encode()

    def test_valid_signature(self):
        payload = self._payload()
        event = _gateway().parse_event(payload, _sign(payload))
        assert event.is_checkout_completed
        assert event.session_id == "cs_1"
        assert event.cart_token == "tok"
        assert event.amount_total == 2000
        assert event.currency == "EUR"

    def test_wrong_secret(self):
        payload = self._payload()
        with pytest.raises(SignatureVerificationError):
            _gateway().parse_event(payload, _sign(payload, secret="whsec_other"))

    def test_tampered_payload(self):
        payload = self._payload()
        signature = _sign(payload)
        with pytest.raises(SignatureVerificationError):
            _gateway().parse_event(payload.replace(b"2000", b"1"), signature)

    def test_missing_signature(self):
        with pytest.raises(SignatureVerificationError):
            _gateway().parse_event(self._payload(), "")
