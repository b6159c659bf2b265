"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON repositories and
the Stripe gateway but keep everything in memory. No file I/O, no network.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import datetime, timezone
from decimal import Decimal

from storefront.domain.exceptions import PaymentProviderError, SignatureVerificationError
from storefront.domain.model.cart import Cart
from storefront.domain.model.customer import CustomerDetails
from storefront.domain.model.order import Order
from storefront.domain.model.priced_cart import PricedCart
from storefront.domain.model.product import Product
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.payment_gateway import (
    CheckoutSession,
    PaymentEvent,
    PaymentGateway,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_product(
    product_id: int,
    price_cents: int,
    rate: str = "20",
    name: str | None = None,
    currency: str = "EUR",
    **kwargs,
) -> Product:
    return Product(
        id=product_id,
        name=name or f"Product {product_id}",
        price_cents=price_cents,
        currency=currency,
        vat_rate_percent=Decimal(rate),
        **kwargs,
    )


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[int, Product] = {}
        for p in products or []:
            self._store[p.id] = p

    def get_by_id(self, product_id: int) -> Product | None:
        return self._store.get(product_id)

    def list_all(self) -> list[Product]:
        return list(self._store.values())

    def save(self, product: Product) -> None:
        self._store[product.id] = product


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[int, Order] = {}

    def next_number(self) -> int:
        return max((o.number for o in self._store.values()), default=0) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        return self._store.get(order_id)

    def get_by_payment_session(self, session_id: str) -> Order | None:
        for order in self._store.values():
            if order.payment_session_id == session_id:
                return order
        return None

    def list_all(self) -> list[Order]:
        return list(self._store.values())

    def add(self, order: Order) -> Order:
        order = dataclasses.replace(order, id=len(self._store) + 1)
        self._store[order.id] = order
        return order


class FakeCartRepository(CartRepository):

    def __init__(self) -> None:
        self._store: dict[str, Cart] = {}

    def get(self, token: str) -> Cart | None:
        return self._store.get(token)

    def save(self, cart: Cart) -> None:
        self._store[cart.token] = cart

    def delete(self, token: str) -> None:
        self._store.pop(token, None)


class FakePaymentGateway(PaymentGateway):
    """Records every call. Events are plain JSON signed with the literal 'valid'."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sessions: list[tuple[PricedCart, str, CustomerDetails | None]] = []
        self.customers: list[CustomerDetails] = []

    def create_checkout_session(
        self,
        cart: PricedCart,
        cart_token: str,
        customer: CustomerDetails | None,
    ) -> CheckoutSession:
        if self.fail:
            raise PaymentProviderError("provider down")
        self.sessions.append((cart, cart_token, customer))
        session_id = f"cs_test_{len(self.sessions)}"
        return CheckoutSession(id=session_id, url=f"https://pay.example/{session_id}")

    def parse_event(self, payload: bytes, signature: str) -> PaymentEvent:
        if signature != "valid":
            raise SignatureVerificationError("Invalid signature")
        raw = json.loads(payload)
        return PaymentEvent(**raw)

    def upsert_customer(self, customer: CustomerDetails) -> str:
        if self.fail:
            raise PaymentProviderError("provider down")
        self.customers.append(customer)
        return customer.provider_customer_id or f"cus_{len(self.customers)}"
