"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from pathlib import Path

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.customer import CustomerDetails
from storefront.domain.model.order import Order
from storefront.domain.model.priced_cart import PricedCart
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_file import ensure_file, read_json, write_json


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        ensure_file(self._file_path, [])

    # --- OrderRepository interface --------------------------------------------

    def next_number(self) -> int:
        orders = self._load_raw()
        return max((o["number"] for o in orders), default=0) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_payment_session(self, session_id: str) -> Order | None:
        for raw in self._load_raw():
            if raw["payment_session_id"] == session_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def add(self, order: Order) -> Order:
        orders = self._load_raw()
        if any(o["payment_session_id"] == order.payment_session_id for o in orders):
            raise ValidationError(
                f"An order already exists for session {order.payment_session_id}"
            )

        order = dataclasses.replace(order, id=max((o["id"] for o in orders), default=0) + 1)
        orders.append(self._to_raw(order))
        write_json(self._file_path, orders)
        return order

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "number": order.number,
            "payment_session_id": order.payment_session_id,
            "paid": order.paid,
            "payment_amount_total": order.payment_amount_total,
            "payment_currency": order.payment_currency,
            "payment_metadata": order.payment_metadata,
            "customer": order.customer.to_dict() if order.customer else None,
            "email": order.email,
            "priced_cart": order.priced_cart.to_dict(),
            "created_at": order.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        created_at = datetime.fromisoformat(raw["created_at"])
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        customer = raw.get("customer")
        return Order(
            id=raw["id"],
            number=raw["number"],
            priced_cart=PricedCart.from_dict(raw["priced_cart"]),
            payment_session_id=raw["payment_session_id"],
            customer=CustomerDetails.from_dict(customer) if customer else None,
            email=raw.get("email", ""),
            paid=raw.get("paid", True),
            payment_amount_total=raw.get("payment_amount_total", 0),
            payment_currency=raw.get("payment_currency", ""),
            payment_metadata=raw.get("payment_metadata", {}),
            created_at=created_at,
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return read_json(self._file_path)
