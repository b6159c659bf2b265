"""Abstract repository for Order aggregate (append-only)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def next_number(self) -> int:
        """Return the next human-readable order number."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its internal ID, or None if not found."""

    @abstractmethod
    def get_by_payment_session(self, session_id: str) -> Order | None:
        """Return the order created for a payment session, if any."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, oldest first."""

    @abstractmethod
    def add(self, order: Order) -> Order:
        """Persist a new order and return it with its assigned ID."""
