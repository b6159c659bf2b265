"""Order aggregate.

An order is created exactly once, from a confirmed payment, and holds a
frozen copy of the priced cart at confirmation time. It is append-only:
nothing in this codebase mutates an order after it has been saved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.customer import CustomerDetails
from storefront.domain.model.priced_cart import PricedCart


@dataclass(frozen=True)
class Order:
    """Aggregate root for paid orders.

    Use ``Order.create()`` for new orders; ``__init__`` stays simple so
    the repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    number: int
    priced_cart: PricedCart
    payment_session_id: str
    customer: CustomerDetails | None = None
    email: str = ""
    paid: bool = True
    payment_amount_total: int = 0
    payment_currency: str = ""
    payment_metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def create(
        number: int,
        priced_cart: PricedCart,
        payment_session_id: str,
        customer: CustomerDetails | None = None,
        email: str = "",
        payment_amount_total: int = 0,
        payment_currency: str = "",
        payment_metadata: dict[str, Any] | None = None,
    ) -> Order:
        """Build a paid order. The customer snapshot's email wins over *email*."""
        if number <= 0:
            raise ValidationError("Order number must be positive")
        if not payment_session_id:
            raise ValidationError("Payment session reference is required")
        if priced_cart.is_empty:
            raise ValidationError("Order must contain at least one line")
        return Order(
            id=None,
            number=number,
            priced_cart=priced_cart,
            payment_session_id=payment_session_id,
            customer=customer,
            email=customer.email if customer is not None else email.strip().lower(),
            payment_amount_total=payment_amount_total,
            payment_currency=payment_currency.upper(),
            payment_metadata=dict(payment_metadata or {}),
        )

    @property
    def title(self) -> str:
        return f"Order #{self.number:06d}"

    @property
    def total_gross(self) -> int:
        return self.priced_cart.total_gross
