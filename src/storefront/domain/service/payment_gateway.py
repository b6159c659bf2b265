"""Port for the hosted checkout provider.

The application layer talks to payments only through this interface; the
Stripe adapter lives in infrastructure and tests use an in-memory fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from storefront.domain.model.customer import CustomerDetails
from storefront.domain.model.priced_cart import PricedCart

CHECKOUT_COMPLETED = "checkout.session.completed"


@dataclass(frozen=True)
class CheckoutSession:
    id: str
    url: str


@dataclass(frozen=True)
class PaymentEvent:
    """A verified provider notification, reduced to the fields we use."""

    type: str
    session_id: str = ""
    cart_token: str = ""
    email: str = ""
    amount_total: int = 0
    currency: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_checkout_completed(self) -> bool:
        return self.type == CHECKOUT_COMPLETED


class PaymentGateway(ABC):

    @abstractmethod
    def create_checkout_session(
        self,
        cart: PricedCart,
        cart_token: str,
        customer: CustomerDetails | None,
    ) -> CheckoutSession:
        """Open a hosted payment page charging ``cart.total_gross``.

        Raises PaymentProviderError when the provider refuses.
        """

    @abstractmethod
    def parse_event(self, payload: bytes, signature: str) -> PaymentEvent:
        """Verify *signature* over *payload* and decode the event.

        Raises SignatureVerificationError on a bad or missing signature.
        """

    @abstractmethod
    def upsert_customer(self, customer: CustomerDetails) -> str:
        """Create or update the provider-side customer; return its id.

        Raises PaymentProviderError when the provider refuses.
        """
