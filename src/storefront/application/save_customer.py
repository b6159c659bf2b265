"""Application service: Save Checkout Customer use case.

Validates the billing form, attaches the snapshot to the caller's cart and,
best-effort, mirrors it to the payment provider so the hosted checkout page
is prefilled. A provider failure here never blocks checkout.
"""

from __future__ import annotations

import logging
from typing import Any

from storefront.domain.exceptions import PaymentProviderError
from storefront.domain.model.customer import CustomerDetails
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.service.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)


class SaveCustomerHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        gateway: PaymentGateway | None = None,
    ) -> None:
        self._cart_repo = cart_repo
        self._gateway = gateway

    def handle(
        self,
        token: str,
        billing: dict[str, Any],
        shipping: dict[str, Any] | None = None,
    ) -> CustomerDetails:
        customer = CustomerDetails.create(billing, shipping)

        cart = self._cart_repo.get_or_create(token)
        previous = cart.customer
        if previous is not None and previous.provider_customer_id:
            customer = customer.with_provider_customer(previous.provider_customer_id)

        if self._gateway is not None:
            try:
                provider_id = self._gateway.upsert_customer(customer)
            except PaymentProviderError as exc:
                logger.warning("Could not sync customer %s with provider: %s", customer.email, exc)
            else:
                customer = customer.with_provider_customer(provider_id)

        cart.attach_customer(customer)
        self._cart_repo.save(cart)
        return customer
