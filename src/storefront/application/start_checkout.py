"""Application service: Start Checkout use case.

Prices the caller's cart, refuses carts that cannot be charged, and opens
a hosted checkout session for the cart's gross total.
"""

from __future__ import annotations

import logging

from storefront.application.cart_pricer import CartPricer
from storefront.application.dto import CheckoutSessionDTO
from storefront.domain.exceptions import EmptyCartError
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.service.payment_gateway import PaymentGateway
from storefront.domain.service.pricing_engine import assert_single_currency

logger = logging.getLogger(__name__)


class StartCheckoutHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        pricer: CartPricer,
        gateway: PaymentGateway,
    ) -> None:
        self._cart_repo = cart_repo
        self._pricer = pricer
        self._gateway = gateway

    def handle(self, token: str) -> CheckoutSessionDTO:
        """Create a payment session for the cart.

        Steps:
        1. Price the cart from scratch.
        2. Reject empty and mixed-currency carts before contacting the provider.
        3. Ask the provider for a hosted checkout page.
        """
        cart = self._cart_repo.get_or_create(token)
        priced = self._pricer.price(cart)

        if priced.is_empty:
            raise EmptyCartError("Your cart is empty.")
        assert_single_currency(priced)

        session = self._gateway.create_checkout_session(priced, cart.token, cart.customer)
        logger.info(
            "Checkout session %s opened for cart %s (%s %s)",
            session.id, token[:8], priced.total_gross, priced.currency,
        )
        return CheckoutSessionDTO(session_id=session.id, url=session.url)
