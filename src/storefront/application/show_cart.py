"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from storefront.application.cart_pricer import CartPricer
from storefront.application.dto import CartDTO
from storefront.domain.repository.cart_repository import CartRepository


class ShowCartHandler:

    def __init__(self, cart_repo: CartRepository, pricer: CartPricer) -> None:
        self._cart_repo = cart_repo
        self._pricer = pricer

    def handle(self, token: str) -> CartDTO:
        """Return the priced cart for *token*, creating an empty one if needed."""
        cart = self._cart_repo.get_or_create(token)
        return self._pricer.view(cart)
