"""Application service: Clear Cart use case."""

from __future__ import annotations

from storefront.application.cart_pricer import CartPricer
from storefront.application.dto import CartDTO
from storefront.domain.repository.cart_repository import CartRepository


class ClearCartHandler:

    def __init__(self, cart_repo: CartRepository, pricer: CartPricer) -> None:
        self._cart_repo = cart_repo
        self._pricer = pricer

    def handle(self, token: str) -> CartDTO:
        """Empty the cart but keep the token, so the session carries on."""
        cart = self._cart_repo.get_or_create(token)
        cart.clear()
        self._cart_repo.save(cart)
        return self._pricer.view(cart)
