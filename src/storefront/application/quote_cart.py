"""Application service: Quote Cart use case (query).

Prices an ad-hoc list of ``(product_id, quantity)`` pairs without touching
any stored cart. Used by operators to check totals from the command line.
"""

from __future__ import annotations

from storefront.application.cart_pricer import CartPricer
from storefront.application.dto import CartDTO
from storefront.domain.model.cart import Cart


class QuoteCartHandler:

    def __init__(self, pricer: CartPricer) -> None:
        self._pricer = pricer

    def handle(self, items: list[tuple[int, int]]) -> CartDTO:
        cart = Cart(token="quote")
        for product_id, quantity in items:
            cart.add(product_id, quantity)
        return self._pricer.view(cart)
