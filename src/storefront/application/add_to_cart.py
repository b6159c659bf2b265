"""Application service: Add To Cart use case."""

from __future__ import annotations

import logging

from storefront.application.cart_pricer import CartPricer, require_purchasable
from storefront.application.dto import CartDTO
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class AddToCartHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        pricer: CartPricer,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._pricer = pricer

    def handle(self, token: str, product_id: int, quantity: int = 1) -> CartDTO:
        """Add a product, merging with an existing line for the same product."""
        require_purchasable(self._product_repo, product_id)

        cart = self._cart_repo.get_or_create(token)
        cart.add(product_id, quantity)
        self._cart_repo.save(cart)
        logger.info("Cart %s: added product %s x%s", token[:8], product_id, quantity)

        return self._pricer.view(cart)
