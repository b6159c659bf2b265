"""Application service: Set Cart Quantity and Remove From Cart use cases.

Removal is ``set_quantity(product, 0)``, so both live here.
"""

from __future__ import annotations

from storefront.application.cart_pricer import CartPricer, require_purchasable
from storefront.application.dto import CartDTO
from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.product_repository import ProductRepository


class SetCartQuantityHandler:

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        pricer: CartPricer,
    ) -> None:
        self._cart_repo = cart_repo
        self._product_repo = product_repo
        self._pricer = pricer

    def handle(self, token: str, product_id: int, quantity: int) -> CartDTO:
        """Overwrite a line's quantity; a quantity of zero or less removes it."""
        require_purchasable(self._product_repo, product_id)

        cart = self._cart_repo.get_or_create(token)
        cart.set_quantity(product_id, quantity)
        self._cart_repo.save(cart)

        return self._pricer.view(cart)


class RemoveFromCartHandler:

    def __init__(self, set_quantity: SetCartQuantityHandler) -> None:
        self._set_quantity = set_quantity

    def handle(self, token: str, product_id: int) -> CartDTO:
        return self._set_quantity.handle(token, product_id, 0)
