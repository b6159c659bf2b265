"""Abstract session-scoped cart store.

Carts are keyed by an opaque session token and expire after
``CART_RETENTION`` of inactivity. Writers are last-write-wins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta

from storefront.domain.model.cart import Cart

CART_RETENTION = timedelta(days=7)


class CartRepository(ABC):

    @abstractmethod
    def get(self, token: str) -> Cart | None:
        """Return the live cart for *token*, or None if absent or expired."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist *cart* and restart its retention window."""

    @abstractmethod
    def delete(self, token: str) -> None:
        """Forget the cart for *token*. Missing tokens are ignored."""

    def get_or_create(self, token: str) -> Cart:
        cart = self.get(token)
        if cart is None:
            cart = Cart(token=token)
            self.save(cart)
        return cart
