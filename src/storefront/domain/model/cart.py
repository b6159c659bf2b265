"""Cart aggregate: the shopper's raw, unpriced selection.

A cart is owned by an opaque session token. It holds product ids and
quantities only; prices are always recomputed by the pricing engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.model.customer import CustomerDetails
from storefront.domain.model.priced_cart import RawLine
from storefront.domain.model.value_objects import Quantity


@dataclass
class CartItem:
    product_id: int
    quantity: int


@dataclass
class Cart:
    """Aggregate root for a session cart.

    Invariants:
    - at most one item per ``product_id`` (adding merges quantities)
    - every item quantity is >= 1
    - removal never leaves gaps; remaining items keep their order
    """

    token: str
    items: list[CartItem] = field(default_factory=list)
    customer: CustomerDetails | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items

    def add(self, product_id: int, quantity: object = 1) -> None:
        """Add *quantity* of a product, merging into an existing line."""
        qty = Quantity.coerce(quantity).value
        for item in self.items:
            if item.product_id == product_id:
                item.quantity = max(1, item.quantity + qty)
                return
        self.items.append(CartItem(product_id=product_id, quantity=qty))

    def set_quantity(self, product_id: int, quantity: int) -> None:
        """Overwrite a line's quantity; zero or less removes the line.

        Unknown product ids are ignored.
        """
        for index, item in enumerate(self.items):
            if item.product_id == product_id:
                if quantity <= 0:
                    del self.items[index]
                else:
                    item.quantity = quantity
                return

    def remove(self, product_id: int) -> None:
        self.set_quantity(product_id, 0)

    def clear(self) -> None:
        """Drop every item. The token (and so the session) survives."""
        self.items = []
        self.customer = None

    def attach_customer(self, customer: CustomerDetails) -> None:
        self.customer = customer

    def lines(self) -> list[RawLine]:
        return [RawLine(item.product_id, item.quantity) for item in self.items]
