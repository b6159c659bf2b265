"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. The pricing engine uses it as its read-only catalog.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""

    def next_id(self) -> int:
        products = self.list_all()
        return max((p.id for p in products), default=0) + 1
