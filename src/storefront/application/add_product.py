"""Application service: Add Product use case."""

from __future__ import annotations

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.vat import normalise_rate


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        name: str,
        price: str,
        currency: str = "EUR",
        vat_rate: str = "0",
        sku: str = "",
        requires_shipping: bool = True,
    ) -> Product:
        """Add a new product to the catalog with the next free ID."""
        if not name or not name.strip():
            raise ValidationError("Product name is required", field="name")

        money = Money.of(price, currency)
        if money.cents < 0:
            raise ValidationError("Product price cannot be negative", field="price")

        product = Product(
            id=self._product_repo.next_id(),
            name=name.strip(),
            price_cents=money.cents,
            currency=money.currency,
            vat_rate_percent=normalise_rate(vat_rate),
            sku=sku.strip(),
            requires_shipping=requires_shipping,
        )
        self._product_repo.save(product)
        return product
