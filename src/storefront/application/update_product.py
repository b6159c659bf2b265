"""Application service: Update Product use case."""

from __future__ import annotations

from datetime import datetime

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.vat import normalise_rate


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        product_id: int,
        new_price: str | None = None,
        vat_rate: str | None = None,
        sale_price: str | None = None,
        sale_start: datetime | None = None,
        sale_end: datetime | None = None,
        published: bool | None = None,
    ) -> Product:
        """Update a product's price, VAT rate, sale window or visibility.

        Existing orders keep the totals they were paid at; carts pick the
        change up on their next pricing pass.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        if new_price is not None:
            product.update_price(Money.of(new_price, product.currency).cents)
        if vat_rate is not None:
            product.vat_rate_percent = normalise_rate(vat_rate)
        if sale_price is not None:
            product.set_sale(Money.of(sale_price, product.currency).cents, sale_start, sale_end)
        elif sale_start is not None or sale_end is not None:
            if not product.sale_price_cents:
                raise ValidationError("Set a sale price before its window", field="sale_price")
            product.set_sale(
                product.sale_price_cents,
                sale_start if sale_start is not None else product.sale_start,
                sale_end if sale_end is not None else product.sale_end,
            )
        if published is not None:
            product.published = published

        self._product_repo.save(product)
        return product
