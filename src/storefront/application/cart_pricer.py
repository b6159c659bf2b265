"""Shared pricing step for every cart use case.

Wraps the pricing engine with the store configuration and the clock, and
maps a priced cart to the DTO every cart endpoint returns.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from storefront.application.dto import CartDTO, CartLineDTO, TaxBreakdownDTO
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.cart import Cart
from storefront.domain.model.priced_cart import PricedCart
from storefront.domain.model.product import Product
from storefront.domain.model.store_config import StoreConfig
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.pricing_engine import PricingEngine


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def require_purchasable(product_repo: ProductRepository, product_id: int) -> Product:
    """Fail unless *product_id* names a published catalog product."""
    product = product_repo.get_by_id(product_id) if product_id > 0 else None
    if product is None or not product.published:
        raise EntityNotFoundError("Invalid product.")
    return product


class CartPricer:

    def __init__(
        self,
        engine: PricingEngine,
        product_repo: ProductRepository,
        config: StoreConfig,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._engine = engine
        self._product_repo = product_repo
        self._clock = clock
        self.config = config

    def price(self, cart: Cart) -> PricedCart:
        return self._engine.price(cart.lines(), self.config, self._clock())

    def view(self, cart: Cart) -> CartDTO:
        return self.to_dto(cart, self.price(cart))

    # --- Mapping --------------------------------------------------------------

    def to_dto(self, cart: Cart, priced: PricedCart) -> CartDTO:
        names = {}
        for line in priced.lines:
            product = self._product_repo.get_by_id(line.product_id)
            names[line.product_id] = product.name if product is not None else ""

        return CartDTO(
            currency=priced.currency,
            prices_include_tax=self.config.prices_include_tax,
            lines=[
                CartLineDTO(
                    product_id=line.product_id,
                    name=names[line.product_id],
                    quantity=line.quantity,
                    currency=line.currency,
                    unit_net=line.unit_net,
                    unit_tax=line.unit_tax,
                    unit_gross=line.unit_gross,
                    tax_rate_percent=str(line.tax_rate_percent),
                    line_net=line.line_net,
                    line_tax=line.line_tax,
                    line_gross=line.line_gross,
                )
                for line in priced.lines
            ],
            tax_breakdown=[
                TaxBreakdownDTO(rate=str(rate), base_net=b.base_net, tax_amount=b.tax_amount)
                for rate, b in priced.tax_breakdown.items()
            ],
            subtotal_net=priced.subtotal_net,
            shipping_net=priced.shipping_net,
            shipping_tax=priced.shipping_tax,
            total_tax=priced.total_tax,
            total_gross=priced.total_gross,
            formatted_total=Money(priced.total_gross, priced.currency).format(
                self.config.currency_position
            ),
            item_count=sum(line.quantity for line in priced.lines),
            has_customer=cart.customer is not None,
        )
