"""Domain service: Cart Pricing Engine.

Turns cart lines plus an explicit ``StoreConfig`` into a ``PricedCart``.
The engine does no I/O of its own: products come from the catalog passed
in at construction and the clock is an argument, so the same inputs always
produce the same output.

Two tax figures are computed on purpose:

- per-unit tax, multiplied by quantity, drives line gross amounts;
- per-rate bucket tax, rounded once on the summed net of each rate, drives
  the displayed breakdown and ``total_tax``.

``total_gross`` is the sum of line and shipping gross when prices include
tax (or VAT is off), and ``total_net + total_tax`` otherwise. The two paths
are kept separate so stored totals stay compatible with existing orders.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from storefront.domain.exceptions import MixedCurrencyError
from storefront.domain.model.priced_cart import (
    LineInput,
    PricedCart,
    PricedLine,
    TaxBucket,
)
from storefront.domain.model.store_config import StoreConfig
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.vat import (
    TaxRateTable,
    compute_line,
    normalise_rate,
    tax_on,
)

logger = logging.getLogger(__name__)

_ZERO_RATE = Decimal("0.00")


class PricingEngine:

    def __init__(self, catalog: ProductRepository, rates: TaxRateTable) -> None:
        self._catalog = catalog
        self._rates = rates

    def price(
        self,
        lines: Iterable[LineInput],
        config: StoreConfig,
        now: datetime,
    ) -> PricedCart:
        """Price *lines* under *config* as of *now*.

        Never raises for an individual malformed line: unknown products and
        missing prices degrade to zero-value lines.
        """
        priced: list[PricedLine] = []
        buckets: dict[Decimal, int] = {}
        subtotal_net = 0
        lines_gross = 0

        for line in lines:
            result = self._price_line(line, config, now)
            priced.append(result)
            if config.vat_enabled:
                rate = result.tax_rate_percent
                buckets[rate] = buckets.get(rate, 0) + result.line_net
            subtotal_net += result.line_net
            lines_gross += result.line_gross

        # --- Shipping ---------------------------------------------------------
        shipping_amount = config.flat_shipping_rate
        threshold = config.free_shipping_threshold
        if threshold > 0 and subtotal_net >= threshold:
            shipping_amount = 0

        shipping_rate = (
            self._rates.highest_rate(config.tax_jurisdiction)
            if config.vat_enabled
            else _ZERO_RATE
        )
        shipping = compute_line(max(0, shipping_amount), shipping_rate, config.prices_include_tax)
        if config.vat_enabled:
            buckets[shipping_rate] = buckets.get(shipping_rate, 0) + shipping.net

        # --- Tax breakdown ----------------------------------------------------
        breakdown: dict[Decimal, TaxBucket] = {}
        total_tax = 0
        for rate, base_net in buckets.items():
            tax = tax_on(base_net, rate)
            breakdown[rate] = TaxBucket(base_net=base_net, tax_amount=tax)
            total_tax += tax

        # --- Totals -----------------------------------------------------------
        total_net = subtotal_net + shipping.net
        if config.prices_include_tax or not config.vat_enabled:
            total_gross = lines_gross + shipping.gross
        else:
            total_gross = total_net + total_tax

        return PricedCart(
            currency=priced[0].currency if priced else config.currency.upper(),
            lines=tuple(priced),
            tax_breakdown=breakdown,
            subtotal_net=subtotal_net,
            shipping_net=shipping.net,
            shipping_tax=shipping.tax,
            shipping_gross=shipping.gross,
            shipping_rate_percent=shipping_rate,
            total_net=total_net,
            total_tax=total_tax,
            total_gross=total_gross,
        )

    # --- Line resolution ------------------------------------------------------

    def _price_line(self, line: LineInput, config: StoreConfig, now: datetime) -> PricedLine:
        product_id = _as_int(line.product_id)
        qty = Quantity.coerce(line.quantity).value
        product = self._catalog.get_by_id(product_id) if product_id > 0 else None
        if product is None:
            logger.debug("Product %s not found; pricing line at zero", line.product_id)

        # Unit price: an explicit positive value wins over a catalog lookup
        supplied = _as_int(line.unit_price)
        if supplied > 0:
            unit_price = supplied
        elif product is not None:
            unit_price = max(0, product.effective_price(now))
        else:
            unit_price = 0

        if not config.vat_enabled:
            rate = _ZERO_RATE
        elif line.tax_rate_percent is not None:
            rate = normalise_rate(line.tax_rate_percent)
        elif product is not None:
            rate = normalise_rate(product.vat_rate_percent)
        else:
            rate = _ZERO_RATE

        if line.currency:
            currency = line.currency
        elif product is not None and product.currency:
            currency = product.currency
        else:
            currency = config.currency

        unit = compute_line(unit_price, rate, config.prices_include_tax)
        return PricedLine(
            product_id=product_id,
            quantity=qty,
            currency=currency.upper(),
            unit_price=unit_price,
            unit_net=unit.net,
            unit_tax=unit.tax,
            unit_gross=unit.gross,
            tax_rate_percent=rate,
            line_net=unit.net * qty,
            line_tax=unit.tax * qty,
            line_gross=unit.gross * qty,
        )


def assert_single_currency(cart: PricedCart) -> None:
    """Reject carts whose lines span several currencies.

    A hosted checkout session charges one currency per transaction, so
    callers run this before handing a priced cart to the payment provider.
    """
    currencies = cart.currencies
    if len(currencies) > 1:
        raise MixedCurrencyError(
            "Your cart contains items with different currencies "
            f"({', '.join(sorted(currencies))})."
        )


def _as_int(value: object) -> int:
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return 0
