"""Product aggregate.

Products live independently of carts and orders. The pricing engine reads
them through the catalog; carts only ever store a product id.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from storefront.domain.exceptions import ValidationError


@dataclass
class Product:
    """A product in the catalog.

    Prices are integer minor units. A sale price applies only while it is
    non-zero and ``now`` falls inside its (optionally open-ended) window.
    """

    id: int
    name: str
    price_cents: int
    currency: str = "EUR"
    vat_rate_percent: Decimal = Decimal("0")
    sku: str = ""
    sale_price_cents: int = 0
    sale_start: datetime | None = None
    sale_end: datetime | None = None
    requires_shipping: bool = True
    weight_grams: int = 0
    manage_stock: bool = False
    stock_qty: int = 0
    stock_status: str = "in_stock"
    published: bool = True

    def is_sale_active(self, now: datetime) -> bool:
        if self.sale_price_cents <= 0:
            return False
        if self.sale_start is not None and self.sale_start > now:
            return False
        if self.sale_end is not None and self.sale_end < now:
            return False
        return True

    def effective_price(self, now: datetime) -> int:
        """Current unit price: the active sale price, else the base price."""
        if self.is_sale_active(now):
            return self.sale_price_cents
        return self.price_cents

    def update_price(self, price_cents: int) -> None:
        """Change the base price.

        Existing orders are unaffected: they hold a frozen priced cart.
        """
        if price_cents < 0:
            raise ValidationError("Product price cannot be negative", field="price_cents")
        self.price_cents = price_cents

    def set_sale(
        self,
        sale_price_cents: int,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> None:
        if sale_price_cents < 0:
            raise ValidationError("Sale price cannot be negative", field="sale_price_cents")
        if start is not None and end is not None and end < start:
            raise ValidationError("Sale end must not precede sale start", field="sale_end")
        self.sale_price_cents = sale_price_cents
        self.sale_start = start
        self.sale_end = end
