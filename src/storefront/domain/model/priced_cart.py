"""Read model produced by the pricing engine.

A PricedCart is derived from a cart on every pricing pass and is never
partially persisted; orders store a complete frozen copy of it.

Lines come in two shapes. ``RawLine`` is what a cart holds (plus optional
overrides); ``PricedLine`` is what the engine emits. The engine accepts
either, which is what makes re-pricing its own output a no-op.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Union


@dataclass(frozen=True)
class RawLine:
    product_id: int
    quantity: int = 1
    unit_price: int | None = None
    tax_rate_percent: Decimal | None = None
    currency: str | None = None


@dataclass(frozen=True)
class PricedLine:
    product_id: int
    quantity: int
    currency: str
    unit_price: int  # resolved input amount: gross if prices include tax, else net
    unit_net: int
    unit_tax: int
    unit_gross: int
    tax_rate_percent: Decimal
    line_net: int
    line_tax: int
    line_gross: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "currency": self.currency,
            "unit_price": self.unit_price,
            "unit_net": self.unit_net,
            "unit_tax": self.unit_tax,
            "unit_gross": self.unit_gross,
            "tax_rate_percent": str(self.tax_rate_percent),
            "line_net": self.line_net,
            "line_tax": self.line_tax,
            "line_gross": self.line_gross,
        }

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> PricedLine:
        return PricedLine(
            product_id=int(raw["product_id"]),
            quantity=int(raw["quantity"]),
            currency=raw["currency"],
            unit_price=int(raw["unit_price"]),
            unit_net=int(raw["unit_net"]),
            unit_tax=int(raw["unit_tax"]),
            unit_gross=int(raw["unit_gross"]),
            tax_rate_percent=Decimal(str(raw["tax_rate_percent"])),
            line_net=int(raw["line_net"]),
            line_tax=int(raw["line_tax"]),
            line_gross=int(raw["line_gross"]),
        )


LineInput = Union[RawLine, PricedLine]


@dataclass(frozen=True)
class TaxBucket:
    base_net: int
    tax_amount: int


@dataclass(frozen=True)
class PricedCart:
    """Fully computed cart.

    ``total_tax`` is always the sum of the bucket taxes. In tax-inclusive
    mode ``total_gross`` is summed from line gross amounts instead, so it can
    differ from ``total_net + total_tax`` by a rounding residue.
    """

    currency: str
    lines: tuple[PricedLine, ...]
    tax_breakdown: dict[Decimal, TaxBucket] = field(default_factory=dict)
    subtotal_net: int = 0
    shipping_net: int = 0
    shipping_tax: int = 0
    shipping_gross: int = 0
    shipping_rate_percent: Decimal = Decimal("0")
    total_net: int = 0
    total_tax: int = 0
    total_gross: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def currencies(self) -> set[str]:
        return {line.currency for line in self.lines}

    @property
    def rounding_residue(self) -> int:
        return self.total_gross - (self.total_net + self.total_tax)

    def to_dict(self) -> dict[str, Any]:
        return {
            "currency": self.currency,
            "lines": [line.to_dict() for line in self.lines],
            "tax_breakdown": [
                {"rate": str(rate), "base_net": b.base_net, "tax_amount": b.tax_amount}
                for rate, b in self.tax_breakdown.items()
            ],
            "subtotal_net": self.subtotal_net,
            "shipping_net": self.shipping_net,
            "shipping_tax": self.shipping_tax,
            "shipping_gross": self.shipping_gross,
            "shipping_rate_percent": str(self.shipping_rate_percent),
            "total_net": self.total_net,
            "total_tax": self.total_tax,
            "total_gross": self.total_gross,
        }

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> PricedCart:
        return PricedCart(
            currency=raw["currency"],
            lines=tuple(PricedLine.from_dict(line) for line in raw["lines"]),
            tax_breakdown={
                Decimal(b["rate"]): TaxBucket(b["base_net"], b["tax_amount"])
                for b in raw.get("tax_breakdown", [])
            },
            subtotal_net=raw["subtotal_net"],
            shipping_net=raw["shipping_net"],
            shipping_tax=raw["shipping_tax"],
            shipping_gross=raw["shipping_gross"],
            shipping_rate_percent=Decimal(raw.get("shipping_rate_percent", "0")),
            total_net=raw["total_net"],
            total_tax=raw["total_tax"],
            total_gross=raw["total_gross"],
        )
