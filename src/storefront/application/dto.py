"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the HTTP/CLI edges and the application layer
without exposing domain internals. All money fields are integer minor
units; ``formatted_*`` fields are display strings.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartLineDTO:
    product_id: int
    name: str
    quantity: int
    currency: str
    unit_net: int
    unit_tax: int
    unit_gross: int
    tax_rate_percent: str
    line_net: int
    line_tax: int
    line_gross: int


@dataclass(frozen=True)
class TaxBreakdownDTO:
    rate: str
    base_net: int
    tax_amount: int


@dataclass(frozen=True)
class CartDTO:
    """Output: the current priced cart as returned by every cart endpoint."""

    currency: str
    prices_include_tax: bool
    lines: list[CartLineDTO]
    tax_breakdown: list[TaxBreakdownDTO]
    subtotal_net: int
    shipping_net: int
    shipping_tax: int
    total_tax: int
    total_gross: int
    formatted_total: str
    item_count: int
    has_customer: bool = False


@dataclass(frozen=True)
class CheckoutSessionDTO:
    session_id: str
    url: str


@dataclass(frozen=True)
class WebhookResultDTO:
    ok: bool = True
    order_id: int | None = None
    already_processed: bool = False
    ignored: bool = False


@dataclass(frozen=True)
class OrderSummaryDTO:
    id: int
    title: str
    customer_name: str
    location: str
    total: str
    paid: bool
    created_at: str


@dataclass(frozen=True)
class OrderLineDTO:
    product_id: int
    quantity: int
    unit: str
    total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to an operator."""

    id: int
    title: str
    payment_session_id: str
    paid: bool
    customer_name: str
    email: str
    lines: list[OrderLineDTO]
    subtotal: str
    shipping: str
    tax_lines: list[str]
    total: str
    created_at: str
