"""CLI command for quoting a cart against the current store settings."""

from __future__ import annotations

import click

from storefront.application.quote_cart import QuoteCartHandler
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.bootstrap import build_container


def _parse_items(raw: str) -> list[tuple[int, int]]:
    """Parse '1:2,3:1' into (product_id, quantity) pairs."""
    items: list[tuple[int, int]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        product_id, _, qty_str = pair.partition(":")
        try:
            items.append((int(product_id), int(qty_str or 1)))
        except ValueError:
            raise click.BadParameter(
                f"Invalid item '{pair}'. Expected 'ProductId:Quantity'."
            )
    return items


@click.command("quote")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.pass_obj
def cart_quote(settings, items: str) -> None:
    """Price a list of products as a cart would."""
    handler = QuoteCartHandler(pricer=build_container(settings).pricer)
    dto = handler.handle(_parse_items(items))

    def fmt(cents: int) -> str:
        return Money(cents, dto.currency).format(settings.currency_position)

    mode = "incl. VAT" if dto.prices_include_tax else "excl. VAT"
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Unit (' + mode + ')':>18} {'Total':>14}")
    click.echo(f"  {'-'*64}")
    for line in dto.lines:
        unit = line.unit_gross if dto.prices_include_tax else line.unit_net
        total = line.line_gross if dto.prices_include_tax else line.line_net
        name = line.name or f"#{line.product_id} (unknown)"
        click.echo(f"  {name:<24} {line.quantity:>5} {fmt(unit):>18} {fmt(total):>14}")
    click.echo(f"  {'-'*64}")
    click.echo(f"  {'Subtotal (net)':<49} {fmt(dto.subtotal_net):>14}")
    click.echo(f"  {'Shipping (net)':<49} {fmt(dto.shipping_net):>14}")
    for bucket in dto.tax_breakdown:
        label = f"VAT {bucket.rate}% on {fmt(bucket.base_net)}"
        click.echo(f"  {label:<49} {fmt(bucket.tax_amount):>14}")
    click.echo(f"  {'Total':<49} {dto.formatted_total:>14}")
