"""CLI commands for the Product aggregate."""

from __future__ import annotations

from datetime import datetime, timezone

import click

from storefront.application.add_product import AddProductHandler
from storefront.application.update_product import UpdateProductHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.bootstrap import build_container


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price in major units (e.g. 15.00).")
@click.option("--currency", default=None, help="Defaults to the store currency.")
@click.option("--vat-rate", default="0", show_default=True, help="VAT percentage (e.g. 5.5).")
@click.option("--sku", default="", help="Stock keeping unit.")
@click.option("--no-shipping", is_flag=True, default=False, help="Digital/virtual product.")
@click.pass_obj
def product_add(
    settings,
    name: str,
    price: str,
    currency: str | None,
    vat_rate: str,
    sku: str,
    no_shipping: bool,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=build_container(settings).product_repo)

    try:
        product = handler.handle(
            name=name,
            price=price,
            currency=currency or settings.currency,
            vat_rate=vat_rate,
            sku=sku,
            requires_shipping=not no_shipping,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    price_text = Money(product.price_cents, product.currency).format(settings.currency_position)
    click.echo(f"Product #{product.id} '{product.name}' added at {price_text} (VAT {product.vat_rate_percent}%)")


@click.command("list")
@click.pass_obj
def product_list(settings) -> None:
    """List all products in the catalog."""
    products = build_container(settings).product_repo.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Price':>14} {'VAT':>7} {'Sale':>14}")
    click.echo("-" * 69)
    for p in products:
        price = Money(p.price_cents, p.currency).format(settings.currency_position)
        sale = (
            Money(p.sale_price_cents, p.currency).format(settings.currency_position)
            if p.sale_price_cents
            else ""
        )
        name = p.name if p.published else f"{p.name} (hidden)"
        click.echo(f"{p.id:<6} {name:<24} {price:>14} {str(p.vat_rate_percent) + '%':>7} {sale:>14}")


@click.command("update")
@click.option("--id", "product_id", required=True, type=int, help="Product ID.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--vat-rate", default=None, help="New VAT percentage.")
@click.option("--sale-price", default=None, help="Sale price; 0 ends the sale.")
@click.option("--sale-start", type=click.DateTime(), default=None, help="Sale start (UTC).")
@click.option("--sale-end", type=click.DateTime(), default=None, help="Sale end (UTC).")
@click.option("--publish/--unpublish", "published", default=None, help="Show or hide the product.")
@click.pass_obj
def product_update(
    settings,
    product_id: int,
    price: str | None,
    vat_rate: str | None,
    sale_price: str | None,
    sale_start: datetime | None,
    sale_end: datetime | None,
    published: bool | None,
) -> None:
    """Update a product's price, VAT rate, sale or visibility."""
    handler = UpdateProductHandler(product_repo=build_container(settings).product_repo)

    try:
        product = handler.handle(
            product_id=product_id,
            new_price=price,
            vat_rate=vat_rate,
            sale_price=sale_price,
            sale_start=_as_utc(sale_start),
            sale_end=_as_utc(sale_end),
            published=published,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' updated")


def _as_utc(value: datetime | None) -> datetime | None:
    return value.replace(tzinfo=timezone.utc) if value is not None else None
