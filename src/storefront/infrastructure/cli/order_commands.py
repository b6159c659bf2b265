"""CLI commands for the Order aggregate (read-only: orders come from payments)."""

from __future__ import annotations

import click

from storefront.application.dto import OrderDTO
from storefront.application.show_order import ListOrdersHandler, ShowOrderHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import build_container


@click.command("list")
@click.pass_obj
def order_list(settings) -> None:
    """List all paid orders."""
    handler = ListOrdersHandler(
        order_repo=build_container(settings).order_repo,
        currency_position=settings.currency_position,
    )
    orders = handler.handle()

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<5} {'Order':<15} {'Customer':<22} {'Location':<20} {'Total':>14}  Created")
    click.echo("-" * 100)
    for o in orders:
        click.echo(
            f"{o.id:<5} {o.title:<15} {o.customer_name:<22} {o.location:<20} {o.total:>14}  {o.created_at}"
        )


def _display_order(dto: OrderDTO) -> None:
    click.echo(f"{dto.title}  (id={dto.id}, {'paid' if dto.paid else 'unpaid'})")
    click.echo(f"Customer: {dto.customer_name or '-'} <{dto.email or '-'}>")
    click.echo(f"Payment:  {dto.payment_session_id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<10} {'Qty':>5} {'Unit':>14} {'Total':>14}")
    click.echo(f"  {'-'*46}")
    for line in dto.lines:
        click.echo(f"  {'#' + str(line.product_id):<10} {line.quantity:>5} {line.unit:>14} {line.total:>14}")
    click.echo(f"  {'-'*46}")
    click.echo(f"  {'Subtotal (net)':<31} {dto.subtotal:>14}")
    click.echo(f"  {'Shipping (net)':<31} {dto.shipping:>14}")
    for tax_line in dto.tax_lines:
        click.echo(f"  {tax_line}")
    click.echo(f"  {'Order Total':<31} {dto.total:>14}")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.pass_obj
def order_show(settings, order_id: int) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(
        order_repo=build_container(settings).order_repo,
        currency_position=settings.currency_position,
        prices_include_tax=settings.prices_include_tax,
    )

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)
