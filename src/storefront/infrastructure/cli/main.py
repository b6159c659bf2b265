from __future__ import annotations

import click

from storefront.infrastructure.cli.cart_commands import cart_quote
from storefront.infrastructure.cli.order_commands import order_list, order_show
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_update,
)
from storefront.infrastructure.config.settings import Settings
from storefront.infrastructure.logging_setup import configure_logging


@click.group()
@click.option("--log-level", default=None, help="Override STOREFRONT_LOG_LEVEL.")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Storefront: catalog, orders and the cart/checkout API"""
    settings = Settings()
    configure_logging(log_level or settings.log_level)
    ctx.obj = settings


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def order() -> None:
    """Inspect paid orders."""


@cli.group()
def cart() -> None:
    """Price carts without a session."""


@cli.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
@click.option("--reload", is_flag=True, default=False, help="Restart on code changes.")
def serve(host: str, port: int, reload: bool) -> None:
    """Run the HTTP API with uvicorn."""
    from storefront.infrastructure.api.main import run

    run(host=host, port=port, reload=reload)


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_update)
order.add_command(order_list)
order.add_command(order_show)
cart.add_command(cart_quote)
