import click

from storefront.config import get_settings
from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.cli.cart_commands import (
    cart_add,
    cart_add_service,
    cart_clear,
    cart_remove,
    cart_show,
    cart_total,
    cart_update,
)
from storefront.infrastructure.cli.catalog_commands import catalog_list, catalog_set_stock
from storefront.infrastructure.cli.order_commands import (
    order_cancel,
    order_checkout,
    order_confirm,
    order_create,
    order_list,
    order_show,
    order_status,
)
from storefront.infrastructure.cli.restock_commands import (
    restock_drain,
    restock_subscribe,
    restock_unsubscribe,
)
from storefront.utils.logging import configure_logging


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Storefront order lifecycle engine"""
    if ctx.obj is None:
        settings = get_settings()
        configure_logging(settings.log_level, settings.log_json)
        ctx.obj = Container(settings)


@cli.group()
def catalog() -> None:
    """Inspect the catalog and edit stock."""


@cli.group()
def cart() -> None:
    """Manage a customer's cart."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def restock() -> None:
    """Back-in-stock subscriptions."""


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
@click.pass_obj
def serve(container: Container, host: str, port: int) -> None:
    """Run the webhook endpoint."""
    import uvicorn

    from storefront.infrastructure.api.app import create_app

    uvicorn.run(create_app(container), host=host, port=port, log_config=None)


# Register subcommands
catalog.add_command(catalog_list)
catalog.add_command(catalog_set_stock)
cart.add_command(cart_add)
cart.add_command(cart_add_service)
cart.add_command(cart_update)
cart.add_command(cart_remove)
cart.add_command(cart_clear)
cart.add_command(cart_show)
cart.add_command(cart_total)
order.add_command(order_create)
order.add_command(order_show)
order.add_command(order_list)
order.add_command(order_cancel)
order.add_command(order_status)
order.add_command(order_checkout)
order.add_command(order_confirm)
restock.add_command(restock_subscribe)
restock.add_command(restock_unsubscribe)
restock.add_command(restock_drain)
