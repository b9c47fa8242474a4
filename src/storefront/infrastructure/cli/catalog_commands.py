"""CLI commands for the catalog."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.cli.restock_commands import echo_reports


@click.command("list")
@click.pass_obj
def catalog_list(container: Container) -> None:
    """List catalog items with their stock."""
    items = container.list_catalog().handle()

    if not items:
        click.echo("Catalog is empty.")
        return

    click.echo(f"{'ID':<10} {'Name':<28} {'Type':<6} {'Price':>16} {'Stock':>7}")
    click.echo("-" * 71)
    for item in items:
        stock = "-" if item.inventory_qty is None else str(item.inventory_qty)
        name = item.name if item.is_active else f"{item.name} (inactive)"
        click.echo(
            f"{item.id:<10} {name:<28} {item.item_type:<6} {item.price:>16} {stock:>7}"
        )


@click.command("set-stock")
@click.option("--item", "item_id", required=True, help="Catalog item ID.")
@click.option("--quantity", type=int, default=None, help="On-hand quantity.")
@click.option("--untracked", is_flag=True, default=False, help="Stop tracking stock.")
@click.pass_obj
def catalog_set_stock(
    container: Container, item_id: str, quantity: int | None, untracked: bool
) -> None:
    """Set the on-hand quantity of an item."""
    if untracked == (quantity is not None):
        raise click.UsageError("Pass exactly one of --quantity or --untracked")

    try:
        change = container.set_inventory().handle(item_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    new = "untracked" if change.new is None else change.new
    click.echo(f"Stock for '{item_id}' set to {new}")
    echo_reports(container.restock_worker.drain())
