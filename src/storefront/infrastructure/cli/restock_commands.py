"""CLI commands for back-in-stock subscriptions."""

from __future__ import annotations

import click

from storefront.application.notify_restock import DispatchReport
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import Container


def echo_reports(reports: list[DispatchReport]) -> None:
    for report in reports:
        click.echo(
            f"Restock '{report.item_id}': {len(report.delivered)} notified, "
            f"{len(report.failed)} failed"
        )


@click.command("subscribe")
@click.option("--user", "user_id", required=True, help="Customer ID.")
@click.option("--item", "item_id", required=True, help="Catalog item ID.")
@click.pass_obj
def restock_subscribe(container: Container, user_id: str, item_id: str) -> None:
    """Ask to be told when an item is back in stock."""
    try:
        container.subscribe_restock().handle(user_id, item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"'{user_id}' will be notified when '{item_id}' is back.")


@click.command("unsubscribe")
@click.option("--user", "user_id", required=True, help="Customer ID.")
@click.option("--item", "item_id", required=True, help="Catalog item ID.")
@click.pass_obj
def restock_unsubscribe(container: Container, user_id: str, item_id: str) -> None:
    """Drop a back-in-stock subscription."""
    if container.unsubscribe_restock().handle(user_id, item_id):
        click.echo(f"Subscription of '{user_id}' to '{item_id}' removed.")
    else:
        click.echo(f"'{user_id}' was not subscribed to '{item_id}'.")


@click.command("drain")
@click.option("--item", "item_id", required=True, help="Catalog item ID.")
@click.pass_obj
def restock_drain(container: Container, item_id: str) -> None:
    """Send every pending notice for an item now."""
    echo_reports([container.notify_restock.handle(item_id)])
