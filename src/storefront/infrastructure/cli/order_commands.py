"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.dto import OrderDTO
from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import OrderStatus
from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.cli.restock_commands import echo_reports


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.user_id}   Address: {dto.address_id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Item':<30} {'Qty':>5} {'Price':>16} {'Total':>16}")
    click.echo(f"  {'-'*70}")
    for line in dto.lines:
        click.echo(
            f"  {line.label:<30} {line.quantity:>5} {line.unit_price:>16} {line.line_total:>16}"
        )
    click.echo(f"  {'-'*70}")
    click.echo(f"  {'Order Total':<36} {dto.total:>34}")


@click.command("create")
@click.option("--user", "user_id", required=True, help="Customer ID.")
@click.option("--address", "address_id", required=True, help="Shipping address ID.")
@click.pass_obj
def order_create(container: Container, user_id: str, address_id: str) -> None:
    """Turn a customer's cart into a pending order."""
    try:
        dto = container.create_pending_order().handle(user_id, address_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} created  (status={dto.status})")
    click.echo()
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.pass_obj
def order_show(container: Container, order_id: int) -> None:
    """Show details of an existing order."""
    try:
        dto = container.show_order().handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--user", "user_id", required=True, help="Customer ID.")
@click.pass_obj
def order_list(container: Container, user_id: str) -> None:
    """List a customer's orders, newest first."""
    orders = container.list_orders().handle(user_id)

    if not orders:
        click.echo(f"No orders for '{user_id}'.")
        return

    for dto in orders:
        click.echo(f"#{dto.id:<6} {dto.status:<11} {dto.total:>16}  {dto.created_at}")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.pass_obj
def order_cancel(container: Container, order_id: int) -> None:
    """Cancel a pending order."""
    try:
        container.cancel_order().handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled.")


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option(
    "--to",
    "new_status",
    required=True,
    type=click.Choice([s.value for s in OrderStatus if s != OrderStatus.PAID]),
    help="Target status.",
)
@click.pass_obj
def order_status(container: Container, order_id: int, new_status: str) -> None:
    """Move an order along the fulfillment workflow."""
    try:
        container.change_order_status().handle(order_id, OrderStatus(new_status))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is now {new_status}.")
    echo_reports(container.restock_worker.drain())


@click.command("checkout")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to pay.")
@click.option("--success-url", default=None, help="Where to return after payment.")
@click.option("--cancel-url", default=None, help="Where to return on abandon.")
@click.pass_obj
def order_checkout(
    container: Container,
    order_id: int,
    success_url: str | None,
    cancel_url: str | None,
) -> None:
    """Open a hosted payment page for a pending order."""
    base_url = container.settings.base_url
    try:
        url = container.start_checkout().handle(
            order_id,
            success_url or f"{base_url}/checkout/success",
            cancel_url or f"{base_url}/checkout/cancel?order_id={order_id}",
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Checkout for order #{order_id}: {url}")


@click.command("confirm")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to mark paid.")
@click.option("--payment-intent", default=None, help="Gateway payment reference.")
@click.pass_obj
def order_confirm(container: Container, order_id: int, payment_intent: str | None) -> None:
    """Record a payment by hand (debits inventory, clears the cart)."""
    try:
        changed = container.confirm_payment().handle(order_id, payment_intent)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if changed:
        click.echo(f"Order #{order_id} paid.")
    else:
        click.echo(f"Order #{order_id} left unchanged.")
