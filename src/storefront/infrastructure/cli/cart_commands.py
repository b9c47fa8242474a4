"""CLI commands for the Cart aggregate."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import Container


@click.command("add")
@click.option("--user", "user_id", required=True, help="Customer ID.")
@click.option("--item", "item_id", required=True, help="Catalog item ID.")
@click.option("--quantity", type=int, default=1, show_default=True)
@click.option("--service", "service_id", default=None, help="Service add-on ID.")
@click.option("--prescription", default=None, help="Prescription data, stored as given.")
@click.pass_obj
def cart_add(
    container: Container,
    user_id: str,
    item_id: str,
    quantity: int,
    service_id: str | None,
    prescription: str | None,
) -> None:
    """Add an item to a cart."""
    try:
        line = container.add_to_cart().handle(
            user_id, item_id, quantity, service_id=service_id, prescription=prescription
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cart line #{line.id}: {line.item_id} x{line.quantity}")


@click.command("add-service")
@click.option("--user", "user_id", required=True, help="Customer ID.")
@click.option("--frame", "frame_id", required=True, help="Frame to send to the workshop.")
@click.option("--lens", "lens_id", required=True, help="Lens to fit into the frame.")
@click.option("--service", "service_id", required=True, help="Service to perform.")
@click.option("--quantity", type=int, default=1, show_default=True)
@click.pass_obj
def cart_add_service(
    container: Container,
    user_id: str,
    frame_id: str,
    lens_id: str,
    service_id: str,
    quantity: int,
) -> None:
    """Add a frame fitted with a lens and a service as one cart line."""
    try:
        line = container.add_service_order().handle(
            user_id, frame_id, lens_id, service_id, quantity
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Cart line #{line.id}: {line.item_id} + {line.lens_id} ({line.service_id}) x{line.quantity}"
    )


@click.command("update")
@click.option("--line", "line_id", required=True, type=int, help="Cart line ID.")
@click.option("--quantity", required=True, type=int, help="New quantity; 0 removes the line.")
@click.pass_obj
def cart_update(container: Container, line_id: int, quantity: int) -> None:
    """Change the quantity of a cart line."""
    try:
        container.update_cart_quantity().handle(line_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if quantity <= 0:
        click.echo(f"Cart line #{line_id} removed.")
    else:
        click.echo(f"Cart line #{line_id} set to {quantity}.")


@click.command("remove")
@click.option("--line", "line_id", required=True, type=int, help="Cart line ID.")
@click.pass_obj
def cart_remove(container: Container, line_id: int) -> None:
    """Remove a line from its cart."""
    container.remove_cart_item().handle(line_id)
    click.echo(f"Cart line #{line_id} removed.")


@click.command("clear")
@click.option("--user", "user_id", required=True, help="Customer ID.")
@click.pass_obj
def cart_clear(container: Container, user_id: str) -> None:
    """Empty a customer's cart."""
    container.clear_cart().handle(user_id)
    click.echo(f"Cart for '{user_id}' cleared.")


@click.command("show")
@click.option("--user", "user_id", required=True, help="Customer ID.")
@click.pass_obj
def cart_show(container: Container, user_id: str) -> None:
    """Show a cart with live prices."""
    dto = container.show_cart().handle(user_id)

    if not dto.lines:
        click.echo(f"Cart for '{user_id}' is empty.")
        return

    click.echo(f"Cart for '{user_id}'")
    click.echo()
    click.echo(f"  {'Line':>5} {'Item':<30} {'Qty':>5} {'Price':>16} {'Total':>16}")
    click.echo(f"  {'-'*76}")
    for line in dto.lines:
        click.echo(
            f"  {line.line_id:>5} {line.label:<30} {line.quantity:>5} "
            f"{line.unit_price:>16} {line.line_total:>16}"
        )
        if line.prescription_fee:
            click.echo(f"  {'':>5} {'  prescription fee':<30} {'':>5} {line.prescription_fee:>16}")
    click.echo(f"  {'-'*76}")
    click.echo(f"  {'Subtotal':<42} {dto.subtotal:>34}")
    click.echo(f"  {'Prescription Fees':<42} {dto.prescription_fees:>34}")
    click.echo(f"  {'Cart Total':<42} {dto.total:>34}")


@click.command("total")
@click.option("--user", "user_id", required=True, help="Customer ID.")
@click.pass_obj
def cart_total(container: Container, user_id: str) -> None:
    """Show the live quote split into subtotal and prescription fees."""
    totals = container.cart_totals_breakdown().handle(user_id)
    click.echo(f"Subtotal:          {totals.subtotal}")
    click.echo(f"Prescription fees: {totals.prescription_fees}")
    click.echo(f"Grand total:       {totals.grand_total}")
