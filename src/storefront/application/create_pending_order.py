"""Application service: Create Pending Order use case.

Materializes the user's cart into a Pending order inside one unit of
work.  Every line is validated before anything is written, so a single
unavailable item aborts the whole checkout with no order left behind.

Stock is only *validated* here, never reserved or debited: two concurrent
checkouts for the last unit can both succeed.  The debit happens when the
payment is confirmed.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderDTO
from storefront.domain.exceptions import (
    EmptyCartError,
    EntityNotFoundError,
    ProductUnavailableError,
    ValidationError,
)
from storefront.domain.model.cart import CartLine
from storefront.domain.model.catalog import CatalogItem, unit_price
from storefront.domain.model.order import LineSnapshot, Order, OrderLine
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_service import (
    assert_orderable,
    assert_service_offered,
)

logger = structlog.get_logger(__name__)


class CreatePendingOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, address_id: str) -> OrderDTO:
        """Create a Pending order from the user's cart.

        Steps:
        1. Load the cart; fail if it is missing or empty.
        2. Check the address belongs to the user.
        3. Check every line (active items, enough tracked stock, service
           still offered).
        4. Build lines with *current* prices, the line's prescription fee
           and display snapshots.
        5. Persist the order with its frozen total.
        """
        with self._uow:
            cart = self._uow.carts.get_by_user_id(user_id)
            if cart is None or cart.is_empty:
                raise EmptyCartError("Cart is empty")

            address = self._uow.addresses.get_by_id(address_id)
            if address is None or not address.belongs_to(user_id):
                raise ValidationError("Invalid address")

            # Phase 1: load and validate everything before building anything
            resolved = []
            for cart_line in cart.lines:
                item = self._orderable(cart_line.item_id, cart_line.quantity)
                lens = None
                if cart_line.lens_id is not None:
                    lens = self._orderable(cart_line.lens_id, cart_line.quantity)

                service = None
                if cart_line.service_id is not None:
                    service = self._uow.services.get_by_id(cart_line.service_id)
                    if service is None:
                        raise EntityNotFoundError(
                            f"Service with ID '{cart_line.service_id}' not found"
                        )
                    assert_service_offered(service)
                resolved.append((cart_line, item, lens, service))

            # Phase 2: snapshot prices and display data
            lines = [
                OrderLine(
                    item_id=item.id,
                    quantity=Quantity(cart_line.quantity),
                    unit_price=_charged_per_unit(cart_line, unit_price(item, service, lens)),
                    snapshot=LineSnapshot(
                        name=item.name,
                        item_type=item.item_type,
                        image_url=item.primary_image_url,
                        service_name=service.name if service is not None else None,
                        prescription=cart_line.prescription,
                        lens_name=lens.name if lens is not None else None,
                    ),
                    lens_id=lens.id if lens is not None else None,
                )
                for cart_line, item, lens, service in resolved
            ]

            order = Order.create(user_id=user_id, address_id=address_id, lines=lines)
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "Created pending order",
            order_id=order.id,
            user_id=user_id,
            total=str(order.total_amount),
        )
        return OrderDTO.from_order(order)

    def _orderable(self, item_id: str, quantity: int) -> CatalogItem:
        item = self._uow.catalog.get_by_id(item_id)
        if item is None:
            raise ProductUnavailableError(f"Product with ID '{item_id}' no longer exists")
        assert_orderable(item, quantity)
        return item


def _charged_per_unit(cart_line: CartLine, base: Money) -> Money:
    """Base price plus the prescription fee the line was added with."""
    if cart_line.prescription_fee is None:
        return base
    return base + cart_line.prescription_fee
