"""Application service: Change Order Status use case (staff workflow).

Moving an order to Cancelled after its inventory was debited puts every
line's quantity back on its catalog item in the same unit of work.  Items
that come back into stock are announced only after the commit succeeds.
"""

from __future__ import annotations

import structlog

from storefront.application.restock import RestockQueue, record_inventory_change
from storefront.domain.exceptions import InvalidTransitionError, OrderNotFoundError
from storefront.domain.model.catalog import InventoryChange
from storefront.domain.model.order import OrderStatus, is_valid_transition
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_service import InventoryService

logger = structlog.get_logger(__name__)


class ChangeOrderStatusHandler:

    def __init__(self, uow: UnitOfWork, restock_queue: RestockQueue) -> None:
        self._uow = uow
        self._restock_queue = restock_queue

    def handle(self, order_id: int, new_status: OrderStatus) -> None:
        restored: list[InventoryChange] = []

        with self._uow:
            order = self._uow.orders.get_by_id(order_id)
            if order is None:
                raise OrderNotFoundError(f"Order #{order_id} not found")

            previous = order.status
            if not is_valid_transition(previous, new_status):
                raise InvalidTransitionError(
                    f"Cannot move order from {previous.value} to {new_status.value}"
                )

            if new_status == OrderStatus.CANCELLED and order.restock_required:
                restored = InventoryService(self._uow.catalog).restore_for_order(order)

            order.change_status(new_status)
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "Order status changed",
            order_id=order_id,
            previous=previous.value,
            status=new_status.value,
        )
        if restored:
            logger.info(
                "Inventory restored",
                order_id=order_id,
                items=[c.item_id for c in restored],
            )
        for change in restored:
            record_inventory_change(self._restock_queue, change)
