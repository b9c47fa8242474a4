"""Application service: Set Inventory use case (staff stock edit)."""

from __future__ import annotations

import structlog

from storefront.application.restock import RestockQueue, record_inventory_change
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.catalog import InventoryChange
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class SetInventoryHandler:

    def __init__(self, uow: UnitOfWork, restock_queue: RestockQueue) -> None:
        self._uow = uow
        self._restock_queue = restock_queue

    def handle(self, item_id: str, quantity: int | None) -> InventoryChange:
        """Overwrite the on-hand quantity of an item.

        ``None`` stops stock tracking.  If the edit brings the item back
        from zero, subscribers are queued for notification once the new
        quantity is durable.
        """
        with self._uow:
            item = self._uow.catalog.get_by_id(item_id)
            if item is None:
                raise EntityNotFoundError(f"Product with ID '{item_id}' not found")

            change = item.set_inventory(quantity)
            self._uow.catalog.save(item)
            self._uow.commit()

        logger.info(
            "Inventory updated",
            item_id=item_id,
            previous_qty=change.previous,
            new_qty=change.new,
        )
        record_inventory_change(self._restock_queue, change)
        return change
