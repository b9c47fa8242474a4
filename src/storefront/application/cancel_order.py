"""Application service: Cancel Order use case (customer side).

Customers can only withdraw an order that has not been paid yet.  Nothing
was debited for a Pending order, so no inventory changes are needed.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import OrderNotFoundError
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class CancelOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int) -> None:
        with self._uow:
            order = self._uow.orders.get_by_id(order_id)
            if order is None:
                raise OrderNotFoundError(f"Order #{order_id} not found")

            order.cancel()
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info("Order cancelled", order_id=order_id, user_id=order.user_id)
