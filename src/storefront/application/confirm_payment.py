"""Application service: Confirm Payment use case.

Driven only by the payment webhook.  Gateways deliver the same event more
than once, so this must be idempotent: once a payment is on record the
order is left untouched and inventory is debited exactly once.  An order
staff confirmed before the payment arrived still gets its payment
recorded and its stock debited; its status stays where it is.

Mark-paid, inventory debit and cart clear commit together or not at all.
A failed attempt can simply be redelivered.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import OrderNotFoundError
from storefront.domain.model.order import TERMINAL_STATUSES
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_service import InventoryService

logger = structlog.get_logger(__name__)


class ConfirmPaymentHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, payment_intent_id: str | None) -> bool:
        """Mark the order paid.  Returns False when nothing had to change."""
        with self._uow:
            order = self._uow.orders.get_by_id(order_id)
            if order is None:
                raise OrderNotFoundError(f"Order #{order_id} not found")

            if order.status in TERMINAL_STATUSES and not order.payment_recorded:
                logger.warning(
                    "Payment received for closed order",
                    order_id=order_id,
                    status=order.status.value,
                    payment_intent_id=payment_intent_id,
                )
                return False

            if not order.mark_paid(payment_intent_id):
                logger.info(
                    "Payment already recorded",
                    order_id=order_id,
                    status=order.status.value,
                )
                return False

            changes = InventoryService(self._uow.catalog).debit_for_order(order)

            cart = self._uow.carts.get_by_user_id(order.user_id)
            if cart is not None and not cart.is_empty:
                cart.clear()
                self._uow.carts.save(cart)

            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "Order paid, inventory debited, cart cleared",
            order_id=order_id,
            user_id=order.user_id,
            debited_items=[c.item_id for c in changes],
        )
        return True
