"""Application services: "notify me when it's back" subscriptions."""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import (
    EntityNotFoundError,
    ProductUnavailableError,
    ValidationError,
)
from storefront.domain.model.restock import RestockSubscription
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class SubscribeRestockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, item_id: str) -> RestockSubscription:
        """Subscribe a user to an out-of-stock item.

        Items with stock on hand (or without stock tracking) can go straight
        into the cart, so subscribing to them is rejected.  A subscription
        that was already notified is re-armed instead of duplicated.
        """
        with self._uow:
            item = self._uow.catalog.get_by_id(item_id)
            if item is None:
                raise EntityNotFoundError(f"Product with ID '{item_id}' not found")
            if not item.is_active:
                raise ProductUnavailableError(f'Product "{item.name}" is no longer available')
            if item.inventory_qty is None or item.inventory_qty > 0:
                raise ValidationError(
                    f'"{item.name}" is currently in stock. You can add it to your cart!'
                )

            subscription = self._uow.restock_subscriptions.get(user_id, item_id)
            if subscription is not None and subscription.is_pending:
                raise ValidationError(f'"{item.name}" is already on your restock list')

            if subscription is None:
                subscription = RestockSubscription(user_id=user_id, item_id=item_id)
            else:
                subscription.rearm()
            self._uow.restock_subscriptions.save(subscription)
            self._uow.commit()

        logger.info("Restock subscription added", user_id=user_id, item_id=item_id)
        return subscription


class UnsubscribeRestockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str, item_id: str) -> bool:
        """Drop a subscription.  Returns False if there was none."""
        with self._uow:
            subscription = self._uow.restock_subscriptions.get(user_id, item_id)
            if subscription is None:
                return False
            self._uow.restock_subscriptions.delete(subscription)
            self._uow.commit()

        logger.info("Restock subscription removed", user_id=user_id, item_id=item_id)
        return True
