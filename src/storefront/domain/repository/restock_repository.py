"""Abstract repository for restock subscriptions."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.restock import RestockSubscription


class RestockSubscriptionRepository(ABC):

    @abstractmethod
    def get(self, user_id: str, item_id: str) -> RestockSubscription | None:
        """Return one user's subscription for an item, or None."""

    @abstractmethod
    def list_pending_for_item(self, item_id: str) -> list[RestockSubscription]:
        """Return subscriptions for an item that have not been notified yet."""

    @abstractmethod
    def save(self, subscription: RestockSubscription) -> None:
        """Persist a new or updated subscription."""

    @abstractmethod
    def delete(self, subscription: RestockSubscription) -> None:
        """Remove a subscription."""
