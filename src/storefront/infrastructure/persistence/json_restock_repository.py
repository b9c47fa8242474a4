"""JSON-document-backed implementation of RestockSubscriptionRepository."""

from __future__ import annotations

from datetime import datetime

from storefront.domain.model.restock import RestockSubscription
from storefront.domain.repository.restock_repository import (
    RestockSubscriptionRepository,
)
from storefront.infrastructure.persistence.json_session import JsonSession


class JsonRestockSubscriptionRepository(RestockSubscriptionRepository):

    _COLLECTION = "restock_subscriptions"

    def __init__(self, session: JsonSession) -> None:
        self._session = session

    def get(self, user_id: str, item_id: str) -> RestockSubscription | None:
        raw = self._session.get(self._COLLECTION, f"{user_id}:{item_id}")
        return self._to_domain(raw) if raw is not None else None

    def list_pending_for_item(self, item_id: str) -> list[RestockSubscription]:
        subscriptions = [
            self._to_domain(raw)
            for raw in self._session.values(self._COLLECTION)
            if raw["item_id"] == item_id and raw.get("notified_at") is None
        ]
        return sorted(subscriptions, key=lambda s: s.created_at)

    def save(self, subscription: RestockSubscription) -> None:
        self._session.put(self._COLLECTION, subscription.key, self._to_raw(subscription))

    def delete(self, subscription: RestockSubscription) -> None:
        self._session.delete(self._COLLECTION, subscription.key)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(subscription: RestockSubscription) -> dict:
        return {
            "user_id": subscription.user_id,
            "item_id": subscription.item_id,
            "created_at": subscription.created_at.isoformat(),
            "notified_at": (
                subscription.notified_at.isoformat() if subscription.notified_at else None
            ),
        }

    @staticmethod
    def _to_domain(raw: dict) -> RestockSubscription:
        notified_at = raw.get("notified_at")
        return RestockSubscription(
            user_id=raw["user_id"],
            item_id=raw["item_id"],
            created_at=datetime.fromisoformat(raw["created_at"]),
            notified_at=datetime.fromisoformat(notified_at) if notified_at else None,
        )
