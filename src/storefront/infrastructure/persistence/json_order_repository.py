"""JSON-document-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from storefront.domain.model.order import LineSnapshot, Order, OrderLine, OrderStatus
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_session import JsonSession


class JsonOrderRepository(OrderRepository):

    _COLLECTION = "orders"

    def __init__(self, session: JsonSession) -> None:
        self._session = session

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        return self._session.next_value("orders")

    def get_by_id(self, order_id: int) -> Order | None:
        raw = self._session.get(self._COLLECTION, str(order_id))
        return self._to_domain(raw) if raw is not None else None

    def get_by_payment_session_id(self, session_id: str) -> Order | None:
        for raw in self._session.values(self._COLLECTION):
            if raw.get("payment_session_id") == session_id:
                return self._to_domain(raw)
        return None

    def list_by_user(self, user_id: str) -> list[Order]:
        orders = [
            self._to_domain(raw)
            for raw in self._session.values(self._COLLECTION)
            if raw["user_id"] == user_id
        ]
        return sorted(orders, key=lambda o: (o.created_at, o.id), reverse=True)

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self.next_id()
        order.version = self._session.put(self._COLLECTION, str(order.id), self._to_raw(order))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "address_id": order.address_id,
            "status": order.status.value,
            "total_amount": str(order.total_amount.amount),
            "currency": order.total_amount.currency,
            "payment_session_id": order.payment_session_id,
            "payment_intent_id": order.payment_intent_id,
            "inventory_debited": order.inventory_debited,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat() if order.updated_at else None,
            "lines": [
                {
                    "item_id": line.item_id,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                    "name": line.snapshot.name,
                    "item_type": line.snapshot.item_type,
                    "image_url": line.snapshot.image_url,
                    "service_name": line.snapshot.service_name,
                    "prescription": line.snapshot.prescription,
                    "lens_id": line.lens_id,
                    "lens_name": line.snapshot.lens_name,
                }
                for line in order.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        lines = [
            OrderLine(
                item_id=line["item_id"],
                quantity=Quantity(line["quantity"]),
                unit_price=Money(
                    Decimal(line["unit_price"]), line.get("currency", DEFAULT_CURRENCY)
                ),
                snapshot=LineSnapshot(
                    name=line["name"],
                    item_type=line["item_type"],
                    image_url=line.get("image_url"),
                    service_name=line.get("service_name"),
                    prescription=line.get("prescription"),
                    lens_name=line.get("lens_name"),
                ),
                lens_id=line.get("lens_id"),
            )
            for line in raw["lines"]
        ]
        updated_at = raw.get("updated_at")
        return Order(
            id=raw["id"],
            user_id=raw["user_id"],
            address_id=raw["address_id"],
            lines=lines,
            total_amount=Money(
                Decimal(raw["total_amount"]), raw.get("currency", DEFAULT_CURRENCY)
            ),
            status=OrderStatus(raw["status"]),
            payment_session_id=raw.get("payment_session_id"),
            payment_intent_id=raw.get("payment_intent_id"),
            inventory_debited=raw.get("inventory_debited", False),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
            version=raw.get("version", 0),
        )
