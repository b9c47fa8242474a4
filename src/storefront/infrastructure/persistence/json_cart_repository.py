"""JSON-document-backed implementation of CartRepository.

Carts are keyed by user id: a user's cart is a single record, lines
included.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.cart_repository import CartRepository
from storefront.infrastructure.persistence.json_session import JsonSession


class JsonCartRepository(CartRepository):

    _COLLECTION = "carts"

    def __init__(self, session: JsonSession) -> None:
        self._session = session

    # --- CartRepository interface ---------------------------------------------

    def next_line_id(self) -> int:
        return self._session.next_value("cart_lines")

    def get_by_user_id(self, user_id: str) -> Cart | None:
        raw = self._session.get(self._COLLECTION, user_id)
        return self._to_domain(raw) if raw is not None else None

    def get_by_line_id(self, line_id: int) -> Cart | None:
        for raw in self._session.values(self._COLLECTION):
            if any(line["id"] == line_id for line in raw["lines"]):
                return self._to_domain(raw)
        return None

    def save(self, cart: Cart) -> None:
        cart.version = self._session.put(self._COLLECTION, cart.user_id, self._to_raw(cart))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(cart: Cart) -> dict:
        return {
            "user_id": cart.user_id,
            "created_at": cart.created_at.isoformat(),
            "lines": [
                {
                    "id": line.id,
                    "item_id": line.item_id,
                    "quantity": line.quantity,
                    "service_id": line.service_id,
                    "prescription": line.prescription,
                    "prescription_fee": _money_to_raw(line.prescription_fee),
                    "lens_id": line.lens_id,
                }
                for line in cart.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Cart:
        return Cart(
            user_id=raw["user_id"],
            lines=[
                CartLine(
                    id=line["id"],
                    item_id=line["item_id"],
                    quantity=line["quantity"],
                    service_id=line.get("service_id"),
                    prescription=line.get("prescription"),
                    prescription_fee=_money_to_domain(line.get("prescription_fee")),
                    lens_id=line.get("lens_id"),
                )
                for line in raw["lines"]
            ],
            created_at=datetime.fromisoformat(raw["created_at"]),
            version=raw.get("version", 0),
        )


def _money_to_raw(money: Money | None) -> dict | None:
    if money is None:
        return None
    return {"amount": str(money.amount), "currency": money.currency}


def _money_to_domain(raw: dict | None) -> Money | None:
    if raw is None:
        return None
    return Money(Decimal(raw["amount"]), raw["currency"])
