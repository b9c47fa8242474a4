"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the delivery layers (CLI, HTTP) and the
application layer without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.order import Order


@dataclass(frozen=True)
class OrderLineDTO:
    item_id: str
    name: str
    item_type: str
    lens_name: str | None
    service_name: str | None
    quantity: int
    unit_price: str  # formatted, e.g. "120,000 VND"
    line_total: str

    @property
    def label(self) -> str:
        return _label(self.name, self.lens_name, self.service_name)


@dataclass(frozen=True)
class OrderDTO:
    id: int
    user_id: str
    address_id: str
    status: str
    lines: list[OrderLineDTO]
    total: str
    payment_session_id: str | None
    created_at: str

    @staticmethod
    def from_order(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            user_id=order.user_id,
            address_id=order.address_id,
            status=order.status.value,
            lines=[
                OrderLineDTO(
                    item_id=line.item_id,
                    name=line.snapshot.name,
                    item_type=line.snapshot.item_type,
                    lens_name=line.snapshot.lens_name,
                    service_name=line.snapshot.service_name,
                    quantity=line.quantity.value,
                    unit_price=str(line.unit_price),
                    line_total=str(line.line_total),
                )
                for line in order.lines
            ],
            total=str(order.total_amount),
            payment_session_id=order.payment_session_id,
            created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
        )


@dataclass(frozen=True)
class CartLineDTO:
    line_id: int
    item_id: str
    name: str
    lens_name: str | None
    service_name: str | None
    quantity: int
    unit_price: str  # before prescription fee
    prescription_fee: str | None  # per unit
    line_total: str

    @property
    def label(self) -> str:
        return _label(self.name, self.lens_name, self.service_name)


@dataclass(frozen=True)
class CartDTO:
    user_id: str
    lines: list[CartLineDTO]
    subtotal: str
    prescription_fees: str
    total: str


@dataclass(frozen=True)
class CatalogItemDTO:
    id: str
    sku: str
    name: str
    item_type: str
    price: str
    is_active: bool
    inventory_qty: int | None


def _label(*parts: str | None) -> str:
    return " + ".join(part for part in parts if part)
