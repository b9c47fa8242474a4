"""Cart aggregate.

A user has at most one open cart.  Lines have no lifecycle of their own:
they are only created, merged, resized and removed through the Cart.

A combo line (frame with a fitted lens and a service) is a single line
that references two catalog items.  Combo lines are never merged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


@dataclass
class CartLine:
    id: int
    item_id: str
    quantity: int
    service_id: str | None = None
    prescription: str | None = None  # opaque blob, compared verbatim
    prescription_fee: Money | None = None  # per unit, fixed when the line was added
    lens_id: str | None = None  # set on combo lines only

    @property
    def is_combo(self) -> bool:
        return self.lens_id is not None

    def matches(
        self, item_id: str, service_id: str | None, prescription: str | None
    ) -> bool:
        return (
            not self.is_combo
            and self.item_id == item_id
            and self.service_id == service_id
            and self.prescription == prescription
        )


@dataclass
class Cart:
    """Aggregate root for a user's shopping cart."""

    user_id: str
    lines: list[CartLine] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def find_matching(
        self, item_id: str, service_id: str | None, prescription: str | None
    ) -> CartLine | None:
        for line in self.lines:
            if line.matches(item_id, service_id, prescription):
                return line
        return None

    def find_line(self, line_id: int) -> CartLine | None:
        for line in self.lines:
            if line.id == line_id:
                return line
        return None

    def add(
        self,
        line_id: int,
        item_id: str,
        quantity: int,
        service_id: str | None = None,
        prescription: str | None = None,
        prescription_fee: Money | None = None,
    ) -> CartLine:
        """Merge into an identical line or append a new one.

        ``line_id`` and ``prescription_fee`` are only used when a new line
        is inserted; a merged line keeps the fee it was added with.
        """
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        existing = self.find_matching(item_id, service_id, prescription)
        if existing is not None:
            existing.quantity += quantity
            return existing

        line = CartLine(
            id=line_id,
            item_id=item_id,
            quantity=quantity,
            service_id=service_id,
            prescription=prescription,
            prescription_fee=prescription_fee,
        )
        self.lines.append(line)
        return line

    def add_combo(
        self,
        line_id: int,
        frame_id: str,
        lens_id: str,
        service_id: str,
        quantity: int,
    ) -> CartLine:
        """Append a frame-with-lens line; never merged with another line."""
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        line = CartLine(
            id=line_id,
            item_id=frame_id,
            quantity=quantity,
            service_id=service_id,
            lens_id=lens_id,
        )
        self.lines.append(line)
        return line

    def set_quantity(self, line_id: int, quantity: int) -> None:
        """Resize a line; zero or less drops it."""
        line = self.find_line(line_id)
        if line is None:
            raise ValidationError(f"Cart line #{line_id} not found in this cart")
        if quantity <= 0:
            self.remove(line_id)
        else:
            line.quantity = quantity

    def remove(self, line_id: int) -> None:
        self.lines = [line for line in self.lines if line.id != line_id]

    def clear(self) -> None:
        self.lines = []
