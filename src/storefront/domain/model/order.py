"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its line items.  Lines are a
frozen snapshot of the cart at checkout time; only status, payment
correlation ids and timestamps change afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import InvalidTransitionError, ValidationError
from storefront.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"
    CONFIRMED = "Confirmed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


TERMINAL_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELLED})

# One step forward at a time.  PAID is reached only through payment
# confirmation, never through a staff status change.
_NEXT_STATUS = {
    OrderStatus.PENDING: OrderStatus.CONFIRMED,
    OrderStatus.PAID: OrderStatus.CONFIRMED,
    OrderStatus.CONFIRMED: OrderStatus.PROCESSING,
    OrderStatus.PROCESSING: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
    OrderStatus.DELIVERED: OrderStatus.COMPLETED,
}


def is_valid_transition(current: OrderStatus, new: OrderStatus) -> bool:
    """Transition rule used by the staff fulfillment workflow."""
    if current == new:
        return True
    if new == OrderStatus.CANCELLED:
        return current not in TERMINAL_STATUSES
    if current in TERMINAL_STATUSES:
        return False
    return _NEXT_STATUS.get(current) == new


@dataclass(frozen=True)
class LineSnapshot:
    """Display data copied from the catalog so later edits don't leak in."""

    name: str
    item_type: str
    image_url: str | None = None
    service_name: str | None = None
    prescription: str | None = None
    lens_name: str | None = None

    @property
    def label(self) -> str:
        """Name shown on receipts and the payment page."""
        return " + ".join(part for part in (self.name, self.lens_name, self.service_name) if part)


@dataclass(frozen=True)
class OrderLine:
    item_id: str
    quantity: Quantity
    unit_price: Money  # everything charged per unit, locked at creation
    snapshot: LineSnapshot
    lens_id: str | None = None  # fitted lens of a combo line, stocked separately

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders, which enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    user_id: str
    address_id: str
    lines: list[OrderLine]
    total_amount: Money
    status: OrderStatus = OrderStatus.PENDING
    payment_session_id: str | None = None
    payment_intent_id: str | None = None
    inventory_debited: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None
    version: int = 0

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(user_id: str, address_id: str, lines: list[OrderLine]) -> Order:
        """Create a Pending order and freeze its total."""
        if not lines:
            raise ValidationError("Order must contain at least one line")

        total = lines[0].line_total
        for line in lines[1:]:
            total = total + line.line_total

        return Order(
            id=None,
            user_id=user_id,
            address_id=address_id,
            lines=list(lines),
            total_amount=total,
        )

    # --- State transitions ----------------------------------------------------

    def attach_checkout_session(self, session_id: str) -> None:
        if self.status != OrderStatus.PENDING:
            raise InvalidTransitionError(
                f"Cannot start checkout: order is {self.status.value}, expected Pending"
            )
        self.payment_session_id = session_id
        self._touch()

    def mark_paid(self, payment_intent_id: str | None) -> bool:
        """Record the customer's payment.

        A Pending order becomes Paid.  An order staff already moved along
        the workflow keeps its status; only the payment is recorded.
        Returns False without changing anything once a payment is on
        record, or when the order is Completed or Cancelled, so duplicate
        gateway deliveries are no-ops.  Inventory debit is coordinated by
        the application handler.
        """
        if self.payment_recorded or self.status in TERMINAL_STATUSES:
            return False
        if self.status == OrderStatus.PENDING:
            self.status = OrderStatus.PAID
        self.payment_intent_id = payment_intent_id
        self.inventory_debited = True
        self._touch()
        return True

    def cancel(self) -> None:
        """Customer-side cancellation: Pending -> Cancelled only."""
        if self.status != OrderStatus.PENDING:
            raise InvalidTransitionError(
                f"Only pending orders can be cancelled; order is {self.status.value}"
            )
        self.status = OrderStatus.CANCELLED
        self._touch()

    def change_status(self, new_status: OrderStatus) -> None:
        """Staff workflow transition.

        When moving to Cancelled, any inventory restore must happen *before*
        calling this (see ``restock_required``).
        """
        if not is_valid_transition(self.status, new_status):
            raise InvalidTransitionError(
                f"Cannot move order from {self.status.value} to {new_status.value}"
            )
        if new_status == self.status:
            return
        self.status = new_status
        if new_status == OrderStatus.CANCELLED:
            self.inventory_debited = False
        self._touch()

    # --- Computed properties --------------------------------------------------

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED

    @property
    def payment_recorded(self) -> bool:
        return self.payment_intent_id is not None or self.inventory_debited

    @property
    def restock_required(self) -> bool:
        """True if cancelling now must put the lines back on the shelf."""
        return self.inventory_debited and self.status not in TERMINAL_STATUSES

    def computed_total(self) -> Money:
        total = Money.zero(self.total_amount.currency)
        for line in self.lines:
            total = total + line.line_total
        return total

    # --- Internal helpers -----------------------------------------------------

    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
