"""Catalog aggregate: sellable items and service add-ons.

Frames and lenses share one ``CatalogItem`` shape and differ only in the
variant payload.  Cart and order logic reads the shared fields (price,
active flag, on-hand quantity) and never looks at the variant; the item
itself answers variant questions such as its prescription fee.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money

# Charged per unit when a prescription rides on a lens that has no fee of its own
DEFAULT_PRESCRIPTION_FEE = Decimal("500000")


@dataclass(frozen=True)
class FrameDetails:
    material: str | None = None
    frame_type: str | None = None
    color: str | None = None

    kind = "Frame"


@dataclass(frozen=True)
class LensDetails:
    lens_index: Decimal | None = None
    lens_type: str | None = None
    prescription_required: bool = False
    prescription_fee: Money | None = None  # per unit; None falls back to the default

    kind = "Lens"


ItemVariant = Union[FrameDetails, LensDetails]


@dataclass(frozen=True)
class InventoryChange:
    """Before/after on-hand quantity of one item, produced by every mutation."""

    item_id: str
    previous: int | None
    new: int | None


@dataclass
class CatalogItem:
    """A product on sale.

    ``inventory_qty`` of ``None`` means the item is not stock-tracked.
    Once tracked, the quantity never goes below zero: debits clamp.
    """

    id: str
    sku: str
    name: str
    price: Money
    variant: ItemVariant
    is_active: bool = True
    inventory_qty: int | None = None
    primary_image_url: str | None = None
    version: int = 0

    @property
    def item_type(self) -> str:
        return self.variant.kind

    @property
    def is_stock_tracked(self) -> bool:
        return self.inventory_qty is not None

    def has_stock_for(self, quantity: int) -> bool:
        if self.inventory_qty is None:
            return True
        return self.inventory_qty >= quantity

    def prescription_fee_for(self, prescription: str | None) -> Money | None:
        """Per-unit surcharge for a line of this item carrying ``prescription``.

        Only lenses that take a prescription charge one, and only when the
        line actually carries prescription data.
        """
        if not prescription:
            return None
        if not isinstance(self.variant, LensDetails) or not self.variant.prescription_required:
            return None
        if self.variant.prescription_fee is not None:
            return self.variant.prescription_fee
        return Money(DEFAULT_PRESCRIPTION_FEE, self.price.currency)

    def debit(self, quantity: int) -> InventoryChange:
        """Remove sold units, clamping at zero instead of rejecting."""
        previous = self.inventory_qty
        if previous is not None:
            self.inventory_qty = max(previous - quantity, 0)
        return InventoryChange(self.id, previous, self.inventory_qty)

    def credit(self, quantity: int) -> InventoryChange:
        """Put units back on the shelf (cancellation restore)."""
        previous = self.inventory_qty
        if previous is not None:
            self.inventory_qty = previous + quantity
        return InventoryChange(self.id, previous, self.inventory_qty)

    def set_inventory(self, quantity: int | None) -> InventoryChange:
        """Staff edit of the on-hand quantity; ``None`` stops tracking."""
        if quantity is not None and quantity < 0:
            raise ValidationError("Inventory quantity cannot be negative")
        previous = self.inventory_qty
        self.inventory_qty = quantity
        return InventoryChange(self.id, previous, quantity)


@dataclass
class ServiceAddOn:
    """An optional service (lens fitting, engraving, ...) priced per unit."""

    id: str
    name: str
    price: Money
    is_active: bool = True


def unit_price(
    item: CatalogItem,
    service: ServiceAddOn | None = None,
    lens: CatalogItem | None = None,
) -> Money:
    """Base price of one unit of a cart/order line.

    The item, plus the fitted lens of a frame-and-lens combo, plus the
    optional service.  Prescription fees are kept apart.
    """
    price = item.price
    if lens is not None:
        price = price + lens.price
    if service is not None:
        price = price + service.price
    return price
