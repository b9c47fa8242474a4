"""Domain service: Inventory.

Coordinates the cross-aggregate work of moving stock in and out of the
catalog on behalf of an order.  Lives in the domain layer because the
rules (availability, clamping, restore-on-cancel) are core business rules,
not just orchestration.
"""

from __future__ import annotations

from storefront.domain.exceptions import (
    InsufficientStockError,
    ProductUnavailableError,
)
from storefront.domain.model.catalog import CatalogItem, InventoryChange, ServiceAddOn
from storefront.domain.model.order import Order
from storefront.domain.repository.catalog_repository import CatalogRepository


def assert_orderable(item: CatalogItem, quantity: int) -> None:
    """Reject inactive items and tracked items short on stock.

    This is a read-only check: nothing is reserved.
    """
    if not item.is_active:
        raise ProductUnavailableError(f'Product "{item.name}" is no longer available')
    assert_in_stock(item, quantity)


def assert_in_stock(item: CatalogItem, quantity: int) -> None:
    if not item.has_stock_for(quantity):
        raise InsufficientStockError(
            f'Insufficient stock for "{item.name}" '
            f"(need {quantity}, have {item.inventory_qty} available)"
        )


def assert_service_offered(service: ServiceAddOn) -> None:
    if not service.is_active:
        raise ProductUnavailableError(f'Service "{service.name}" is no longer available')


class InventoryService:

    def __init__(self, catalog: CatalogRepository) -> None:
        self._catalog = catalog

    def debit_for_order(self, order: Order) -> list[InventoryChange]:
        """Take every line's quantity off its catalog item (and a combo's lens).

        Untracked items are left alone; tracked ones clamp at zero rather
        than fail, since the customer has already paid.
        """
        changes: list[InventoryChange] = []
        for item, qty in self._load_lines(order):
            if not item.is_stock_tracked:
                continue
            changes.append(item.debit(qty))
            self._catalog.save(item)
        return changes

    def restore_for_order(self, order: Order) -> list[InventoryChange]:
        """Put every line's quantity back (cancellation after debit)."""
        changes: list[InventoryChange] = []
        for item, qty in self._load_lines(order):
            if not item.is_stock_tracked:
                continue
            changes.append(item.credit(qty))
            self._catalog.save(item)
        return changes

    def _load_lines(self, order: Order) -> list[tuple[CatalogItem, int]]:
        """Load every referenced item before touching any of them.

        Several lines may point at the same item (different services or
        prescriptions, or a lens sold alone and fitted in a combo); they
        share one loaded instance so quantities add up.  Items removed from
        the catalog since checkout are skipped.
        """
        loaded: dict[str, CatalogItem] = {}
        result: list[tuple[CatalogItem, int]] = []
        for line in order.lines:
            for item_id in (line.item_id, line.lens_id):
                if item_id is None:
                    continue
                item = loaded.get(item_id)
                if item is None:
                    item = self._catalog.get_by_id(item_id)
                    if item is None:
                        continue
                    loaded[item_id] = item
                result.append((item, line.quantity.value))
        return result
