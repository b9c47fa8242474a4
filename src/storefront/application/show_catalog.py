"""Application service: List Catalog use case (query)."""

from __future__ import annotations

from storefront.application.dto import CatalogItemDTO
from storefront.domain.repository.unit_of_work import UnitOfWork


class ListCatalogHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> list[CatalogItemDTO]:
        with self._uow:
            items = self._uow.catalog.list_all()
        return [
            CatalogItemDTO(
                id=item.id,
                sku=item.sku,
                name=item.name,
                item_type=item.item_type,
                price=str(item.price),
                is_active=item.is_active,
                inventory_qty=item.inventory_qty,
            )
            for item in items
        ]
