"""JSON-document-backed catalog and service add-on repositories."""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.model.catalog import (
    CatalogItem,
    FrameDetails,
    ItemVariant,
    LensDetails,
    ServiceAddOn,
)
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money
from storefront.domain.repository.catalog_repository import (
    CatalogRepository,
    ServiceRepository,
)
from storefront.infrastructure.persistence.json_session import JsonSession


class JsonCatalogRepository(CatalogRepository):

    _COLLECTION = "catalog_items"

    def __init__(self, session: JsonSession) -> None:
        self._session = session

    # --- CatalogRepository interface ------------------------------------------

    def get_by_id(self, item_id: str) -> CatalogItem | None:
        raw = self._session.get(self._COLLECTION, item_id)
        return self._to_domain(raw) if raw is not None else None

    def list_all(self) -> list[CatalogItem]:
        items = [self._to_domain(raw) for raw in self._session.values(self._COLLECTION)]
        return sorted(items, key=lambda item: item.id)

    def save(self, item: CatalogItem) -> None:
        item.version = self._session.put(self._COLLECTION, item.id, self._to_raw(item))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: CatalogItem) -> dict:
        return {
            "id": item.id,
            "sku": item.sku,
            "name": item.name,
            "price": str(item.price.amount),
            "currency": item.price.currency,
            "is_active": item.is_active,
            "inventory_qty": item.inventory_qty,
            "primary_image_url": item.primary_image_url,
            "variant": _variant_to_raw(item.variant),
        }

    @staticmethod
    def _to_domain(raw: dict) -> CatalogItem:
        currency = raw.get("currency", DEFAULT_CURRENCY)
        return CatalogItem(
            id=raw["id"],
            sku=raw.get("sku", raw["id"]),
            name=raw["name"],
            price=Money(Decimal(raw["price"]), currency),
            variant=_variant_to_domain(raw.get("variant") or {"kind": "Frame"}, currency),
            is_active=raw.get("is_active", True),
            inventory_qty=raw.get("inventory_qty"),
            primary_image_url=raw.get("primary_image_url"),
            version=raw.get("version", 0),
        )


class JsonServiceRepository(ServiceRepository):

    _COLLECTION = "services"

    def __init__(self, session: JsonSession) -> None:
        self._session = session

    def get_by_id(self, service_id: str) -> ServiceAddOn | None:
        raw = self._session.get(self._COLLECTION, service_id)
        if raw is None:
            return None
        return ServiceAddOn(
            id=raw["id"],
            name=raw["name"],
            price=Money(Decimal(raw["price"]), raw.get("currency", DEFAULT_CURRENCY)),
            is_active=raw.get("is_active", True),
        )


def _variant_to_raw(variant: ItemVariant) -> dict:
    if isinstance(variant, LensDetails):
        return {
            "kind": LensDetails.kind,
            "lens_index": str(variant.lens_index) if variant.lens_index is not None else None,
            "lens_type": variant.lens_type,
            "prescription_required": variant.prescription_required,
            "prescription_fee": (
                str(variant.prescription_fee.amount)
                if variant.prescription_fee is not None
                else None
            ),
        }
    return {
        "kind": FrameDetails.kind,
        "material": variant.material,
        "frame_type": variant.frame_type,
        "color": variant.color,
    }


def _variant_to_domain(raw: dict, currency: str) -> ItemVariant:
    """Lens fees are stored as bare amounts in the item's own currency."""
    if raw.get("kind") == LensDetails.kind:
        lens_index = raw.get("lens_index")
        fee = raw.get("prescription_fee")
        return LensDetails(
            lens_index=Decimal(lens_index) if lens_index is not None else None,
            lens_type=raw.get("lens_type"),
            prescription_required=raw.get("prescription_required", False),
            prescription_fee=Money(Decimal(fee), currency) if fee is not None else None,
        )
    return FrameDetails(
        material=raw.get("material"),
        frame_type=raw.get("frame_type"),
        color=raw.get("color"),
    )
