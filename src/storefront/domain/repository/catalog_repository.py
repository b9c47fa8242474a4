"""Abstract repositories for the catalog collaborators.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, SQL, in-memory)
live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.catalog import CatalogItem, ServiceAddOn


class CatalogRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: str) -> CatalogItem | None:
        """Return a catalog item by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[CatalogItem]:
        """Return every item in the catalog."""

    @abstractmethod
    def save(self, item: CatalogItem) -> None:
        """Persist a new or updated item (inventory changes included)."""


class ServiceRepository(ABC):

    @abstractmethod
    def get_by_id(self, service_id: str) -> ServiceAddOn | None:
        """Return a service add-on by its ID, or None if not found."""
