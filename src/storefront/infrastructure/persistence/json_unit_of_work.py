"""JSON-file implementation of the UnitOfWork."""

from __future__ import annotations

from pathlib import Path

import structlog

from storefront.domain.exceptions import ConcurrentModificationError
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
    JsonServiceRepository,
)
from storefront.infrastructure.persistence.json_customer_repository import (
    JsonAddressRepository,
    JsonCustomerRepository,
)
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.persistence.json_restock_repository import (
    JsonRestockSubscriptionRepository,
)
from storefront.infrastructure.persistence.json_session import JsonSession
from storefront.infrastructure.persistence.json_store import JsonStore

logger = structlog.get_logger(__name__)


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonStore(file_path)
        self._session: JsonSession | None = None

    def _begin(self) -> None:
        session = JsonSession(self._store.load())
        self._session = session
        self.catalog = JsonCatalogRepository(session)
        self.services = JsonServiceRepository(session)
        self.customers = JsonCustomerRepository(session)
        self.addresses = JsonAddressRepository(session)
        self.carts = JsonCartRepository(session)
        self.orders = JsonOrderRepository(session)
        self.restock_subscriptions = JsonRestockSubscriptionRepository(session)

    def commit(self) -> None:
        session = self._session
        if session is None:
            raise RuntimeError("commit() called outside of a unit of work")
        self._session = None
        if not session.has_changes:
            return

        with self._store.lock():
            fresh = self._store.load()
            try:
                session.apply_to(fresh)
            except ConcurrentModificationError as exc:
                logger.warning("Commit rejected", reason=str(exc))
                raise
            self._store.write(fresh)

    def rollback(self) -> None:
        self._session = None
