"""Unit of Work: the transaction boundary around the repositories.

Handlers open one unit of work per use case::

    with self._uow:
        ...
        self._uow.commit()

Leaving the block without ``commit()`` discards every change.  A unit of
work can be entered again afterwards for a fresh transaction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from storefront.domain.repository.cart_repository import CartRepository
from storefront.domain.repository.catalog_repository import (
    CatalogRepository,
    ServiceRepository,
)
from storefront.domain.repository.customer_repository import (
    AddressRepository,
    CustomerRepository,
)
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.restock_repository import (
    RestockSubscriptionRepository,
)


class UnitOfWork(ABC):

    catalog: CatalogRepository
    services: ServiceRepository
    customers: CustomerRepository
    addresses: AddressRepository
    carts: CartRepository
    orders: OrderRepository
    restock_subscriptions: RestockSubscriptionRepository

    def __enter__(self) -> UnitOfWork:
        self._begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def _begin(self) -> None:
        """Start a transaction and bind fresh repositories."""

    @abstractmethod
    def commit(self) -> None:
        """Make every change in this transaction durable, or none of them.

        Raises ConcurrentModificationError if a written record changed
        since it was read.
        """

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes.  Safe to call after commit()."""


UnitOfWorkFactory = Callable[[], UnitOfWork]
