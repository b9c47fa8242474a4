"""Read-only repositories for customer-owned records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.customer import Address, Customer


class CustomerRepository(ABC):

    @abstractmethod
    def get_by_id(self, user_id: str) -> Customer | None:
        """Return a customer account, or None if not found."""


class AddressRepository(ABC):

    @abstractmethod
    def get_by_id(self, address_id: str) -> Address | None:
        """Return a shipping address, or None if not found."""
