"""Read-only JSON lookups for customers and their addresses."""

from __future__ import annotations

from storefront.domain.model.customer import Address, Customer
from storefront.domain.repository.customer_repository import (
    AddressRepository,
    CustomerRepository,
)
from storefront.infrastructure.persistence.json_session import JsonSession


class JsonCustomerRepository(CustomerRepository):

    def __init__(self, session: JsonSession) -> None:
        self._session = session

    def get_by_id(self, user_id: str) -> Customer | None:
        raw = self._session.get("customers", user_id)
        if raw is None:
            return None
        return Customer(id=raw["id"], email=raw["email"], full_name=raw.get("full_name"))


class JsonAddressRepository(AddressRepository):

    def __init__(self, session: JsonSession) -> None:
        self._session = session

    def get_by_id(self, address_id: str) -> Address | None:
        raw = self._session.get("addresses", address_id)
        if raw is None:
            return None
        return Address(
            id=raw["id"],
            user_id=raw["user_id"],
            recipient_name=raw.get("recipient_name"),
            line1=raw.get("line1"),
            city=raw.get("city"),
            phone=raw.get("phone"),
        )
