"""Customer-side collaborators read by the order engine.

Accounts and addresses are owned elsewhere; this core only needs the
contact e-mail for notifications and the owner of a shipping address.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Customer:
    id: str
    email: str
    full_name: str | None = None

    @property
    def display_name(self) -> str:
        return self.full_name or self.email


@dataclass(frozen=True)
class Address:
    id: str
    user_id: str
    recipient_name: str | None = None
    line1: str | None = None
    city: str | None = None
    phone: str | None = None

    def belongs_to(self, user_id: str) -> bool:
        return self.user_id == user_id
