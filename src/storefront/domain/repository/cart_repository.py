"""Abstract repository for the Cart aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.cart import Cart


class CartRepository(ABC):

    @abstractmethod
    def next_line_id(self) -> int:
        """Generate the next unique cart line ID."""

    @abstractmethod
    def get_by_user_id(self, user_id: str) -> Cart | None:
        """Return the user's open cart, or None if they have none yet."""

    @abstractmethod
    def get_by_line_id(self, line_id: int) -> Cart | None:
        """Return the cart holding the given line, or None."""

    @abstractmethod
    def save(self, cart: Cart) -> None:
        """Persist a new or updated cart together with its lines."""
