"""Application services: resize, remove and clear cart lines."""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_service import assert_in_stock

logger = structlog.get_logger(__name__)


class UpdateCartQuantityHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, line_id: int, new_quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line.

        Stock is re-checked against the *current* on-hand quantity of the
        item, and of the fitted lens on a combo line.
        """
        with self._uow:
            cart = self._uow.carts.get_by_line_id(line_id)
            line = cart.find_line(line_id) if cart is not None else None
            if cart is None or line is None:
                raise EntityNotFoundError(f"Cart line #{line_id} not found")

            if new_quantity > 0:
                for item_id in (line.item_id, line.lens_id):
                    if item_id is None:
                        continue
                    item = self._uow.catalog.get_by_id(item_id)
                    if item is None:
                        raise EntityNotFoundError(f"Product with ID '{item_id}' not found")
                    assert_in_stock(item, new_quantity)

            cart.set_quantity(line_id, new_quantity)
            self._uow.carts.save(cart)
            self._uow.commit()

        logger.info("Updated cart line", line_id=line_id, quantity=new_quantity)


class RemoveCartItemHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, line_id: int) -> None:
        """Drop a line.  Unknown lines are ignored."""
        with self._uow:
            cart = self._uow.carts.get_by_line_id(line_id)
            if cart is None:
                return
            cart.remove(line_id)
            self._uow.carts.save(cart)
            self._uow.commit()


class ClearCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, user_id: str) -> None:
        """Empty the user's cart.  A missing cart is a no-op."""
        with self._uow:
            cart = self._uow.carts.get_by_user_id(user_id)
            if cart is None or cart.is_empty:
                return
            cart.clear()
            self._uow.carts.save(cart)
            self._uow.commit()
