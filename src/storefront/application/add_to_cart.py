"""Application service: Add To Cart use case.

Find-or-create of the cart and merge-or-insert of the line commit in one
unit of work, so two concurrent first adds for the same user cannot both
create a cart.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_service import (
    assert_orderable,
    assert_service_offered,
)

logger = structlog.get_logger(__name__)


class AddToCartHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        user_id: str,
        item_id: str,
        quantity: int = 1,
        service_id: str | None = None,
        prescription: str | None = None,
    ) -> CartLine:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        with self._uow:
            item = self._uow.catalog.get_by_id(item_id)
            if item is None:
                raise EntityNotFoundError(f"Product with ID '{item_id}' not found")

            if service_id is not None:
                service = self._uow.services.get_by_id(service_id)
                if service is None:
                    raise EntityNotFoundError(f"Service with ID '{service_id}' not found")
                assert_service_offered(service)

            cart = self._uow.carts.get_by_user_id(user_id)
            if cart is None:
                cart = Cart(user_id=user_id)

            assert_orderable(item, quantity)

            existing = cart.find_matching(item_id, service_id, prescription)
            line_id = existing.id if existing is not None else self._uow.carts.next_line_id()
            line = cart.add(
                line_id,
                item_id,
                quantity,
                service_id,
                prescription,
                prescription_fee=item.prescription_fee_for(prescription),
            )
            self._uow.carts.save(cart)
            self._uow.commit()

        logger.info(
            "Added item to cart",
            user_id=user_id,
            item_id=item_id,
            line_id=line.id,
            quantity=line.quantity,
        )
        return line
