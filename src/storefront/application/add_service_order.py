"""Application service: Add Service Order use case.

A service order is a frame sent to the workshop with a lens fitted and a
service (fitting, tinting, ...) performed.  It goes into the cart as one
combo line that is never merged with anything else, so the same frame
and lens can be ordered twice with different services.
"""

from __future__ import annotations

import structlog

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.cart import Cart, CartLine
from storefront.domain.model.catalog import CatalogItem, FrameDetails, LensDetails
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_service import (
    assert_orderable,
    assert_service_offered,
)

logger = structlog.get_logger(__name__)


class AddServiceOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        user_id: str,
        frame_id: str,
        lens_id: str,
        service_id: str,
        quantity: int = 1,
    ) -> CartLine:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0")

        with self._uow:
            frame = self._load(frame_id, FrameDetails.kind)
            lens = self._load(lens_id, LensDetails.kind)
            assert_orderable(frame, quantity)
            assert_orderable(lens, quantity)

            service = self._uow.services.get_by_id(service_id)
            if service is None:
                raise EntityNotFoundError(f"Service with ID '{service_id}' not found")
            assert_service_offered(service)

            cart = self._uow.carts.get_by_user_id(user_id)
            if cart is None:
                cart = Cart(user_id=user_id)

            line = cart.add_combo(
                self._uow.carts.next_line_id(), frame_id, lens_id, service_id, quantity
            )
            self._uow.carts.save(cart)
            self._uow.commit()

        logger.info(
            "Added service order to cart",
            user_id=user_id,
            frame_id=frame_id,
            lens_id=lens_id,
            service_id=service_id,
            line_id=line.id,
        )
        return line

    def _load(self, item_id: str, kind: str) -> CatalogItem:
        item = self._uow.catalog.get_by_id(item_id)
        if item is None or item.item_type != kind:
            raise EntityNotFoundError(f"{kind} with ID '{item_id}' not found")
        return item
