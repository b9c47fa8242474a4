"""Application service: Start Checkout use case.

Opens a hosted payment page for a Pending order and remembers the
gateway's session id on the order, so the webhook can find it later.
"""

from __future__ import annotations

import structlog

from storefront.application.ports import CheckoutLineItem, PaymentGateway
from storefront.domain.exceptions import InvalidTransitionError, OrderNotFoundError
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.value_objects import ZERO_DECIMAL_CURRENCIES
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class StartCheckoutHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        gateway: PaymentGateway,
        zero_decimal_currencies: frozenset[str] = ZERO_DECIMAL_CURRENCIES,
    ) -> None:
        self._uow = uow
        self._gateway = gateway
        self._zero_decimal_currencies = zero_decimal_currencies

    def handle(self, order_id: int, success_url: str, cancel_url: str) -> str:
        """Return the URL the customer should be redirected to."""
        with self._uow:
            order = self._uow.orders.get_by_id(order_id)
            if order is None:
                raise OrderNotFoundError(f"Order #{order_id} not found")
            if order.status != OrderStatus.PENDING:
                raise InvalidTransitionError(
                    f"Cannot start checkout: order is {order.status.value}, expected Pending"
                )

            customer = self._uow.customers.get_by_id(order.user_id)
            session = self._gateway.create_checkout_session(
                order_id=order_id,
                lines=self._line_items(order),
                success_url=success_url,
                cancel_url=cancel_url,
                customer_email=customer.email if customer is not None else None,
            )

            order.attach_checkout_session(session.session_id)
            self._uow.orders.save(order)
            self._uow.commit()

        logger.info(
            "Checkout session created",
            order_id=order_id,
            session_id=session.session_id,
        )
        return session.url

    def _line_items(self, order: Order) -> list[CheckoutLineItem]:
        items = []
        for line in order.lines:
            items.append(
                CheckoutLineItem(
                    name=line.snapshot.label,
                    unit_amount=line.unit_price.to_minor_units(self._zero_decimal_currencies),
                    currency=line.unit_price.currency,
                    quantity=line.quantity.value,
                    image_url=line.snapshot.image_url,
                )
            )
        return items
