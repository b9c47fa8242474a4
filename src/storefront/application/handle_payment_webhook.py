"""Application service: Payment Webhook use case.

Entry point for asynchronous notifications from the payment gateway.
The signature is verified before anything else is looked at; an event
that fails verification never touches an order.

Outcomes other than a signature failure are all acknowledged to the
gateway.  A completed checkout whose session matches no order is logged
and acknowledged too: retrying it would never succeed.
"""

from __future__ import annotations

from enum import Enum

import structlog

from storefront.application.confirm_payment import ConfirmPaymentHandler
from storefront.application.ports import CHECKOUT_COMPLETED, PaymentGateway
from storefront.domain.exceptions import WebhookSignatureError
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = structlog.get_logger(__name__)


class WebhookOutcome(Enum):
    CONFIRMED = "confirmed"
    ALREADY_PROCESSED = "already_processed"
    ORDER_NOT_FOUND = "order_not_found"
    IGNORED = "ignored"


class PaymentWebhookHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        gateway: PaymentGateway,
        confirm_payment: ConfirmPaymentHandler,
    ) -> None:
        self._uow = uow
        self._gateway = gateway
        self._confirm_payment = confirm_payment

    def handle(self, payload: bytes, signature: str | None) -> WebhookOutcome:
        if not signature:
            logger.warning("Webhook rejected", reason="missing signature header")
            raise WebhookSignatureError("Missing signature header")

        try:
            event = self._gateway.parse_webhook(payload, signature)
        except WebhookSignatureError as exc:
            logger.warning("Webhook rejected", reason=str(exc))
            raise

        logger.info("Webhook received", event_id=event.id, event_type=event.type)

        if event.type != CHECKOUT_COMPLETED:
            logger.debug("Unhandled webhook event type", event_type=event.type)
            return WebhookOutcome.IGNORED

        logger.info(
            "Checkout session completed",
            session_id=event.session_id,
            payment_intent_id=event.payment_intent_id,
            client_reference_id=event.client_reference_id,
        )

        order_id = self._find_order_id(event.session_id)
        if order_id is None:
            logger.warning("No order found for checkout session", session_id=event.session_id)
            return WebhookOutcome.ORDER_NOT_FOUND

        if self._confirm_payment.handle(order_id, event.payment_intent_id):
            return WebhookOutcome.CONFIRMED
        return WebhookOutcome.ALREADY_PROCESSED

    def _find_order_id(self, session_id: str | None) -> int | None:
        if not session_id:
            return None
        with self._uow:
            order = self._uow.orders.get_by_payment_session_id(session_id)
        return order.id if order is not None else None
