"""Stripe implementation of the PaymentGateway port.

Amounts are handed over already converted to minor units.  For a
zero-decimal currency such as VND the minor unit is the whole unit.
"""

from __future__ import annotations

import stripe
import structlog
from pydantic import ValidationError as SchemaValidationError

from storefront.application.ports import (
    CHECKOUT_COMPLETED,
    CheckoutLineItem,
    CheckoutSession,
    GatewayEvent,
    PaymentGateway,
)
from storefront.domain.exceptions import PaymentGatewayError, WebhookSignatureError
from storefront.infrastructure.gateway.schemas import StripeCheckoutSession, StripeEvent

logger = structlog.get_logger(__name__)


class StripeGateway(PaymentGateway):

    def __init__(
        self,
        api_key: str,
        webhook_secret: str,
        tolerance_seconds: int = 300,
    ) -> None:
        self._api_key = api_key
        self._webhook_secret = webhook_secret
        self._tolerance = tolerance_seconds

    def create_checkout_session(
        self,
        order_id: int,
        lines: list[CheckoutLineItem],
        success_url: str,
        cancel_url: str,
        customer_email: str | None,
    ) -> CheckoutSession:
        if not self._api_key:
            raise PaymentGatewayError("Stripe API key is not configured")

        params = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [self._line_item(line) for line in lines],
            "success_url": f"{success_url}?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": cancel_url,
            "client_reference_id": str(order_id),
            "metadata": {"order_id": str(order_id)},
        }
        if customer_email:
            params["customer_email"] = customer_email

        try:
            session = stripe.checkout.Session.create(api_key=self._api_key, **params)
        except stripe.StripeError as exc:
            logger.error(
                "Stripe checkout session failed",
                order_id=order_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise PaymentGatewayError(f"Payment gateway error: {exc}") from exc

        return CheckoutSession(session_id=session.id, url=session.url)

    def parse_webhook(self, payload: bytes, signature: str) -> GatewayEvent:
        if not self._webhook_secret:
            raise WebhookSignatureError("Webhook secret is not configured")

        try:
            body = payload.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise WebhookSignatureError("Webhook payload is not valid UTF-8") from exc

        # Verify the signature before looking at the body
        try:
            stripe.WebhookSignature.verify_header(
                body, signature, self._webhook_secret, tolerance=self._tolerance
            )
        except stripe.SignatureVerificationError as exc:
            raise WebhookSignatureError(
                f"Webhook signature verification failed: {exc}"
            ) from exc

        try:
            event = StripeEvent.model_validate_json(body)
            if event.type != CHECKOUT_COMPLETED:
                return GatewayEvent(id=event.id, type=event.type)
            session = StripeCheckoutSession.model_validate(event.data.object)
        except SchemaValidationError as exc:
            raise WebhookSignatureError(f"Malformed webhook payload: {exc}") from exc

        return GatewayEvent(
            id=event.id,
            type=event.type,
            session_id=session.id,
            payment_intent_id=session.payment_intent_id,
            client_reference_id=session.client_reference_id,
        )

    @staticmethod
    def _line_item(line: CheckoutLineItem) -> dict:
        product_data: dict = {"name": line.name}
        if line.image_url:
            product_data["images"] = [line.image_url]
        return {
            "price_data": {
                "currency": line.currency.lower(),
                "unit_amount": line.unit_amount,
                "product_data": product_data,
            },
            "quantity": line.quantity,
        }
