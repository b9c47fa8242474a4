"""Outbound ports (abstract interfaces) used by the application layer.

Concrete adapters live in ``storefront.infrastructure``: Stripe for the
payment gateway, SMTP or a log sink for mail.  Tests plug in fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

CHECKOUT_COMPLETED = "checkout.session.completed"


@dataclass(frozen=True)
class CheckoutLineItem:
    name: str
    unit_amount: int  # minor currency units
    currency: str
    quantity: int
    image_url: str | None = None


@dataclass(frozen=True)
class CheckoutSession:
    session_id: str
    url: str


@dataclass(frozen=True)
class GatewayEvent:
    """A verified, decoded gateway event."""

    id: str
    type: str
    session_id: str | None = None
    payment_intent_id: str | None = None
    client_reference_id: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_checkout_session(
        self,
        order_id: int,
        lines: list[CheckoutLineItem],
        success_url: str,
        cancel_url: str,
        customer_email: str | None,
    ) -> CheckoutSession:
        """Open a hosted checkout page for an order.

        Raises PaymentGatewayError if the gateway refuses.
        """

    @abstractmethod
    def parse_webhook(self, payload: bytes, signature: str) -> GatewayEvent:
        """Verify the signature and decode the event.

        Raises WebhookSignatureError on a bad signature or malformed body.
        """


class Mailer(ABC):
    """Outbound message transport for customer notifications."""

    @abstractmethod
    def send_restock_notice(
        self,
        recipient: str,
        customer_name: str,
        item_name: str,
        item_url: str,
    ) -> None:
        """Tell one customer an item is back in stock.

        Raises NotificationDeliveryError if the message could not be sent.
        """
