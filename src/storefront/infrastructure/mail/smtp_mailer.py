"""SMTP implementation of the Mailer port."""

from __future__ import annotations

import smtplib
from email.message import EmailMessage
from email.utils import formataddr

import structlog

from storefront.application.ports import Mailer
from storefront.domain.exceptions import NotificationDeliveryError

logger = structlog.get_logger(__name__)


def render_restock_notice(customer_name: str, item_name: str, item_url: str) -> tuple[str, str]:
    """Return (subject, plain-text body) of a back-in-stock message."""
    subject = f"{item_name} is back in stock!"
    body = (
        f"Great news, {customer_name}!\n\n"
        f"The item you have been waiting for, {item_name}, is back in stock.\n"
        f"Quantities are limited, so grab it while you can:\n\n"
        f"    {item_url}\n\n"
        "You are receiving this because the item is on your wishlist.\n"
    )
    return subject, body


class SmtpMailer(Mailer):

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        sender_name: str = "",
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ) -> None:
        self._host = host
        self._port = port
        self._sender = sender
        self._sender_name = sender_name
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    def send_restock_notice(
        self,
        recipient: str,
        customer_name: str,
        item_name: str,
        item_url: str,
    ) -> None:
        subject, body = render_restock_notice(customer_name, item_name, item_url)

        # A stored address the header parser rejects is a failed delivery too
        try:
            message = EmailMessage()
            message["Subject"] = subject
            message["From"] = formataddr((self._sender_name, self._sender))
            message["To"] = recipient
            message.set_content(body)

            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
                if self._use_tls:
                    smtp.starttls()
                if self._username:
                    smtp.login(self._username, self._password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError, ValueError) as exc:
            raise NotificationDeliveryError(
                f"Could not deliver restock notice to {recipient}: {exc}"
            ) from exc

        logger.info("Restock notice sent", recipient=recipient, item_name=item_name)
