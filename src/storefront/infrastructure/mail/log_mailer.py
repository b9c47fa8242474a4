"""Mailer that only logs, for development without an SMTP server."""

from __future__ import annotations

import structlog

from storefront.application.ports import Mailer
from storefront.infrastructure.mail.smtp_mailer import render_restock_notice

logger = structlog.get_logger(__name__)


class LogMailer(Mailer):

    def send_restock_notice(
        self,
        recipient: str,
        customer_name: str,
        item_name: str,
        item_url: str,
    ) -> None:
        subject, _ = render_restock_notice(customer_name, item_name, item_url)
        logger.info(
            "Restock notice (not sent)",
            recipient=recipient,
            subject=subject,
            item_url=item_url,
        )
