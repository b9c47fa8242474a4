"""Application services: restock notification fan-out.

``NotifyRestockHandler`` sends one notice per pending subscriber of an
item.  A failure for one recipient is logged and counted; the remaining
recipients are still attempted.  ``RestockWorker`` feeds it from the
``RestockQueue`` on a background thread.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

import structlog

from storefront.application.ports import Mailer
from storefront.application.restock import RestockEvent, RestockQueue
from storefront.domain.exceptions import NotificationDeliveryError
from storefront.domain.repository.unit_of_work import UnitOfWorkFactory

logger = structlog.get_logger(__name__)


@dataclass
class DispatchReport:
    item_id: str
    delivered: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.delivered) + len(self.failed)


class NotifyRestockHandler:

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        mailer: Mailer,
        base_url: str,
    ) -> None:
        self._uow_factory = uow_factory
        self._mailer = mailer
        self._base_url = base_url.rstrip("/")

    def item_url(self, item_id: str) -> str:
        return f"{self._base_url}/products/{item_id}"

    def handle(self, item_id: str) -> DispatchReport:
        report = DispatchReport(item_id=item_id)
        uow = self._uow_factory()

        with uow:
            item = uow.catalog.get_by_id(item_id)
            if item is None:
                logger.warning("Restock for unknown item", item_id=item_id)
                return report

            subscriptions = uow.restock_subscriptions.list_pending_for_item(item_id)
            if not subscriptions:
                return report

            link = self.item_url(item_id)
            for subscription in subscriptions:
                customer = uow.customers.get_by_id(subscription.user_id)
                if customer is None:
                    logger.warning(
                        "Restock subscriber has no account",
                        item_id=item_id,
                        user_id=subscription.user_id,
                    )
                    report.skipped.append(subscription.user_id)
                    continue

                try:
                    self._mailer.send_restock_notice(
                        recipient=customer.email,
                        customer_name=customer.display_name,
                        item_name=item.name,
                        item_url=link,
                    )
                except NotificationDeliveryError as exc:
                    logger.warning(
                        "Failed to send restock notice",
                        item_id=item_id,
                        user_id=customer.id,
                        recipient=customer.email,
                        error=str(exc),
                    )
                    report.failed.append(customer.id)
                    continue
                except Exception:
                    logger.exception(
                        "Unexpected error sending restock notice",
                        item_id=item_id,
                        user_id=customer.id,
                    )
                    report.failed.append(customer.id)
                    continue

                subscription.mark_notified()
                uow.restock_subscriptions.save(subscription)
                report.delivered.append(customer.id)

            uow.commit()

        logger.info(
            "Restock notices dispatched",
            item_id=item_id,
            delivered=len(report.delivered),
            failed=len(report.failed),
            skipped=len(report.skipped),
        )
        return report


class RestockWorker:
    """Consumes restock events off the request path."""

    def __init__(
        self,
        restock_queue: RestockQueue,
        handler: NotifyRestockHandler,
        poll_interval: float = 0.5,
    ) -> None:
        self._queue = restock_queue
        self._handler = handler
        self._poll_interval = poll_interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="restock-worker", daemon=True
        )
        self._thread.start()
        logger.info("Restock worker started")

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Restock worker stopped")

    def drain(self) -> list[DispatchReport]:
        """Process every queued event on the calling thread."""
        reports = []
        while True:
            event = self._queue.get_nowait()
            if event is None:
                return reports
            report = self._process(event)
            if report is not None:
                reports.append(report)

    def _run(self) -> None:
        while not self._stop.is_set():
            event = self._queue.get(timeout=self._poll_interval)
            if event is not None:
                self._process(event)

    def _process(self, event: RestockEvent) -> DispatchReport | None:
        try:
            return self._handler.handle(event.item_id)
        except Exception:
            logger.exception("Restock dispatch failed", item_id=event.item_id)
            return None
        finally:
            self._queue.task_done()
