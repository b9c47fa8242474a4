"""Restock side channel: detection and hand-off.

Inventory-increasing use cases call ``record_inventory_change`` *after*
their unit of work has committed.  A 0 -> positive transition becomes a
``RestockEvent`` on the queue; the ``RestockWorker`` drains it later with
its own unit of work, so the fan-out never holds the triggering
transaction open or affects its outcome.
"""

from __future__ import annotations

import queue
from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog

from storefront.domain.model.catalog import InventoryChange
from storefront.domain.model.restock import is_restock_transition

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RestockEvent:
    item_id: str
    previous_qty: int | None
    new_qty: int
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class RestockQueue:
    """In-process channel between inventory writers and the restock worker."""

    def __init__(self) -> None:
        self._queue: queue.Queue[RestockEvent] = queue.Queue()

    def publish(self, event: RestockEvent) -> None:
        self._queue.put(event)

    def get(self, timeout: float | None = None) -> RestockEvent | None:
        """Next event, or None if nothing arrives within ``timeout``."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def get_nowait(self) -> RestockEvent | None:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def task_done(self) -> None:
        self._queue.task_done()

    def pending(self) -> int:
        return self._queue.qsize()

    def join(self) -> None:
        """Block until every published event has been processed."""
        self._queue.join()


def record_inventory_change(restock_queue: RestockQueue, change: InventoryChange) -> bool:
    """Publish a restock event if ``change`` crossed from empty to in stock."""
    if not is_restock_transition(change.previous, change.new):
        return False
    restock_queue.publish(
        RestockEvent(
            item_id=change.item_id,
            previous_qty=change.previous,
            new_qty=change.new,  # type: ignore[arg-type]
        )
    )
    logger.info(
        "Restock detected",
        item_id=change.item_id,
        previous_qty=change.previous,
        new_qty=change.new,
    )
    return True
