"""Integration tests for restock detection and notification fan-out."""

import pytest

from storefront.application.notify_restock import NotifyRestockHandler, RestockWorker
from storefront.application.restock import RestockEvent, RestockQueue
from storefront.application.restock_subscription import (
    SubscribeRestockHandler,
    UnsubscribeRestockHandler,
)
from storefront.application.set_inventory import SetInventoryHandler
from storefront.domain.exceptions import (
    EntityNotFoundError,
    ProductUnavailableError,
    ValidationError,
)
from tests.builders import customer, frame, lens
from tests.fakes import FakeMailer, FakeUnitOfWork


def _setup(
    subscribers: tuple[str, ...] = ("u-1", "u-2", "u-3"),
    failing: set[str] | None = None,
    crashing: set[str] | None = None,
) -> tuple[FakeUnitOfWork, RestockQueue, FakeMailer, RestockWorker]:
    """Out-of-stock lens with one subscription per user in ``subscribers``."""
    uow = FakeUnitOfWork(
        catalog=[lens(inventory_qty=0), frame(inventory_qty=3)],
        customers=[customer(u, full_name=None) for u in ("u-1", "u-2", "u-3")],
    )
    for user_id in subscribers:
        SubscribeRestockHandler(uow).handle(user_id, "lens-1")

    queue = RestockQueue()
    mailer = FakeMailer(failing_recipients=failing, crashing_recipients=crashing)
    notify = NotifyRestockHandler(lambda: uow, mailer, "https://shop.test/")
    return uow, queue, mailer, RestockWorker(queue, notify)


class TestRestockDetection:

    def test_zero_to_positive_is_published(self):
        uow, queue, _, _ = _setup()
        SetInventoryHandler(uow, queue).handle("lens-1", 10)
        assert uow.state.catalog["lens-1"].inventory_qty == 10
        assert queue.pending() == 1

    @pytest.mark.parametrize("item_id,quantity", [("frame-1", 5), ("frame-1", 0), ("lens-1", 0)])
    def test_other_edits_are_silent(self, item_id, quantity):
        uow, queue, _, _ = _setup()
        SetInventoryHandler(uow, queue).handle(item_id, quantity)
        assert queue.pending() == 0

    def test_negative_stock_rejected(self):
        uow, queue, _, _ = _setup()
        with pytest.raises(ValidationError):
            SetInventoryHandler(uow, queue).handle("lens-1", -1)
        assert uow.state.catalog["lens-1"].inventory_qty == 0

    def test_unknown_item(self):
        uow, queue, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            SetInventoryHandler(uow, queue).handle("nope", 1)

    def test_nothing_published_when_commit_fails(self):
        uow, queue, _, _ = _setup()
        uow.fail_on_commit = RuntimeError("disk full")
        with pytest.raises(RuntimeError):
            SetInventoryHandler(uow, queue).handle("lens-1", 10)
        assert queue.pending() == 0


class TestNotificationFanOut:

    def test_every_subscriber_notified_once(self):
        uow, queue, mailer, worker = _setup()
        SetInventoryHandler(uow, queue).handle("lens-1", 10)

        (report,) = worker.drain()

        assert sorted(report.delivered) == ["u-1", "u-2", "u-3"]
        assert sorted(mailer.attempts) == [
            "u-1@example.com",
            "u-2@example.com",
            "u-3@example.com",
        ]
        assert mailer.sent[0]["item_url"] == "https://shop.test/products/lens-1"
        assert mailer.sent[0]["item_name"] == "Blue Cut 1.56"
        assert mailer.sent[0]["customer_name"].endswith("@example.com")

    def test_one_failure_does_not_block_others(self):
        uow, queue, mailer, worker = _setup(failing={"u-2@example.com"})
        SetInventoryHandler(uow, queue).handle("lens-1", 10)

        (report,) = worker.drain()

        assert report.failed == ["u-2"]
        assert sorted(report.delivered) == ["u-1", "u-3"]
        assert report.attempted == 3
        assert len(mailer.sent) == 2
        # The inventory edit itself is unaffected
        assert uow.state.catalog["lens-1"].inventory_qty == 10

    def test_failed_recipient_stays_pending(self):
        uow, queue, _, worker = _setup(failing={"u-2@example.com"})
        SetInventoryHandler(uow, queue).handle("lens-1", 10)
        worker.drain()

        assert uow.state.subscriptions["u-1:lens-1"].notified_at is not None
        assert uow.state.subscriptions["u-2:lens-1"].is_pending

    def test_unexpected_mailer_error_does_not_abort_fan_out(self):
        uow, queue, mailer, worker = _setup(crashing={"u-2@example.com"})
        SetInventoryHandler(uow, queue).handle("lens-1", 10)

        (report,) = worker.drain()

        assert report.failed == ["u-2"]
        assert sorted(report.delivered) == ["u-1", "u-3"]
        assert mailer.attempts == ["u-1@example.com", "u-2@example.com", "u-3@example.com"]
        # Successful sends are still stamped
        assert uow.state.subscriptions["u-1:lens-1"].notified_at is not None
        assert uow.state.subscriptions["u-3:lens-1"].notified_at is not None
        assert uow.state.subscriptions["u-2:lens-1"].is_pending

    def test_notified_subscribers_are_not_mailed_again(self):
        uow, queue, mailer, worker = _setup()
        SetInventoryHandler(uow, queue).handle("lens-1", 10)
        worker.drain()
        SetInventoryHandler(uow, queue).handle("lens-1", 0)
        SetInventoryHandler(uow, queue).handle("lens-1", 4)
        worker.drain()
        assert len(mailer.sent) == 3

    def test_no_subscribers(self):
        uow, queue, mailer, worker = _setup(subscribers=())
        SetInventoryHandler(uow, queue).handle("lens-1", 1)
        (report,) = worker.drain()
        assert report.attempted == 0
        assert mailer.attempts == []

    def test_unknown_customer_is_skipped(self):
        uow, queue, mailer, worker = _setup(subscribers=("u-1",))
        SubscribeRestockHandler(uow).handle("ghost", "lens-1")
        SetInventoryHandler(uow, queue).handle("lens-1", 1)
        (report,) = worker.drain()
        assert report.skipped == ["ghost"]
        assert report.delivered == ["u-1"]


class TestRestockWorker:

    def test_error_on_one_event_does_not_stop_the_worker(self):
        uow, queue, mailer, _ = _setup()

        class ExplodingOnce(NotifyRestockHandler):
            calls = 0

            def handle(self, item_id):
                ExplodingOnce.calls += 1
                if ExplodingOnce.calls == 1:
                    raise RuntimeError("boom")
                return super().handle(item_id)

        worker = RestockWorker(queue, ExplodingOnce(lambda: uow, mailer, "https://shop.test"))
        queue.publish(RestockEvent("lens-1", 0, 1))
        queue.publish(RestockEvent("lens-1", 0, 1))

        reports = worker.drain()

        assert len(reports) == 1
        assert len(mailer.sent) == 3
        assert queue.pending() == 0

    def test_background_thread_drains_queue(self):
        uow, queue, mailer, worker = _setup()
        worker = RestockWorker(queue, worker._handler, poll_interval=0.05)
        worker.start()
        try:
            SetInventoryHandler(uow, queue).handle("lens-1", 2)
            queue.join()
        finally:
            worker.stop()
        assert not worker.is_running
        assert len(mailer.sent) == 3


class TestSubscriptions:

    def test_subscribe_in_stock_item_rejected(self):
        uow, _, _, _ = _setup(subscribers=())
        with pytest.raises(ValidationError, match="in stock"):
            SubscribeRestockHandler(uow).handle("u-1", "frame-1")

    def test_subscribe_untracked_item_rejected(self):
        uow = FakeUnitOfWork(catalog=[lens(inventory_qty=None)])
        with pytest.raises(ValidationError, match="in stock"):
            SubscribeRestockHandler(uow).handle("u-1", "lens-1")

    def test_subscribe_inactive_item_rejected(self):
        uow = FakeUnitOfWork(catalog=[lens(inventory_qty=0, is_active=False)])
        with pytest.raises(ProductUnavailableError):
            SubscribeRestockHandler(uow).handle("u-1", "lens-1")

    def test_duplicate_subscription_rejected(self):
        uow, _, _, _ = _setup(subscribers=("u-1",))
        with pytest.raises(ValidationError, match="already"):
            SubscribeRestockHandler(uow).handle("u-1", "lens-1")

    def test_notified_subscription_can_be_rearmed(self):
        uow, queue, _, worker = _setup(subscribers=("u-1",))
        SetInventoryHandler(uow, queue).handle("lens-1", 1)
        worker.drain()
        SetInventoryHandler(uow, queue).handle("lens-1", 0)

        subscription = SubscribeRestockHandler(uow).handle("u-1", "lens-1")
        assert subscription.is_pending

    def test_unsubscribe(self):
        uow, _, _, _ = _setup(subscribers=("u-1",))
        assert UnsubscribeRestockHandler(uow).handle("u-1", "lens-1") is True
        assert UnsubscribeRestockHandler(uow).handle("u-1", "lens-1") is False
        assert uow.state.subscriptions == {}
