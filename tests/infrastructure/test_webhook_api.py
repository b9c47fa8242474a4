"""Tests for the FastAPI webhook endpoint over a real JSON store."""

import pytest
from fastapi.testclient import TestClient

from storefront.domain.exceptions import ConcurrentModificationError
from storefront.infrastructure.api.app import create_app
from storefront.infrastructure.bootstrap import Container
from tests.builders import seed_store, settings
from tests.fakes import FakeGateway, FakeMailer, webhook_payload

SIGNATURE = {"Stripe-Signature": "whsec_test"}


class ConflictingGateway(FakeGateway):

    def parse_webhook(self, payload: bytes, signature: str):
        raise ConcurrentModificationError("orders/1 was changed concurrently")


@pytest.fixture()
def container(tmp_path):
    path = seed_store(tmp_path / "store.json")
    return Container(settings(path), gateway=FakeGateway("whsec_test"), mailer=FakeMailer())


@pytest.fixture()
def client(container):
    with TestClient(create_app(container, run_worker=False)) as client:
        yield client


def _pending_order_with_session(container: Container) -> int:
    container.add_to_cart().handle("u-1", "frame-1", 2)
    order_id = container.create_pending_order().handle("u-1", "addr-1").id
    container.start_checkout().handle(order_id, "https://shop.test/ok", "https://shop.test/no")
    return order_id


class TestPaymentWebhook:

    def test_completed_checkout_returns_empty_200(self, container, client):
        order_id = _pending_order_with_session(container)

        response = client.post(
            "/payments/webhook", content=webhook_payload("cs_test_1", "pi_9"), headers=SIGNATURE
        )

        assert response.status_code == 200
        assert response.content == b""
        assert container.show_order().handle(order_id).status == "Paid"
        with container.uow() as uow:
            assert uow.catalog.get_by_id("frame-1").inventory_qty == 3
            assert uow.carts.get_by_user_id("u-1").is_empty

    def test_redelivery_is_acknowledged_and_debits_once(self, container, client):
        _pending_order_with_session(container)
        body = webhook_payload("cs_test_1", "pi_9")

        first = client.post("/payments/webhook", content=body, headers=SIGNATURE)
        second = client.post("/payments/webhook", content=body, headers=SIGNATURE)

        assert first.status_code == second.status_code == 200
        with container.uow() as uow:
            assert uow.catalog.get_by_id("frame-1").inventory_qty == 3

    def test_unknown_session_is_acknowledged(self, client):
        response = client.post(
            "/payments/webhook", content=webhook_payload("cs_unknown"), headers=SIGNATURE
        )
        assert response.status_code == 200

    def test_other_event_types_are_acknowledged(self, client):
        body = webhook_payload("cs_test_1", event_type="payment_intent.created")
        response = client.post("/payments/webhook", content=body, headers=SIGNATURE)
        assert response.status_code == 200

    def test_bad_signature_is_400(self, container, client):
        order_id = _pending_order_with_session(container)

        response = client.post(
            "/payments/webhook",
            content=webhook_payload("cs_test_1"),
            headers={"Stripe-Signature": "forged"},
        )

        assert response.status_code == 400
        assert "signature" in response.json()["error"]
        assert container.show_order().handle(order_id).status == "Pending"

    def test_missing_signature_header_is_400(self, client):
        response = client.post("/payments/webhook", content=webhook_payload("cs_test_1"))
        assert response.status_code == 400
        assert response.json() == {"error": "Missing signature header"}

    def test_conflict_is_409_so_the_gateway_retries(self, tmp_path):
        path = seed_store(tmp_path / "store.json")
        container = Container(settings(path), gateway=ConflictingGateway(), mailer=FakeMailer())
        with TestClient(create_app(container, run_worker=False)) as client:
            response = client.post(
                "/payments/webhook", content=webhook_payload("cs_test_1"), headers=SIGNATURE
            )
        assert response.status_code == 409


class TestHealth:

    def test_reports_worker_and_queue(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "restock_worker": False, "restock_queue": 0}
