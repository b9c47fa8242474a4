"""Integration tests for the StartCheckout use case."""

import pytest

from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.create_pending_order import CreatePendingOrderHandler
from storefront.application.start_checkout import StartCheckoutHandler
from storefront.domain.exceptions import (
    InvalidTransitionError,
    OrderNotFoundError,
    PaymentGatewayError,
)
from storefront.domain.model.order import OrderStatus
from tests.builders import address, customer, frame, service
from tests.fakes import FakeGateway, FakeUnitOfWork


def _setup() -> tuple[FakeUnitOfWork, FakeGateway, int]:
    uow = FakeUnitOfWork(
        catalog=[frame(price="1200000")],
        services=[service(price="100000")],
        customers=[customer("u-1", email="linh@example.com")],
        addresses=[address("addr-1", "u-1")],
    )
    AddToCartHandler(uow).handle("u-1", "frame-1", 2, service_id="svc-1")
    dto = CreatePendingOrderHandler(uow).handle("u-1", "addr-1")
    return uow, FakeGateway(), dto.id


class TestStartCheckout:

    def test_returns_redirect_and_stores_session(self):
        uow, gateway, order_id = _setup()
        url = StartCheckoutHandler(uow, gateway).handle(
            order_id, "https://shop.test/ok", "https://shop.test/cancel"
        )
        assert url == "https://pay.test/cs_test_1"
        assert uow.state.orders[order_id].payment_session_id == "cs_test_1"

    def test_line_items_use_whole_units_for_vnd(self):
        uow, gateway, order_id = _setup()
        StartCheckoutHandler(uow, gateway).handle(order_id, "ok", "cancel")

        (line,) = gateway.sessions[0]["lines"]
        assert line.name == "Aviator + Lens fitting"
        assert line.unit_amount == 1300000
        assert line.currency == "VND"
        assert line.quantity == 2
        assert line.image_url == "https://img.test/frame-1.jpg"

    def test_customer_email_is_passed(self):
        uow, gateway, order_id = _setup()
        StartCheckoutHandler(uow, gateway).handle(order_id, "ok", "cancel")
        assert gateway.sessions[0]["customer_email"] == "linh@example.com"

    def test_configured_zero_decimal_set_is_used(self):
        uow, gateway, order_id = _setup()
        StartCheckoutHandler(uow, gateway, zero_decimal_currencies=frozenset()).handle(
            order_id, "ok", "cancel"
        )
        assert gateway.sessions[0]["lines"][0].unit_amount == 130000000

    def test_only_pending_orders(self):
        uow, gateway, order_id = _setup()
        uow.state.orders[order_id].status = OrderStatus.PAID
        with pytest.raises(InvalidTransitionError):
            StartCheckoutHandler(uow, gateway).handle(order_id, "ok", "cancel")
        assert gateway.sessions == []

    def test_unknown_order(self):
        uow, gateway, _ = _setup()
        with pytest.raises(OrderNotFoundError):
            StartCheckoutHandler(uow, gateway).handle(99, "ok", "cancel")

    def test_gateway_failure_leaves_order_untouched(self):
        uow, gateway, order_id = _setup()
        gateway.fail_with = "card network down"
        with pytest.raises(PaymentGatewayError):
            StartCheckoutHandler(uow, gateway).handle(order_id, "ok", "cancel")
        assert uow.state.orders[order_id].payment_session_id is None
