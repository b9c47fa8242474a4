"""Tests for the click CLI wired to a real JSON store."""

import pytest
from click.testing import CliRunner

from storefront.infrastructure.bootstrap import Container
from storefront.infrastructure.cli.main import cli
from tests.builders import frame, lens, seed_store, settings
from tests.fakes import FakeGateway, FakeMailer


@pytest.fixture()
def mailer():
    return FakeMailer()


@pytest.fixture()
def container(tmp_path, mailer):
    path = seed_store(
        tmp_path / "store.json",
        items=[frame(price="100", inventory_qty=5), lens(inventory_qty=0)],
    )
    return Container(settings(path), gateway=FakeGateway("whsec_test"), mailer=mailer)


@pytest.fixture()
def run(container):
    runner = CliRunner()

    def invoke(*args: str):
        return runner.invoke(cli, list(args), obj=container)

    return invoke


class TestCatalogCommands:

    def test_list_shows_stock(self, run):
        result = run("catalog", "list")
        assert result.exit_code == 0
        assert "frame-1" in result.output
        assert "lens-1" in result.output

    def test_set_stock_requires_exactly_one_option(self, run):
        result = run("catalog", "set-stock", "--item", "frame-1", "--quantity", "3", "--untracked")
        assert result.exit_code == 2

    def test_restock_notifies_subscribers(self, run, mailer):
        assert run("restock", "subscribe", "--user", "u-1", "--item", "lens-1").exit_code == 0

        result = run("catalog", "set-stock", "--item", "lens-1", "--quantity", "4")

        assert result.exit_code == 0
        assert "Stock for 'lens-1' set to 4" in result.output
        assert "Restock 'lens-1': 1 notified, 0 failed" in result.output
        assert [m["recipient"] for m in mailer.sent] == ["linh@example.com"]
        assert mailer.sent[0]["item_url"] == "https://shop.test/products/lens-1"

    def test_subscribing_to_an_item_in_stock_fails(self, run):
        result = run("restock", "subscribe", "--user", "u-1", "--item", "frame-1")
        assert result.exit_code == 1
        assert "in stock" in result.output


class TestOrderFlow:

    def test_cart_to_paid_order(self, run, container):
        assert "Cart line #1: frame-1 x2" in run(
            "cart", "add", "--user", "u-1", "--item", "frame-1", "--quantity", "2"
        ).output

        created = run("order", "create", "--user", "u-1", "--address", "addr-1")
        assert created.exit_code == 0
        assert "Order #1 created" in created.output
        assert "200 VND" in created.output

        checkout = run("order", "checkout", "--id", "1")
        assert "https://pay.test/cs_test_1" in checkout.output
        assert container.gateway.sessions[0]["success_url"] == "https://shop.test/checkout/success"

        assert "Order #1 paid." in run("order", "confirm", "--id", "1").output
        assert "left unchanged" in run("order", "confirm", "--id", "1").output
        assert "Paid" in run("order", "list", "--user", "u-1").output

    def test_cancel_pending_order(self, run):
        run("cart", "add", "--user", "u-1", "--item", "frame-1")
        run("order", "create", "--user", "u-1", "--address", "addr-1")

        result = run("order", "cancel", "--id", "1")

        assert result.exit_code == 0
        assert "Order #1 cancelled." in result.output

    def test_unknown_item_is_reported(self, run):
        result = run("cart", "add", "--user", "u-1", "--item", "nope")
        assert result.exit_code == 1
        assert "Product with ID 'nope' not found" in result.output

    def test_status_cannot_target_paid(self, run):
        result = run("order", "status", "--id", "1", "--to", "Paid")
        assert result.exit_code == 2


class TestCartCommands:

    def test_total_breaks_down_the_quote(self, run):
        run("cart", "add", "--user", "u-1", "--item", "frame-1", "--service", "svc-1")
        result = run("cart", "total", "--user", "u-1")
        assert result.exit_code == 0
        assert "Subtotal:          120 VND" in result.output
        assert "Prescription fees: 0 VND" in result.output
        assert "Grand total:       120 VND" in result.output

    def test_add_service_reports_missing_lens_stock(self, run):
        result = run(
            "cart", "add-service",
            "--user", "u-1", "--frame", "frame-1", "--lens", "lens-1", "--service", "svc-1",
        )
        assert result.exit_code == 1
        assert 'Insufficient stock for "Blue Cut 1.56"' in result.output

    def test_add_service_then_show(self, run):
        run("catalog", "set-stock", "--item", "lens-1", "--quantity", "3")
        added = run(
            "cart", "add-service",
            "--user", "u-1", "--frame", "frame-1", "--lens", "lens-1", "--service", "svc-1",
        )
        assert "Cart line #1: frame-1 + lens-1 (svc-1) x1" in added.output

        shown = run("cart", "show", "--user", "u-1")
        assert "Aviator + Blue Cut 1.56 + Lens fitting" in shown.output
        assert "170 VND" in shown.output
