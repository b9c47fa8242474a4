"""Tests for the JSON-file unit of work and repositories."""

import json

import pytest

from storefront.application.add_service_order import AddServiceOrderHandler
from storefront.application.add_to_cart import AddToCartHandler
from storefront.application.confirm_payment import ConfirmPaymentHandler
from storefront.application.create_pending_order import CreatePendingOrderHandler
from storefront.domain.exceptions import ConcurrentModificationError
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.restock import RestockSubscription
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork
from tests.builders import frame, lens, seed_store


@pytest.fixture()
def data_file(tmp_path):
    return seed_store(
        tmp_path / "store.json",
        items=[frame(price="100", inventory_qty=5), lens(price="50", inventory_qty=None)],
    )


class TestCommitAndRollback:

    def test_committed_changes_are_visible_to_a_new_unit_of_work(self, data_file):
        with JsonUnitOfWork(data_file) as uow:
            item = uow.catalog.get_by_id("frame-1")
            item.set_inventory(9)
            uow.catalog.save(item)
            uow.commit()

        with JsonUnitOfWork(data_file) as uow:
            assert uow.catalog.get_by_id("frame-1").inventory_qty == 9

    def test_leaving_without_commit_discards(self, data_file):
        with JsonUnitOfWork(data_file) as uow:
            item = uow.catalog.get_by_id("frame-1")
            item.set_inventory(0)
            uow.catalog.save(item)

        with JsonUnitOfWork(data_file) as uow:
            assert uow.catalog.get_by_id("frame-1").inventory_qty == 5

    def test_exception_inside_block_discards(self, data_file):
        with pytest.raises(RuntimeError):
            with JsonUnitOfWork(data_file) as uow:
                uow.carts.save(Cart(user_id="u-1"))
                raise RuntimeError("boom")

        with JsonUnitOfWork(data_file) as uow:
            assert uow.carts.get_by_user_id("u-1") is None

    def test_versions_increase_on_save(self, data_file):
        with JsonUnitOfWork(data_file) as uow:
            item = uow.catalog.get_by_id("frame-1")
            before = item.version
            uow.catalog.save(item)
            uow.commit()

        with JsonUnitOfWork(data_file) as uow:
            assert uow.catalog.get_by_id("frame-1").version == before + 1

    def test_file_is_plain_json_without_leftovers(self, data_file):
        doc = json.loads(data_file.read_text(encoding="utf-8"))
        assert doc["catalog_items"]["frame-1"]["price"] == "100"
        assert [p.name for p in data_file.parent.iterdir()] == ["store.json"]

    def test_round_trips_variant_and_money(self, data_file):
        with JsonUnitOfWork(data_file) as uow:
            item = uow.catalog.get_by_id("lens-1")
            svc = uow.services.get_by_id("svc-1")
        assert item.item_type == "Lens"
        assert item.variant.prescription_required is True
        assert item.price == Money.of("50")
        assert svc.price == Money.of("20")

    def test_subscriptions_round_trip(self, data_file):
        with JsonUnitOfWork(data_file) as uow:
            uow.restock_subscriptions.save(RestockSubscription("u-1", "lens-1"))
            uow.commit()

        with JsonUnitOfWork(data_file) as uow:
            pending = uow.restock_subscriptions.list_pending_for_item("lens-1")
            assert [s.user_id for s in pending] == ["u-1"]
            pending[0].mark_notified()
            uow.restock_subscriptions.save(pending[0])
            uow.commit()

        with JsonUnitOfWork(data_file) as uow:
            assert uow.restock_subscriptions.list_pending_for_item("lens-1") == []
            assert uow.restock_subscriptions.get("u-1", "lens-1").notified_at is not None


class TestVersionConflicts:

    def test_stale_write_is_rejected(self, data_file):
        first = JsonUnitOfWork(data_file)
        second = JsonUnitOfWork(data_file)

        with first, second:
            a = first.catalog.get_by_id("frame-1")
            b = second.catalog.get_by_id("frame-1")
            a.debit(2)
            first.catalog.save(a)
            b.credit(2)
            second.catalog.save(b)

            first.commit()
            with pytest.raises(ConcurrentModificationError):
                second.commit()

        with JsonUnitOfWork(data_file) as uow:
            assert uow.catalog.get_by_id("frame-1").inventory_qty == 3

    def test_concurrent_first_cart_for_same_user(self, data_file):
        first = JsonUnitOfWork(data_file)
        second = JsonUnitOfWork(data_file)

        with first, second:
            assert first.carts.get_by_user_id("u-1") is None
            assert second.carts.get_by_user_id("u-1") is None
            first.carts.save(Cart(user_id="u-1"))
            second.carts.save(Cart(user_id="u-1"))

            first.commit()
            with pytest.raises(ConcurrentModificationError):
                second.commit()

    def test_disjoint_writes_both_succeed(self, data_file):
        first = JsonUnitOfWork(data_file)
        second = JsonUnitOfWork(data_file)

        with first, second:
            a = first.catalog.get_by_id("frame-1")
            a.set_inventory(1)
            first.catalog.save(a)
            b = second.catalog.get_by_id("lens-1")
            b.set_inventory(7)
            second.catalog.save(b)
            first.commit()
            second.commit()

        with JsonUnitOfWork(data_file) as uow:
            assert uow.catalog.get_by_id("frame-1").inventory_qty == 1
            assert uow.catalog.get_by_id("lens-1").inventory_qty == 7

    def test_id_sequence_collision(self, data_file):
        first = JsonUnitOfWork(data_file)
        second = JsonUnitOfWork(data_file)

        with first, second:
            assert first.orders.next_id() == second.orders.next_id()
            first.commit()
            with pytest.raises(ConcurrentModificationError):
                second.commit()


class TestUseCasesOverJson:

    def test_order_lifecycle(self, data_file):
        uow = JsonUnitOfWork(data_file)
        AddToCartHandler(uow).handle("u-1", "frame-1", 2, service_id="svc-1")
        dto = CreatePendingOrderHandler(uow).handle("u-1", "addr-1")
        assert dto.total == "240 VND"

        assert ConfirmPaymentHandler(uow).handle(dto.id, "pi_1") is True
        assert ConfirmPaymentHandler(uow).handle(dto.id, "pi_1") is False

        with JsonUnitOfWork(data_file) as check:
            order = check.orders.get_by_id(dto.id)
            assert order.status == OrderStatus.PAID
            assert order.inventory_debited
            assert order.lines[0].snapshot.service_name == "Lens fitting"
            assert check.catalog.get_by_id("frame-1").inventory_qty == 3
            assert check.carts.get_by_user_id("u-1").is_empty
            assert [o.id for o in check.orders.list_by_user("u-1")] == [dto.id]

    def test_combo_and_prescription_fee_survive_reload(self, tmp_path):
        path = seed_store(
            tmp_path / "store.json",
            items=[frame(price="100", inventory_qty=5), lens(price="50", prescription_fee="300000")],
        )
        AddToCartHandler(JsonUnitOfWork(path)).handle("u-1", "lens-1", 1, prescription="rx")
        AddServiceOrderHandler(JsonUnitOfWork(path)).handle(
            "u-1", "frame-1", "lens-1", "svc-1"
        )

        with JsonUnitOfWork(path) as check:
            fee_line, combo = check.carts.get_by_user_id("u-1").lines
            assert fee_line.prescription_fee == Money.of("300000")
            assert combo.lens_id == "lens-1"
            assert combo.prescription_fee is None

        dto = CreatePendingOrderHandler(JsonUnitOfWork(path)).handle("u-1", "addr-1")
        assert dto.total == "300,220 VND"  # (50 + 300,000) + (100 + 50 + 20)

        with JsonUnitOfWork(path) as check:
            order = check.orders.get_by_id(dto.id)
            assert order.lines[1].lens_id == "lens-1"
            assert order.lines[1].snapshot.lens_name == "Blue Cut 1.56"
