"""State machine and export behaviour of OrderLifecycle."""
from unittest import mock

import pytest

from app.core.errors import (
    ExportNotFound,
    StorageCorrupt,
    InvalidTransition,
    OrderNotFound,
    PersistenceFailed,
    StorageWriteFailed,
)
from app.services.order_lifecycle import OrderLifecycle
from app.services.order_repository import OrderRepository
from app.services.tabular_store import TabularStore


def test_confirm_exports_projected_row(lifecycle, store, make_order):
    order = make_order(
        name="Ann", email="a@b.com", address="1 Rd", contact_number="555", pin="000",
        product_name="Widget", quantity=2, total_price=19.98,
    )

    updated = lifecycle.set_status(order.id, "confirmed")

    assert updated.status == "confirmed"
    assert updated.exported is True
    assert store.read_records() == [{
        "Name": "Ann", "Email": "a@b.com", "Address": "1 Rd", "Contact": "555", "Pin": "000",
        "ProductName": "Widget", "Quantity": 2, "TotalPrice": 19.98,
    }]


def test_confirm_twice_is_rejected_and_exports_once(lifecycle, store, make_order):
    order = make_order()
    lifecycle.set_status(order.id, "confirmed")

    with pytest.raises(InvalidTransition):
        lifecycle.set_status(order.id, "confirmed")

    assert len(store.read_records()) == 1


@pytest.mark.parametrize("first,second", [("confirmed", "rejected"), ("rejected", "confirmed")])
def test_terminal_status_cannot_change(lifecycle, repository, make_order, first, second):
    order = make_order()
    lifecycle.set_status(order.id, first)

    with pytest.raises(InvalidTransition):
        lifecycle.set_status(order.id, second)

    assert repository.get(order.id).status == first


def test_reject_never_appends(lifecycle, store, repository, make_order):
    order = make_order()

    with mock.patch.object(store, "append_record", wraps=store.append_record) as append:
        updated = lifecycle.set_status(order.id, "rejected")

    append.assert_not_called()
    assert updated.status == "rejected"
    assert updated.exported is False
    with pytest.raises(ExportNotFound):
        store.download()


@pytest.mark.parametrize("target", ["pending", "shipped", ""])
def test_unsupported_target_status(lifecycle, repository, make_order, target):
    order = make_order()

    with pytest.raises(InvalidTransition):
        lifecycle.set_status(order.id, target)

    assert repository.get(order.id).status == "pending"


def test_unknown_order(lifecycle):
    with pytest.raises(OrderNotFound):
        lifecycle.set_status("does-not-exist", "confirmed")


def test_status_persist_failure_skips_export(repository, store, make_order):
    order = make_order()

    class BrokenRepository(OrderRepository):
        def conditional_set_status(self, order_id, expected_status, new_status):
            raise PersistenceFailed("database unavailable")

    lifecycle = OrderLifecycle(BrokenRepository(repository._session_factory), store)
    with pytest.raises(PersistenceFailed) as exc:
        lifecycle.set_status(order.id, "confirmed")

    assert exc.value.status_changed is False
    assert not store.exists


def test_export_failure_keeps_confirmation(lifecycle, repository, store, make_order):
    order = make_order()

    with mock.patch.object(store, "append_record", side_effect=StorageWriteFailed("disk full")):
        with pytest.raises(StorageWriteFailed) as exc:
            lifecycle.set_status(order.id, "confirmed")

    assert exc.value.status_changed is True
    assert exc.value.order.status == "confirmed"
    stored = repository.get(order.id)
    assert stored.status == "confirmed"
    assert stored.exported is False


def test_flag_failure_after_append_still_succeeds(repository, store, make_order, caplog):
    order = make_order()

    class FlaglessRepository(OrderRepository):
        def set_exported_flag(self, order_id):
            raise PersistenceFailed("write timeout")

    lifecycle = OrderLifecycle(FlaglessRepository(repository._session_factory), store)
    with caplog.at_level("ERROR", logger="app.services.order_lifecycle"):
        updated = lifecycle.set_status(order.id, "confirmed")

    assert updated.status == "confirmed"
    assert updated.exported is False
    assert len(store.read_records()) == 1
    assert "exported flag not saved" in caplog.text

    # the terminal status still blocks a second export
    with pytest.raises(InvalidTransition):
        lifecycle.set_status(order.id, "confirmed")
    assert len(store.read_records()) == 1


def test_already_exported_order_is_not_appended_again(lifecycle, repository, store, make_order):
    order = make_order()
    repository.conditional_set_status(order.id, "pending", "confirmed")
    repository.set_exported_flag(order.id)

    # an export attempt that races past the status gate finds the flag set
    assert lifecycle._export(order.id).exported is True
    assert not store.exists


def test_control_characters_do_not_block_export(lifecycle, repository, store, make_order):
    order = make_order(name="Ann\x01Smith")

    updated = lifecycle.set_status(order.id, "confirmed")

    assert updated.exported is True
    assert [r["Name"] for r in store.read_records()] == ["AnnSmith"]


def test_corrupt_sheet_keeps_confirmation(lifecycle, repository, store, export_path, make_order):
    order = make_order()
    export_path.parent.mkdir(parents=True)
    export_path.write_bytes(b"not a spreadsheet")

    with pytest.raises(StorageCorrupt) as exc:
        lifecycle.set_status(order.id, "confirmed")

    assert exc.value.status_changed is True
    assert exc.value.order.status == "confirmed"
    stored = repository.get(order.id)
    assert stored.status == "confirmed"
    assert stored.exported is False
    assert export_path.read_bytes() == b"not a spreadsheet"


def test_unexpected_export_error_is_reported_as_write_failure(lifecycle, repository, make_order, monkeypatch):
    order = make_order()

    def broken(self, rows):
        raise RuntimeError("bad cell")

    monkeypatch.setattr(TabularStore, "_build_workbook", broken)
    with pytest.raises(StorageWriteFailed) as exc:
        lifecycle.set_status(order.id, "confirmed")

    assert exc.value.status_changed is True
    stored = repository.get(order.id)
    assert stored.status == "confirmed"
    assert stored.exported is False


def test_order_deleted_after_append_still_succeeds(repository, store, make_order):
    order = make_order()

    class DeletingRepository(OrderRepository):
        def set_exported_flag(self, order_id):
            self.delete(order_id)
            return super().set_exported_flag(order_id)

    lifecycle = OrderLifecycle(DeletingRepository(repository._session_factory), store)
    updated = lifecycle.set_status(order.id, "confirmed")

    assert updated.status == "confirmed"
    assert len(store.read_records()) == 1
