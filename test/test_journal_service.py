from datetime import date
from decimal import Decimal

import pytest

from conftest import FakeGateway, entry_payload
from stockjournal.domain.builder import JournalEntryBuilder
from stockjournal.domain.errors import TransitionError, ValidationError
from stockjournal.domain.models import EntryType
from stockjournal.domain.transfer import TransferBalancer
from stockjournal.services.journal_service import StockJournalService


def _service(*entries):
    gateway = FakeGateway(entries=list(entries))
    return gateway, StockJournalService(gateway, today=lambda: date(2024, 5, 2))


def test_list_builds_filters():
    gateway, svc = _service(entry_payload())

    page = svc.list_entries(search="  flour ", entry_type="consumption", status="", date_from=date(2024, 1, 1), direction="desc")

    name, params = gateway.calls[0]
    assert name == "list"
    assert params == {
        "page": 1,
        "per_page": 15,
        "search": "flour",
        "entry_type": "consumption",
        "date_from": "2024-01-01",
        "direction": "desc",
    }
    assert len(page.entries) == 1


def test_list_rejects_unknown_status_before_calling_out():
    gateway, svc = _service()

    with pytest.raises(ValidationError, match="Unknown status"):
        svc.list_entries(status="archived")
    assert gateway.calls == []


def test_start_entry_returns_balancer_for_transfers():
    gateway, svc = _service()

    draft = svc.start_entry("transfer")

    assert isinstance(draft, TransferBalancer)
    assert draft.journal_date == date(2024, 5, 2)
    assert len(draft.catalog) == 3
    assert gateway.calls == [("form_data", "transfer")]


def test_start_entry_builder_for_other_types():
    _gateway, svc = _service()
    draft = svc.start_entry(EntryType.PRODUCTION, date(2024, 1, 1))

    assert isinstance(draft, JournalEntryBuilder)
    assert draft.journal_date == date(2024, 1, 1)


def test_edit_entry_rebuilds_lines_with_catalog_stock():
    _gateway, svc = _service(entry_payload())

    draft = svc.edit_entry(7)

    assert draft.entry_id == 7
    line = draft.lines[0]
    assert line.quantity == Decimal("4")
    assert line.stock_before == Decimal("10")
    assert draft.is_mutable


def test_edit_posted_entry_is_refused():
    _gateway, svc = _service(entry_payload(status="posted"))

    with pytest.raises(TransitionError):
        svc.edit_entry(7)


def test_duplicate_copies_lines_into_a_new_draft():
    items = [
        {"product_id": 1, "movement_type": "out", "quantity": 5, "rate": 3, "amount": 15, "batch_number": "B-9"},
        {"product_id": 2, "movement_type": "in", "quantity": 5, "rate": 1.2, "amount": 6},
    ]
    _gateway, svc = _service(entry_payload(status="posted", entry_type="transfer", items=items))

    draft = svc.duplicate_entry(7)

    assert isinstance(draft, TransferBalancer)
    assert draft.entry_id is None
    assert draft.journal_date == date(2024, 5, 2)
    assert draft.narration == "Kitchen use"
    assert draft.from_lines[0].rate == Decimal("3")
    assert draft.from_lines[0].batch_number == "B-9"
    assert draft.is_balanced()
    assert draft.validate() == []


def test_duplicate_skips_items_missing_from_catalog(caplog):
    items = [
        {"product_id": 99, "movement_type": "out", "quantity": 2, "rate": 5, "amount": 10},
        {"product_id": 2, "movement_type": "out", "quantity": 3, "rate": 1.2, "amount": 3.6},
    ]
    _gateway, svc = _service(entry_payload(items=items))

    with caplog.at_level("INFO", logger="stockjournal.services.journal_service"):
        draft = svc.duplicate_entry(7)

    assert [ln.product_id for ln in draft.lines] == [2]
    assert len(draft.to_items()) == 1
    assert "duplicate_item_skipped source_id=7 product_id=99" in caplog.text
    assert "lines=1 skipped=1" in caplog.text
