from datetime import date
from decimal import Decimal

import pytest

from conftest import entry_payload, make_catalog
from stockjournal.domain.errors import EntryLockedError
from stockjournal.domain.models import EntryStatus
from stockjournal.domain.transfer import TransferBalancer
from stockjournal.domain.validation import IssueKind
from stockjournal.repositories.serializers import entry_from_payload


def _transfer(from_lines=(), to_lines=()):
    t = TransferBalancer.new(make_catalog(), date(2024, 3, 1))
    for product_id, qty in from_lines:
        t, lid = t.add_from_line()
        t = t.set_product(lid, product_id).set_quantity(lid, qty)
    for product_id, qty in to_lines:
        t, lid = t.add_to_line()
        t = t.set_product(lid, product_id).set_quantity(lid, qty)
    return t


def _kinds(t):
    return [i.kind for i in t.validate()]


def test_split_destination_quantities_balance():
    t = _transfer(from_lines=[(1, 5)], to_lines=[(2, 3), (3, 2)])

    assert t.is_balanced()
    assert IssueKind.UNBALANCED_TRANSFER not in _kinds(t)
    assert t.validate() == []


def test_unequal_sides_report_unbalanced_totals():
    t = _transfer(from_lines=[(1, 5)], to_lines=[(2, 4)])

    assert not t.is_balanced()
    issues = [i for i in t.validate() if i.kind is IssueKind.UNBALANCED_TRANSFER]
    assert len(issues) == 1
    assert issues[0].details == {"from_total": Decimal("5"), "to_total": Decimal("4")}


def test_one_sided_transfer_is_unbalanced():
    t = _transfer(from_lines=[(1, 5)])
    assert _kinds(t) == [IssueKind.UNBALANCED_TRANSFER]


def test_empty_transfer_needs_lines_but_is_balanced():
    t = _transfer()
    assert t.is_balanced()
    assert _kinds(t) == [IssueKind.MISSING_FIELD]


def test_stock_ceiling_applies_to_from_side_only():
    t = _transfer(from_lines=[(1, 11)], to_lines=[(3, 11)])

    issues = t.validate()
    assert [i.kind for i in issues] == [IssueKind.INSUFFICIENT_STOCK]
    assert t.line(issues[0].local_id).movement_type.value == "out"
    assert issues[0].message == "Flour has only 10 kg available. Cannot transfer 11 kg."


def test_messages_name_the_section():
    t = _transfer(from_lines=[(1, 0)], to_lines=[(2, 0)])
    messages = [i.message for i in t.validate() if i.kind is IssueKind.INVALID_QUANTITY]

    assert any("FROM section" in m for m in messages)
    assert any("TO section" in m for m in messages)


def test_lines_without_product_do_not_count_towards_quantities():
    t = _transfer(from_lines=[(1, 5)], to_lines=[(2, 5)])
    t, blank = t.add_to_line()
    t = t.set_quantity(blank, 9)

    assert t.total_to_quantity() == Decimal("5")
    assert t.is_balanced()


def test_payload_lists_from_items_before_to_items():
    t = _transfer(from_lines=[(1, 5)], to_lines=[(2, 3), (3, 2)])
    items = t.to_payload("save")["items"]

    assert [(i["product_id"], i["movement_type"]) for i in items] == [(1, "out"), (2, "in"), (3, "in")]
    assert t.to_payload("save")["entry_type"] == "transfer"


def test_local_ids_are_unique_across_sides_and_route_to_the_owner():
    t = TransferBalancer.new(make_catalog(), date(2024, 3, 1))
    t, a = t.add_from_line()
    t, b = t.add_to_line()

    assert a != b
    t = t.set_product(b, 2)
    assert t.to_lines[0].product_id == 2
    assert t.from_lines[0].product_id is None

    t = t.remove_line(a)
    assert t.from_lines == ()


def test_totals_span_both_sides():
    t = _transfer(from_lines=[(1, 2)], to_lines=[(2, 2)])
    totals = t.totals()

    assert totals.item_count == 2
    assert totals.total_amount == Decimal("2") * Decimal("2.50") + Decimal("2") * Decimal("1.20")


def test_rebuilt_posted_transfer_is_locked():
    entry = entry_from_payload(entry_payload(
        status="posted",
        entry_type="transfer",
        items=[
            {"product_id": 1, "movement_type": "out", "quantity": 5, "rate": 2.5, "amount": 12.5},
            {"product_id": 2, "movement_type": "in", "quantity": 5, "rate": 1.2, "amount": 6},
        ],
    ))
    t = TransferBalancer.from_entry(entry, make_catalog())

    assert t.status is EntryStatus.POSTED
    assert t.is_balanced()
    with pytest.raises(EntryLockedError):
        t.add_to_line()
