from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from stockjournal.domain.models import (
    EntryStatus,
    EntryType,
    EntryTypeOption,
    JournalEntry,
    JournalItem,
    JournalListPage,
    JournalStatistics,
    MovementType,
    Pagination,
    Product,
    ProductStockInfo,
    StockCalculation,
    parse_decimal,
)


def unwrap(body: Any) -> Any:
    """Strip the ``{success, message, data}`` envelope when present."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def to_jsonable(value: Any) -> Any:
    # json has no decimal type; integral values go out as ints
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, date):
        return value.isoformat()
    return value


def _date(value: Any) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _name(value: Any) -> str:
    # units and categories arrive either as plain strings or as {id, name}
    if isinstance(value, dict):
        return str(value.get("name") or "")
    return str(value or "")


def _optional_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None else parse_decimal(value)


def product_from_payload(data: dict) -> Product:
    return Product(
        id=int(data["id"]),
        name=str(data.get("name") or ""),
        sku=str(data.get("sku") or ""),
        current_stock=parse_decimal(data.get("current_stock")),
        purchase_rate=parse_decimal(data.get("purchase_rate")),
        unit=_name(data.get("unit")),
        category=_name(data.get("category")) or None,
    )


def entry_type_option_from_payload(data: dict) -> EntryTypeOption:
    return EntryTypeOption(
        key=EntryType(data["key"]),
        label=str(data.get("label") or data["key"]),
        movement=str(data.get("movement") or ""),
    )


def item_from_payload(data: dict) -> JournalItem:
    product = data.get("product") or {}
    return JournalItem(
        id=data.get("id"),
        product_id=int(data.get("product_id") or product.get("id")),
        product_name=str(product.get("name") or ""),
        sku=str(product.get("sku") or ""),
        unit=_name(product.get("unit")),
        movement_type=MovementType(data["movement_type"]),
        quantity=parse_decimal(data.get("quantity")),
        rate=parse_decimal(data.get("rate")),
        amount=parse_decimal(data.get("amount")),
        batch_number=data.get("batch_number") or None,
        expiry_date=_date(data.get("expiry_date")),
        remarks=data.get("remarks") or None,
        stock_before=_optional_decimal(data.get("stock_before")),
        stock_after=_optional_decimal(data.get("stock_after")),
    )


def entry_from_payload(data: dict) -> JournalEntry:
    can_delete = data.get("can_delete")
    return JournalEntry(
        id=int(data["id"]),
        journal_number=str(data.get("journal_number") or ""),
        journal_date=_date(data.get("journal_date")),
        entry_type=EntryType(data["entry_type"]),
        status=EntryStatus(data["status"]),
        reference_number=data.get("reference_number") or None,
        narration=data.get("narration") or None,
        total_items=int(data.get("total_items") or 0),
        total_amount=parse_decimal(data.get("total_amount")),
        can_edit=bool(data.get("can_edit")),
        can_post=bool(data.get("can_post")),
        can_cancel=bool(data.get("can_cancel")),
        can_delete=None if can_delete is None else bool(can_delete),
        items=tuple(item_from_payload(it) for it in data.get("items") or ()),
        created_at=data.get("created_at"),
        updated_at=data.get("updated_at"),
    )


def list_page_from_payload(body: Any) -> JournalListPage:
    page = unwrap(body) or {}
    rows = page.get("data") or []
    stats = body.get("statistics") if isinstance(body, dict) else None
    return JournalListPage(
        entries=tuple(entry_from_payload(r) for r in rows),
        pagination=Pagination(
            current_page=int(page.get("current_page") or 1),
            last_page=int(page.get("last_page") or 1),
            per_page=int(page.get("per_page") or len(rows)),
            total=int(page.get("total") or len(rows)),
            from_=page.get("from"),
            to=page.get("to"),
        ),
        statistics=JournalStatistics(
            total_entries=int(stats.get("total_entries") or 0),
            draft_entries=int(stats.get("draft_entries") or 0),
            posted_entries=int(stats.get("posted_entries") or 0),
            this_month_entries=int(stats.get("this_month_entries") or 0),
        ) if stats else None,
    )


def product_stock_from_payload(data: dict) -> ProductStockInfo:
    return ProductStockInfo(
        current_stock=parse_decimal(data.get("current_stock")),
        unit=_name(data.get("unit")),
        rate=parse_decimal(data.get("rate")),
    )


def stock_calculation_from_payload(data: dict) -> StockCalculation:
    return StockCalculation(
        current_stock=parse_decimal(data.get("current_stock")),
        new_stock=parse_decimal(data.get("new_stock")),
        unit=_name(data.get("unit")),
    )
