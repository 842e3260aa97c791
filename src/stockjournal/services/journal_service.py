from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from stockjournal.domain.builder import JournalEntryBuilder
from stockjournal.domain.catalog import ProductStockCatalog
from stockjournal.domain.errors import TransitionError, ValidationError
from stockjournal.domain.models import (
    EntryStatus,
    EntryType,
    EntryTypeOption,
    JournalEntry,
    JournalListPage,
    MovementType,
    ProductStockInfo,
    StockCalculation,
    parse_decimal,
)
from stockjournal.domain.transfer import TransferBalancer
from stockjournal.repositories.contracts import StockJournalGateway

log = logging.getLogger(__name__)

SORT_DIRECTIONS = ("asc", "desc")


def _choice(value, enum_cls, name: str):
    if value in (None, ""):
        return None
    try:
        return enum_cls(value).value
    except ValueError:
        raise ValidationError([], f"Unknown {name}: {value}") from None


class StockJournalService:
    def __init__(self, gateway: StockJournalGateway, today: Callable[[], date] = date.today):
        self.gateway = gateway
        self.today = today

    def list_entries(
        self,
        search: Optional[str] = None,
        entry_type: Optional[str] = None,
        status: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        page: int = 1,
        per_page: int = 15,
        sort: Optional[str] = None,
        direction: Optional[str] = None,
    ) -> JournalListPage:
        params: dict = {"page": max(1, int(page)), "per_page": max(1, int(per_page))}
        if search and search.strip():
            params["search"] = search.strip()
        entry_type_value = _choice(entry_type, EntryType, "entry_type")
        if entry_type_value:
            params["entry_type"] = entry_type_value
        status_value = _choice(status, EntryStatus, "status")
        if status_value:
            params["status"] = status_value
        if date_from:
            params["date_from"] = date_from.isoformat()
        if date_to:
            params["date_to"] = date_to.isoformat()
        if sort:
            params["sort"] = sort
        if direction:
            if direction not in SORT_DIRECTIONS:
                raise ValidationError([], f"Unknown direction: {direction}")
            params["direction"] = direction
        return self.gateway.list_entries(params)

    def get_entry(self, entry_id: int) -> JournalEntry:
        return self.gateway.show(entry_id)

    def entry_types(self, entry_type: Optional[str] = None) -> list[EntryTypeOption]:
        types, _products = self.gateway.form_data(entry_type)
        return types

    def load_catalog(self, entry_type: Optional[EntryType | str] = None) -> ProductStockCatalog:
        key = EntryType(entry_type).value if entry_type else None
        _types, products = self.gateway.form_data(key)
        log.info("catalog_loaded entry_type=%s products=%s", key, len(products))
        return ProductStockCatalog.of(products)

    def start_entry(self, entry_type: EntryType | str, journal_date: Optional[date] = None):
        """Fresh draft bound to a newly fetched catalog snapshot."""
        entry_type = EntryType(entry_type)
        catalog = self.load_catalog(entry_type)
        journal_date = journal_date or self.today()
        if entry_type is EntryType.TRANSFER:
            return TransferBalancer.new(catalog, journal_date)
        return JournalEntryBuilder.new(entry_type, catalog, journal_date)

    def edit_entry(self, entry_id: int):
        entry = self.gateway.show(entry_id)
        if entry.status is not EntryStatus.DRAFT or not entry.can_edit:
            raise TransitionError(f"Entry {entry.journal_number or entry.id} cannot be edited.")
        catalog = self.load_catalog(entry.entry_type)
        if entry.entry_type is EntryType.TRANSFER:
            return TransferBalancer.from_entry(entry, catalog)
        return JournalEntryBuilder.from_entry(entry, catalog)

    def duplicate_entry(self, entry_id: int):
        """New draft copying type, narration and lines of an existing entry."""
        source = self.gateway.show(entry_id)
        draft = self.start_entry(source.entry_type)
        draft = draft.with_header(narration=source.narration)
        skipped = 0
        for item in source.items:
            if draft.catalog.get(item.product_id) is None:
                log.warning(
                    "duplicate_item_skipped source_id=%s product_id=%s reason=not_in_catalog",
                    entry_id, item.product_id,
                )
                skipped += 1
                continue
            if isinstance(draft, TransferBalancer):
                if item.movement_type is MovementType.OUT:
                    draft, local_id = draft.add_from_line()
                else:
                    draft, local_id = draft.add_to_line()
            else:
                draft, local_id = draft.add_line()
                draft = draft.set_movement_type(local_id, item.movement_type)
            draft = draft.set_product(local_id, item.product_id)
            draft = draft.set_quantity(local_id, item.quantity)
            draft = draft.set_rate(local_id, item.rate)
            draft = draft.set_batch_number(local_id, item.batch_number)
            draft = draft.set_remarks(local_id, item.remarks)
        log.info("entry_duplicated source_id=%s lines=%s skipped=%s", entry_id, len(draft.lines), skipped)
        return draft

    def product_stock(self, product_id: int) -> ProductStockInfo:
        return self.gateway.product_stock(product_id)

    def calculate_stock(self, product_id: int, movement_type: MovementType | str, quantity) -> StockCalculation:
        movement = MovementType(movement_type)
        return self.gateway.calculate_stock(product_id, movement.value, parse_decimal(quantity))
