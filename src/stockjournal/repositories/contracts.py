from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from stockjournal.domain.builder import EntryTotals
from stockjournal.domain.models import (
    EntryType,
    EntryTypeOption,
    JournalEntry,
    JournalListPage,
    Product,
    ProductStockInfo,
    StockCalculation,
)
from stockjournal.domain.validation import ValidationIssue


class StockJournalGateway(Protocol):
    def list_entries(self, params: dict) -> JournalListPage: ...
    def show(self, entry_id: int) -> JournalEntry: ...
    def form_data(self, entry_type: Optional[str] = None) -> tuple[list[EntryTypeOption], list[Product]]: ...
    def create(self, payload: dict) -> JournalEntry: ...
    def update(self, entry_id: int, payload: dict) -> JournalEntry: ...
    def post(self, entry_id: int) -> Optional[JournalEntry]: ...
    def cancel(self, entry_id: int) -> Optional[JournalEntry]: ...
    def delete(self, entry_id: int) -> None: ...
    def product_stock(self, product_id: int) -> ProductStockInfo: ...
    def calculate_stock(self, product_id: int, movement_type: str, quantity) -> StockCalculation: ...


class EntryDraft(Protocol):
    """What submission needs from a builder or a transfer balancer."""

    entry_type: EntryType
    entry_id: Optional[int]
    journal_date: Optional[date]

    def validate(self) -> list[ValidationIssue]: ...
    def totals(self) -> EntryTotals: ...
    def to_payload(self, action=...) -> dict: ...
