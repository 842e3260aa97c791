from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from enum import Enum
import re
from typing import Optional

ZERO = Decimal("0")

_GROUPED = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d*)?$")


def parse_decimal(value: object) -> Decimal:
    """Parse user or wire input into a Decimal.

    Blank or unparsable input becomes zero so composition can continue; the
    zero then fails validation. Floats go through ``str`` to keep their
    printed value instead of their binary expansion. Commas are accepted only
    as thousands separators ("1,250.5"); anything else with a comma, such as
    a decimal comma ("1,5"), is unparsable.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if isinstance(value, float):
        value = repr(value)
    text = str(value).strip()
    if "," in text:
        if not _GROUPED.match(text):
            return ZERO
        text = text.replace(",", "")
    if not text:
        return ZERO
    try:
        parsed = Decimal(text)
    except InvalidOperation:
        return ZERO
    return parsed if parsed.is_finite() else ZERO


class EntryType(str, Enum):
    CONSUMPTION = "consumption"
    PRODUCTION = "production"
    ADJUSTMENT = "adjustment"
    TRANSFER = "transfer"


class EntryStatus(str, Enum):
    DRAFT = "draft"
    POSTED = "posted"
    CANCELLED = "cancelled"


class MovementType(str, Enum):
    IN = "in"
    OUT = "out"


class SubmitAction(str, Enum):
    SAVE = "save"
    SAVE_AND_POST = "save_and_post"


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    sku: str
    current_stock: Decimal
    purchase_rate: Decimal
    unit: str = ""
    category: Optional[str] = None


@dataclass(frozen=True)
class EntryTypeOption:
    key: EntryType
    label: str
    movement: str


@dataclass(frozen=True)
class JournalItem:
    id: Optional[int]
    product_id: int
    product_name: str
    sku: str
    unit: str
    movement_type: MovementType
    quantity: Decimal
    rate: Decimal
    amount: Decimal
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    remarks: Optional[str] = None
    stock_before: Optional[Decimal] = None
    stock_after: Optional[Decimal] = None


@dataclass(frozen=True)
class JournalEntry:
    """Server view of an entry. Capability flags are taken as sent."""

    id: int
    journal_number: str
    journal_date: Optional[date]
    entry_type: EntryType
    status: EntryStatus
    reference_number: Optional[str]
    narration: Optional[str]
    total_items: int
    total_amount: Decimal
    can_edit: bool
    can_post: bool
    can_cancel: bool
    can_delete: Optional[bool] = None
    items: tuple[JournalItem, ...] = ()
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass(frozen=True)
class Pagination:
    current_page: int
    last_page: int
    per_page: int
    total: int
    from_: Optional[int] = None
    to: Optional[int] = None


@dataclass(frozen=True)
class JournalStatistics:
    total_entries: int
    draft_entries: int
    posted_entries: int
    this_month_entries: int


@dataclass(frozen=True)
class JournalListPage:
    entries: tuple[JournalEntry, ...]
    pagination: Pagination
    statistics: Optional[JournalStatistics] = None


@dataclass(frozen=True)
class ProductStockInfo:
    current_stock: Decimal
    unit: str
    rate: Decimal


@dataclass(frozen=True)
class StockCalculation:
    current_stock: Decimal
    new_stock: Decimal
    unit: str
