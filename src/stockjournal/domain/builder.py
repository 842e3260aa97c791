from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from stockjournal.domain.catalog import ProductStockCatalog
from stockjournal.domain.errors import EntryLockedError, NotFoundError
from stockjournal.domain.models import (
    ZERO,
    EntryStatus,
    EntryType,
    JournalEntry,
    MovementType,
    SubmitAction,
)
from stockjournal.domain.movement import MovementLine
from stockjournal.domain.validation import ValidationIssue, check_has_lines, check_header, check_lines

DEFAULT_MOVEMENT: dict[EntryType, Optional[MovementType]] = {
    EntryType.CONSUMPTION: MovementType.OUT,
    EntryType.PRODUCTION: MovementType.IN,
    EntryType.ADJUSTMENT: None,
    EntryType.TRANSFER: None,
}


@dataclass(frozen=True)
class EntryTotals:
    item_count: int
    total_amount: Decimal


@dataclass(frozen=True)
class JournalEntryBuilder:
    """Draft of one stock journal entry.

    Every operation returns a new builder; the receiver is never changed.
    Only a Draft the server allows editing accepts mutations, anything else
    raises EntryLockedError.
    """

    entry_type: EntryType
    catalog: ProductStockCatalog = field(default_factory=ProductStockCatalog, compare=False, repr=False)
    journal_date: Optional[date] = None
    reference_number: Optional[str] = None
    narration: Optional[str] = None
    lines: tuple[MovementLine, ...] = ()
    status: EntryStatus = EntryStatus.DRAFT
    can_edit: bool = True
    entry_id: Optional[int] = None
    default_movement: Optional[MovementType] = None
    id_prefix: str = "line"
    next_seq: int = 1

    @classmethod
    def new(
        cls,
        entry_type: EntryType | str,
        catalog: ProductStockCatalog | None = None,
        journal_date: Optional[date] = None,
    ) -> "JournalEntryBuilder":
        entry_type = EntryType(entry_type)
        return cls(
            entry_type=entry_type,
            catalog=catalog or ProductStockCatalog(),
            journal_date=journal_date,
            default_movement=DEFAULT_MOVEMENT[entry_type],
        )

    @classmethod
    def from_entry(
        cls,
        entry: JournalEntry,
        catalog: ProductStockCatalog | None = None,
        movement_filter: Optional[MovementType] = None,
        id_prefix: str = "line",
    ) -> "JournalEntryBuilder":
        """Rebuild a builder from a server entry.

        Stock comes from the catalog when it knows the product, else from the
        item's own ``stock_before``. The builder keeps the entry's status, so
        posted or cancelled entries come back locked.
        """
        catalog = catalog or ProductStockCatalog()
        lines = []
        for item in entry.items:
            if movement_filter is not None and item.movement_type is not movement_filter:
                continue
            product = catalog.get(item.product_id)
            lines.append(MovementLine(
                local_id=f"{id_prefix}-{len(lines) + 1}",
                product_id=item.product_id,
                movement_type=item.movement_type,
                quantity=item.quantity,
                rate=item.rate,
                batch_number=item.batch_number,
                expiry_date=item.expiry_date,
                remarks=item.remarks,
                product_name=product.name if product else item.product_name,
                unit=product.unit if product else item.unit,
                stock_before=product.current_stock if product else item.stock_before,
            ))
        default = movement_filter if movement_filter is not None else DEFAULT_MOVEMENT[entry.entry_type]
        return cls(
            entry_type=entry.entry_type,
            catalog=catalog,
            journal_date=entry.journal_date,
            reference_number=entry.reference_number,
            narration=entry.narration,
            lines=tuple(lines),
            status=entry.status,
            can_edit=entry.can_edit,
            entry_id=entry.id,
            default_movement=default,
            id_prefix=id_prefix,
            next_seq=len(lines) + 1,
        )

    # -- state ---------------------------------------------------------

    @property
    def is_mutable(self) -> bool:
        return self.status is EntryStatus.DRAFT and self.can_edit

    def _ensure_mutable(self) -> None:
        if not self.is_mutable:
            raise EntryLockedError(f"Entry is {self.status.value}; only editable drafts accept changes.")

    def line(self, local_id: str) -> MovementLine:
        for ln in self.lines:
            if ln.local_id == local_id:
                return ln
        raise NotFoundError(f"Line not found: {local_id}")

    def has_line(self, local_id: str) -> bool:
        return any(ln.local_id == local_id for ln in self.lines)

    def selected_lines(self) -> tuple[MovementLine, ...]:
        return tuple(ln for ln in self.lines if ln.has_product)

    # -- transitions ---------------------------------------------------

    def with_header(self, **changes) -> "JournalEntryBuilder":
        allowed = {"journal_date", "reference_number", "narration"}
        unknown = set(changes) - allowed
        if unknown:
            raise TypeError(f"Unknown header fields: {sorted(unknown)}")
        self._ensure_mutable()
        return replace(self, **changes)

    def add_line(self) -> tuple["JournalEntryBuilder", str]:
        self._ensure_mutable()
        local_id = f"{self.id_prefix}-{self.next_seq}"
        line = MovementLine(local_id=local_id, movement_type=self.default_movement)
        return replace(self, lines=self.lines + (line,), next_seq=self.next_seq + 1), local_id

    def remove_line(self, local_id: str) -> "JournalEntryBuilder":
        self._ensure_mutable()
        self.line(local_id)
        return replace(self, lines=tuple(ln for ln in self.lines if ln.local_id != local_id))

    def _update_line(self, local_id: str, change: Callable[[MovementLine], MovementLine]) -> "JournalEntryBuilder":
        self._ensure_mutable()
        self.line(local_id)
        return replace(self, lines=tuple(change(ln) if ln.local_id == local_id else ln for ln in self.lines))

    def set_product(self, local_id: str, product_id: Optional[int]) -> "JournalEntryBuilder":
        return self._update_line(local_id, lambda ln: ln.set_product(product_id, self.catalog))

    def set_quantity(self, local_id: str, quantity: object) -> "JournalEntryBuilder":
        return self._update_line(local_id, lambda ln: ln.set_quantity(quantity))

    def set_rate(self, local_id: str, rate: object) -> "JournalEntryBuilder":
        return self._update_line(local_id, lambda ln: ln.set_rate(rate))

    def set_movement_type(self, local_id: str, movement_type: MovementType | str | None) -> "JournalEntryBuilder":
        return self._update_line(local_id, lambda ln: ln.set_movement_type(movement_type))

    def set_batch_number(self, local_id: str, batch_number: Optional[str]) -> "JournalEntryBuilder":
        return self._update_line(local_id, lambda ln: ln.set_batch_number(batch_number))

    def set_expiry_date(self, local_id: str, expiry_date: Optional[date]) -> "JournalEntryBuilder":
        return self._update_line(local_id, lambda ln: ln.set_expiry_date(expiry_date))

    def set_remarks(self, local_id: str, remarks: Optional[str]) -> "JournalEntryBuilder":
        return self._update_line(local_id, lambda ln: ln.set_remarks(remarks))

    # -- derived -------------------------------------------------------

    def totals(self) -> EntryTotals:
        selected = self.selected_lines()
        return EntryTotals(
            item_count=len(selected),
            total_amount=sum((ln.amount for ln in selected), ZERO),
        )

    def total_quantity(self) -> Decimal:
        return sum((ln.quantity for ln in self.selected_lines()), ZERO)

    def validate_lines(self, section: str = "") -> list[ValidationIssue]:
        return check_lines(self.lines, section)

    def validate(self) -> list[ValidationIssue]:
        issues = check_header(self.journal_date)
        issues += check_has_lines(len(self.selected_lines()))
        issues += self.validate_lines()
        return issues

    def to_items(self) -> list[dict]:
        return [ln.to_item() for ln in self.selected_lines()]

    def to_payload(self, action: SubmitAction | str = SubmitAction.SAVE) -> dict:
        return build_payload(self, self.to_items(), SubmitAction(action))


def build_payload(draft, items: list[dict], action: SubmitAction) -> dict:
    payload = {
        "journal_date": draft.journal_date.isoformat() if draft.journal_date else None,
        "entry_type": draft.entry_type.value,
    }
    if draft.reference_number and draft.reference_number.strip():
        payload["reference_number"] = draft.reference_number.strip()
    if draft.narration and draft.narration.strip():
        payload["narration"] = draft.narration.strip()
    payload["items"] = items
    payload["action"] = action.value
    return payload
