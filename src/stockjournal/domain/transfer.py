from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Optional

from stockjournal.domain.builder import EntryTotals, JournalEntryBuilder, build_payload
from stockjournal.domain.catalog import ProductStockCatalog
from stockjournal.domain.errors import EntryLockedError, NotFoundError
from stockjournal.domain.models import EntryStatus, EntryType, JournalEntry, MovementType, SubmitAction
from stockjournal.domain.movement import MovementLine
from stockjournal.domain.validation import ValidationIssue, check_has_lines, check_header, unbalanced_transfer


def _side(catalog: ProductStockCatalog, movement: MovementType, prefix: str) -> JournalEntryBuilder:
    return JournalEntryBuilder(
        entry_type=EntryType.TRANSFER,
        catalog=catalog,
        default_movement=movement,
        id_prefix=prefix,
    )


@dataclass(frozen=True)
class TransferBalancer:
    """A transfer entry: stock leaving (FROM, out) and arriving (TO, in).

    The two sides are independent builders under one header. A transfer is
    closed when both sides move the same total quantity; products may differ
    between the sides.
    """

    from_side: JournalEntryBuilder
    to_side: JournalEntryBuilder
    journal_date: Optional[date] = None
    reference_number: Optional[str] = None
    narration: Optional[str] = None
    status: EntryStatus = EntryStatus.DRAFT
    can_edit: bool = True
    entry_id: Optional[int] = None

    entry_type = EntryType.TRANSFER

    @classmethod
    def new(cls, catalog: ProductStockCatalog | None = None, journal_date: Optional[date] = None) -> "TransferBalancer":
        catalog = catalog or ProductStockCatalog()
        return cls(
            from_side=_side(catalog, MovementType.OUT, "from"),
            to_side=_side(catalog, MovementType.IN, "to"),
            journal_date=journal_date,
        )

    @classmethod
    def from_entry(cls, entry: JournalEntry, catalog: ProductStockCatalog | None = None) -> "TransferBalancer":
        from_side = JournalEntryBuilder.from_entry(entry, catalog, movement_filter=MovementType.OUT, id_prefix="from")
        to_side = JournalEntryBuilder.from_entry(entry, catalog, movement_filter=MovementType.IN, id_prefix="to")
        # sides stay open; the balancer holds the entry's lock state
        unlocked = {"status": EntryStatus.DRAFT, "can_edit": True}
        return cls(
            from_side=replace(from_side, **unlocked),
            to_side=replace(to_side, **unlocked),
            journal_date=entry.journal_date,
            reference_number=entry.reference_number,
            narration=entry.narration,
            status=entry.status,
            can_edit=entry.can_edit,
            entry_id=entry.id,
        )

    @property
    def catalog(self) -> ProductStockCatalog:
        return self.from_side.catalog

    @property
    def from_lines(self) -> tuple[MovementLine, ...]:
        return self.from_side.lines

    @property
    def to_lines(self) -> tuple[MovementLine, ...]:
        return self.to_side.lines

    @property
    def lines(self) -> tuple[MovementLine, ...]:
        return self.from_side.lines + self.to_side.lines

    @property
    def is_mutable(self) -> bool:
        return self.status is EntryStatus.DRAFT and self.can_edit

    def _ensure_mutable(self) -> None:
        if not self.is_mutable:
            raise EntryLockedError(f"Entry is {self.status.value}; only editable drafts accept changes.")

    def _side_name(self, local_id: str) -> str:
        if self.from_side.has_line(local_id):
            return "from_side"
        if self.to_side.has_line(local_id):
            return "to_side"
        raise NotFoundError(f"Line not found: {local_id}")

    def _on_side(self, local_id: str, method: str, *args) -> "TransferBalancer":
        self._ensure_mutable()
        name = self._side_name(local_id)
        side = getattr(self, name)
        return replace(self, **{name: getattr(side, method)(local_id, *args)})

    def line(self, local_id: str) -> MovementLine:
        return getattr(self, self._side_name(local_id)).line(local_id)

    # -- transitions ---------------------------------------------------

    def with_header(self, **changes) -> "TransferBalancer":
        allowed = {"journal_date", "reference_number", "narration"}
        unknown = set(changes) - allowed
        if unknown:
            raise TypeError(f"Unknown header fields: {sorted(unknown)}")
        self._ensure_mutable()
        return replace(self, **changes)

    def add_from_line(self) -> tuple["TransferBalancer", str]:
        self._ensure_mutable()
        side, local_id = self.from_side.add_line()
        return replace(self, from_side=side), local_id

    def add_to_line(self) -> tuple["TransferBalancer", str]:
        self._ensure_mutable()
        side, local_id = self.to_side.add_line()
        return replace(self, to_side=side), local_id

    def remove_line(self, local_id: str) -> "TransferBalancer":
        return self._on_side(local_id, "remove_line")

    def set_product(self, local_id: str, product_id: Optional[int]) -> "TransferBalancer":
        return self._on_side(local_id, "set_product", product_id)

    def set_quantity(self, local_id: str, quantity: object) -> "TransferBalancer":
        return self._on_side(local_id, "set_quantity", quantity)

    def set_rate(self, local_id: str, rate: object) -> "TransferBalancer":
        return self._on_side(local_id, "set_rate", rate)

    def set_batch_number(self, local_id: str, batch_number: Optional[str]) -> "TransferBalancer":
        return self._on_side(local_id, "set_batch_number", batch_number)

    def set_expiry_date(self, local_id: str, expiry_date: Optional[date]) -> "TransferBalancer":
        return self._on_side(local_id, "set_expiry_date", expiry_date)

    def set_remarks(self, local_id: str, remarks: Optional[str]) -> "TransferBalancer":
        return self._on_side(local_id, "set_remarks", remarks)

    # -- derived -------------------------------------------------------

    def total_from_quantity(self) -> Decimal:
        return self.from_side.total_quantity()

    def total_to_quantity(self) -> Decimal:
        return self.to_side.total_quantity()

    def is_balanced(self) -> bool:
        # counted units: exact equality, no tolerance
        return self.total_from_quantity() == self.total_to_quantity()

    def totals(self) -> EntryTotals:
        a = self.from_side.totals()
        b = self.to_side.totals()
        return EntryTotals(item_count=a.item_count + b.item_count, total_amount=a.total_amount + b.total_amount)

    def validate(self) -> list[ValidationIssue]:
        issues = check_header(self.journal_date)
        issues += check_has_lines(self.totals().item_count)
        issues += self.from_side.validate_lines("FROM")
        issues += self.to_side.validate_lines("TO")
        if not self.is_balanced():
            issues.append(unbalanced_transfer(self.total_from_quantity(), self.total_to_quantity()))
        return issues

    def to_items(self) -> list[dict]:
        items = []
        for side, movement in ((self.from_side, MovementType.OUT), (self.to_side, MovementType.IN)):
            for item in side.to_items():
                item["movement_type"] = movement.value
                items.append(item)
        return items

    def to_payload(self, action: SubmitAction | str = SubmitAction.SAVE) -> dict:
        return build_payload(self, self.to_items(), SubmitAction(action))
