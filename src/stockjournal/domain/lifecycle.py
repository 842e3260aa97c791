"""
Entry lifecycle state machine.

Draft entries can be posted, cancelled or deleted; posted entries can only
be cancelled (a reversal that keeps history). Cancelled and deleted are
terminal. Capability flags come from the server and are never re-derived
from the status here: post and cancel are gated by the flags alone, and
only deletion is decided by status.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from stockjournal.domain.errors import TransitionError, ValidationError
from stockjournal.domain.models import EntryStatus, JournalEntry
from stockjournal.domain.validation import ValidationIssue

DELETED = "deleted"


@dataclass(frozen=True)
class Transition:
    from_state: EntryStatus
    to_state: EntryStatus | str
    action: str


@dataclass(frozen=True)
class EntryLifecycle:
    initial_state: EntryStatus
    transitions: tuple[Transition, ...]

    def targets(self, state: EntryStatus) -> set:
        return {t.to_state for t in self.transitions if t.from_state is state}

    def is_terminal(self, state: EntryStatus) -> bool:
        return not self.targets(state)

    def allows(self, state: EntryStatus, action: str) -> bool:
        return any(t.from_state is state and t.action == action for t in self.transitions)

    def ensure_can_post(self, entry: JournalEntry, issues: Optional[list[ValidationIssue]] = None) -> None:
        if not entry.can_post:
            raise TransitionError(f"Entry {entry.journal_number or entry.id} cannot be posted.")
        if issues:
            raise ValidationError(issues)

    def ensure_can_cancel(self, entry: JournalEntry) -> None:
        if not entry.can_cancel:
            raise TransitionError(f"Entry {entry.journal_number or entry.id} cannot be cancelled.")

    def ensure_can_delete(self, entry: JournalEntry) -> None:
        if not self.allows(entry.status, "delete"):
            raise TransitionError("Only draft entries can be deleted.")


STOCK_JOURNAL_LIFECYCLE = EntryLifecycle(
    initial_state=EntryStatus.DRAFT,
    transitions=(
        Transition(EntryStatus.DRAFT, EntryStatus.POSTED, "post"),
        Transition(EntryStatus.DRAFT, EntryStatus.CANCELLED, "cancel"),
        Transition(EntryStatus.POSTED, EntryStatus.CANCELLED, "cancel"),
        Transition(EntryStatus.DRAFT, DELETED, "delete"),
    ),
)
