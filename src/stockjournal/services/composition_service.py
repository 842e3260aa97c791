from __future__ import annotations

import logging
from typing import Callable, Optional

from stockjournal.domain.models import JournalEntry, Product, SubmitAction
from stockjournal.domain.transfer import TransferBalancer
from stockjournal.domain.validation import ValidationIssue
from stockjournal.services.search_scheduler import DebouncedScheduler

log = logging.getLogger(__name__)

SEARCH_DEBOUNCE_SECONDS = 0.5


class EntryComposer:
    """Stateful binding between one entry form and its immutable draft.

    The draft (a JournalEntryBuilder or TransferBalancer) is replaced on every
    edit. Product searches are debounced per line and dropped when the line
    goes away.
    """

    def __init__(
        self,
        draft,
        scheduler: DebouncedScheduler | None = None,
        search: Callable[[str], list[Product]] | None = None,
        debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS,
    ):
        self.draft = draft
        self.scheduler = scheduler or DebouncedScheduler()
        self.search = search or draft.catalog.search
        self.debounce_seconds = debounce_seconds

    @property
    def is_transfer(self) -> bool:
        return isinstance(self.draft, TransferBalancer)

    def add_line(self, side: Optional[str] = None) -> str:
        if self.is_transfer:
            if side == "from":
                self.draft, local_id = self.draft.add_from_line()
            elif side == "to":
                self.draft, local_id = self.draft.add_to_line()
            else:
                raise ValueError("Transfer lines need side='from' or side='to'.")
        else:
            self.draft, local_id = self.draft.add_line()
        return local_id

    def remove_line(self, local_id: str) -> None:
        self.draft = self.draft.remove_line(local_id)
        self.scheduler.cancel(local_id)

    def update(self, local_id: str, field: str, value) -> None:
        setter = getattr(self.draft, f"set_{field}", None)
        if setter is None:
            raise AttributeError(f"Unknown line field: {field}")
        self.draft = setter(local_id, value)

    def set_header(self, **changes) -> None:
        self.draft = self.draft.with_header(**changes)

    def search_products(self, local_id: str, term: str, on_results: Callable[[str, list[Product]], None]) -> None:
        self.draft.line(local_id)

        def run() -> None:
            results = self.search(term)
            log.debug("product_search line=%s term=%r hits=%s", local_id, term, len(results))
            on_results(local_id, results)

        self.scheduler.schedule(local_id, self.debounce_seconds, run)

    def validate(self) -> list[ValidationIssue]:
        return self.draft.validate()

    def totals(self):
        return self.draft.totals()

    def submit(self, submissions, action: SubmitAction | str = SubmitAction.SAVE) -> JournalEntry:
        return submissions.submit(self.draft, action)

    def close(self) -> None:
        self.scheduler.cancel_all()
