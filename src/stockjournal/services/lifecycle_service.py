from __future__ import annotations

import logging
from typing import Optional

from stockjournal.domain.builder import JournalEntryBuilder
from stockjournal.domain.catalog import ProductStockCatalog
from stockjournal.domain.errors import SubmissionError
from stockjournal.domain.lifecycle import STOCK_JOURNAL_LIFECYCLE, EntryLifecycle
from stockjournal.domain.models import EntryType, JournalEntry
from stockjournal.domain.transfer import TransferBalancer
from stockjournal.domain.validation import ValidationIssue
from stockjournal.repositories.contracts import StockJournalGateway
from stockjournal.services.submission_service import LOGGER_NAME

log = logging.getLogger(LOGGER_NAME)


class EntryLifecycleService:
    """Post, cancel and delete saved entries.

    Guards run before any request. After a successful call the entry is
    fetched again, so callers only ever see a status the server confirmed.
    """

    def __init__(self, gateway: StockJournalGateway, lifecycle: EntryLifecycle = STOCK_JOURNAL_LIFECYCLE):
        self.gateway = gateway
        self.lifecycle = lifecycle

    @staticmethod
    def local_issues(entry: JournalEntry, catalog: Optional[ProductStockCatalog] = None) -> list[ValidationIssue]:
        if entry.entry_type is EntryType.TRANSFER:
            draft = TransferBalancer.from_entry(entry, catalog)
        else:
            draft = JournalEntryBuilder.from_entry(entry, catalog)
        return draft.validate()

    def post(self, entry: JournalEntry, catalog: Optional[ProductStockCatalog] = None) -> JournalEntry:
        self.lifecycle.ensure_can_post(entry, self.local_issues(entry, catalog))
        try:
            self.gateway.post(entry.id)
        except SubmissionError as e:
            log.warning("entry_post_failed entry_id=%s error=%s", entry.id, e)
            raise
        refreshed = self.gateway.show(entry.id)
        log.info("entry_posted entry_id=%s status=%s", entry.id, refreshed.status.value)
        return refreshed

    def cancel(self, entry: JournalEntry) -> JournalEntry:
        self.lifecycle.ensure_can_cancel(entry)
        try:
            self.gateway.cancel(entry.id)
        except SubmissionError as e:
            log.warning("entry_cancel_failed entry_id=%s error=%s", entry.id, e)
            raise
        refreshed = self.gateway.show(entry.id)
        log.info("entry_cancelled entry_id=%s status=%s", entry.id, refreshed.status.value)
        return refreshed

    def delete(self, entry: JournalEntry) -> None:
        self.lifecycle.ensure_can_delete(entry)
        try:
            self.gateway.delete(entry.id)
        except SubmissionError as e:
            log.warning("entry_delete_failed entry_id=%s error=%s", entry.id, e)
            raise
        log.info("entry_deleted entry_id=%s", entry.id)
