from __future__ import annotations

from dataclasses import dataclass

import requests

from stockjournal.config import GatewaySettings, get_gateway_settings
from stockjournal.repositories.http_gateway import HttpStockJournalGateway
from stockjournal.services.composition_service import EntryComposer
from stockjournal.services.excel_service import ExcelService
from stockjournal.services.journal_service import StockJournalService
from stockjournal.services.lifecycle_service import EntryLifecycleService
from stockjournal.services.search_scheduler import DebouncedScheduler
from stockjournal.services.submission_service import SubmissionService


@dataclass(frozen=True)
class AppContainer:
    settings: GatewaySettings
    gateway: HttpStockJournalGateway
    journal: StockJournalService
    submissions: SubmissionService
    lifecycle: EntryLifecycleService
    excel: ExcelService

    def compose(self, entry_type, journal_date=None) -> EntryComposer:
        draft = self.journal.start_entry(entry_type, journal_date)
        return EntryComposer(draft, DebouncedScheduler(), debounce_seconds=self.settings.search_debounce_seconds)

    def compose_existing(self, entry_id: int) -> EntryComposer:
        draft = self.journal.edit_entry(entry_id)
        return EntryComposer(draft, DebouncedScheduler(), debounce_seconds=self.settings.search_debounce_seconds)


def build_container(settings: GatewaySettings | None = None, session: requests.Session | None = None) -> AppContainer:
    settings = settings or get_gateway_settings()
    gateway = HttpStockJournalGateway(settings, session=session)

    return AppContainer(
        settings=settings,
        gateway=gateway,
        journal=StockJournalService(gateway),
        submissions=SubmissionService(gateway),
        lifecycle=EntryLifecycleService(gateway),
        excel=ExcelService(),
    )
