from .journal_service import StockJournalService
from .submission_service import SubmissionService
from .lifecycle_service import EntryLifecycleService
from .composition_service import EntryComposer
from .search_scheduler import DebouncedScheduler
from .excel_service import ExcelService

__all__ = [
    "StockJournalService",
    "SubmissionService",
    "EntryLifecycleService",
    "EntryComposer",
    "DebouncedScheduler",
    "ExcelService",
]
