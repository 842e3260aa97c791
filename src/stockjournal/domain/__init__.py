from .models import (
    EntryStatus,
    EntryType,
    JournalEntry,
    JournalItem,
    MovementType,
    Product,
    SubmitAction,
)
from .errors import (
    AppError,
    EntryLockedError,
    NotFoundError,
    SubmissionError,
    TransitionError,
    ValidationError,
)
from .catalog import ProductStockCatalog
from .movement import MovementLine
from .builder import EntryTotals, JournalEntryBuilder
from .transfer import TransferBalancer
from .validation import IssueKind, ValidationIssue

__all__ = [
    "EntryStatus",
    "EntryType",
    "JournalEntry",
    "JournalItem",
    "MovementType",
    "Product",
    "SubmitAction",
    "AppError",
    "EntryLockedError",
    "NotFoundError",
    "SubmissionError",
    "TransitionError",
    "ValidationError",
    "ProductStockCatalog",
    "MovementLine",
    "EntryTotals",
    "JournalEntryBuilder",
    "TransferBalancer",
    "IssueKind",
    "ValidationIssue",
]
