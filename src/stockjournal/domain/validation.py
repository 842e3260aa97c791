"""
Pre-submission checks for journal entries.

Pure functions with no I/O. Every check collects issues instead of stopping
at the first one, so a caller can present the complete list; an empty list
means the entry may be submitted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional

from stockjournal.domain.models import MovementType


class IssueKind(str, Enum):
    MISSING_FIELD = "missing_field"
    INVALID_QUANTITY = "invalid_quantity"
    INVALID_RATE = "invalid_rate"
    INSUFFICIENT_STOCK = "insufficient_stock"
    UNBALANCED_TRANSFER = "unbalanced_transfer"


@dataclass(frozen=True)
class ValidationIssue:
    kind: IssueKind
    message: str
    local_id: Optional[str] = None
    field_name: Optional[str] = None
    details: dict = field(default_factory=dict, compare=False)


def insufficient_stock(
    local_id: str,
    product_name: str,
    available: Decimal,
    requested: Decimal,
    unit: str,
    verb: str = "deduct",
) -> ValidationIssue:
    unit_suffix = f" {unit}" if unit else ""
    return ValidationIssue(
        kind=IssueKind.INSUFFICIENT_STOCK,
        message=(
            f"{product_name} has only {available}{unit_suffix} available. "
            f"Cannot {verb} {requested}{unit_suffix}."
        ),
        local_id=local_id,
        field_name="quantity",
        details={"product_name": product_name, "available": available, "requested": requested, "unit": unit},
    )


def unbalanced_transfer(from_total: Decimal, to_total: Decimal) -> ValidationIssue:
    return ValidationIssue(
        kind=IssueKind.UNBALANCED_TRANSFER,
        message=f"Total OUT quantity ({from_total}) must equal total IN quantity ({to_total}).",
        details={"from_total": from_total, "to_total": to_total},
    )


def check_header(journal_date: Optional[date]) -> list[ValidationIssue]:
    if journal_date is None:
        return [ValidationIssue(IssueKind.MISSING_FIELD, "Journal date is required.", field_name="journal_date")]
    return []


def check_has_lines(selected_count: int) -> list[ValidationIssue]:
    if selected_count == 0:
        return [ValidationIssue(IssueKind.MISSING_FIELD, "Add at least one item with a product.", field_name="items")]
    return []


def check_lines(lines: Iterable, section: str = "") -> list[ValidationIssue]:
    """Check every line that has a product selected.

    Lines without a product are transient UI state and are ignored here.
    ``section`` names the transfer side in messages ("FROM"/"TO"). Any Out
    line with known stock is held to the stock on hand, whatever the entry
    type; unknown stock is left to the server.
    """
    where = f" in {section} section" if section else ""
    verb = "transfer" if section else "deduct"
    issues: list[ValidationIssue] = []
    for line in lines:
        if not line.has_product:
            continue
        name = line.product_name or f"product #{line.product_id}"
        if line.movement_type is None:
            issues.append(ValidationIssue(
                IssueKind.MISSING_FIELD,
                f"Select movement type for {name}{where}.",
                local_id=line.local_id,
                field_name="movement_type",
            ))
        if line.quantity <= 0:
            issues.append(ValidationIssue(
                IssueKind.INVALID_QUANTITY,
                f"Enter quantity for {name}{where}.",
                local_id=line.local_id,
                field_name="quantity",
            ))
        if line.rate <= 0:
            issues.append(ValidationIssue(
                IssueKind.INVALID_RATE,
                f"Enter rate for {name}{where}.",
                local_id=line.local_id,
                field_name="rate",
            ))
        if (
            line.movement_type is MovementType.OUT
            and line.stock_before is not None
            and line.quantity > line.stock_before
        ):
            issues.append(insufficient_stock(line.local_id, name, line.stock_before, line.quantity, line.unit, verb))
    return issues
