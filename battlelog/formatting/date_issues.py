from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Mapping, Sequence

from ..fields import internal_fields
from ..models.date_errors import BattleDateValidationError
from ..models.field import DateField, Field
from ..models.import_result import DateValidationWarning
from ..models.record import Record
from .date_formatters import construct_date, format_canonical_battle_date

logger = logging.getLogger(__name__)

"""Date issue detection and pure fix functions.

A record has a date issue when its `battleDate` field is missing or was
flagged invalid at import. Fix source priority: the record's own `_date` and
`_time` fields, then a caller-supplied date. Fixes return new records.
"""

__all__ = [
    "DateIssueType",
    "DateFixSource",
    "DateDerivationResult",
    "DateIssueInfo",
    "CategorizedWarnings",
    "BulkFixResult",
    "BATTLE_DATE_HEADER",
    "try_derive_from_internal_fields",
    "detect_date_issue",
    "create_battle_date_field",
    "apply_date_fix",
    "categorize_warnings",
    "apply_date_derivation_fixes",
    "count_warnings_by_fixability",
]

BATTLE_DATE_HEADER = "Battle Date"


class DateIssueType(Enum):
    MISSING = "missing"
    INVALID = "invalid"


class DateFixSource(Enum):
    INTERNAL_FIELDS = "internal-fields"
    USER_SELECTED = "user-selected"


@dataclass(frozen=True)
class DateDerivationResult:
    success: bool
    date: datetime | None = None
    date_value: str | None = None
    time_value: str | None = None


@dataclass(frozen=True)
class DateIssueInfo:
    has_issue: bool
    issue_type: DateIssueType | None = None
    validation_error: BattleDateValidationError | None = None
    is_fixable: bool = False
    fix_source: DateFixSource | None = None
    derived_date: datetime | None = None
    date_field_value: str | None = None  # raw _date, for display
    time_field_value: str | None = None  # raw _time, for display


@dataclass(frozen=True)
class CategorizedWarnings:
    fixable: list[DateValidationWarning]
    unfixable: list[DateValidationWarning]


@dataclass(frozen=True)
class BulkFixResult:
    fixed_records: list[Record]
    fixed_count: int
    unfixable_count: int


def try_derive_from_internal_fields(fields: Mapping[str, Field]) -> DateDerivationResult:
    """Build a datetime from `_date` + `_time`; both must be present."""
    date_field = fields.get(internal_fields.DATE)
    time_field = fields.get(internal_fields.TIME)
    date_value = date_field.raw_value if date_field is not None else None
    time_value = time_field.raw_value if time_field is not None else None

    if not date_value or not time_value:
        return DateDerivationResult(False, None, date_value, time_value)

    derived = construct_date(date_value, time_value)
    return DateDerivationResult(derived is not None, derived, date_value, time_value)


def detect_date_issue(record: Record, user_selected_date: datetime | None = None) -> DateIssueInfo:
    """Decide whether a record has a missing or invalid battle date and how to fix it.

    A date derived from the internal `_date`/`_time` fields wins over a date
    picked by the user.

    Args:
        record: Parsed record
        user_selected_date: Replacement date chosen by the user, if any

    Returns:
        DateIssueInfo; `is_fixable` is True only when a replacement exists
    """
    has_battle_date = "battleDate" in record.fields
    if has_battle_date and record.date_validation_error is None:
        return DateIssueInfo(has_issue=False)

    issue_type = DateIssueType.INVALID if has_battle_date else DateIssueType.MISSING
    derivation = try_derive_from_internal_fields(record.fields)

    if derivation.success:
        return DateIssueInfo(
            has_issue=True,
            issue_type=issue_type,
            validation_error=record.date_validation_error,
            is_fixable=True,
            fix_source=DateFixSource.INTERNAL_FIELDS,
            derived_date=derivation.date,
            date_field_value=derivation.date_value,
            time_field_value=derivation.time_value,
        )

    if user_selected_date is not None:
        return DateIssueInfo(
            has_issue=True,
            issue_type=issue_type,
            validation_error=record.date_validation_error,
            is_fixable=True,
            fix_source=DateFixSource.USER_SELECTED,
            derived_date=user_selected_date,
            date_field_value=derivation.date_value,
            time_field_value=derivation.time_value,
        )

    return DateIssueInfo(
        has_issue=True,
        issue_type=issue_type,
        validation_error=record.date_validation_error,
        date_field_value=derivation.date_value,
        time_field_value=derivation.time_value,
    )


def create_battle_date_field(value: datetime) -> DateField:
    """Fresh battleDate field whose raw text is the canonical form."""
    canonical = format_canonical_battle_date(value)
    return DateField(canonical, canonical, BATTLE_DATE_HEADER, value=value)


def apply_date_fix(record: Record, derived_date: datetime) -> Record:
    """Return a copy with a canonical battleDate, new timestamp and no error."""
    fields = dict(record.fields)
    fields["battleDate"] = create_battle_date_field(derived_date)
    return replace(record, fields=fields, timestamp=derived_date, date_validation_error=None)


def _is_fixable(warning: DateValidationWarning) -> bool:
    return warning.is_fixable and warning.derived_battle_date is not None


def categorize_warnings(warnings: Sequence[DateValidationWarning]) -> CategorizedWarnings:
    """Split warnings into those with a derivable battle date and the rest."""
    fixable = [w for w in warnings if _is_fixable(w)]
    unfixable = [w for w in warnings if not _is_fixable(w)]
    return CategorizedWarnings(fixable, unfixable)


def apply_date_derivation_fixes(
    records: Sequence[Record], warnings: Sequence[DateValidationWarning]
) -> BulkFixResult:
    """Apply every fixable warning to its record.

    Warnings are matched to records by record id when they carry one,
    otherwise by position (row number = index + 1).
    """
    by_id: dict[str, DateValidationWarning] = {}
    by_row: dict[int, DateValidationWarning] = {}
    unfixable_count = 0
    for warning in warnings:
        if not _is_fixable(warning):
            unfixable_count += 1
        elif warning.record_id is not None:
            by_id[warning.record_id] = warning
        else:
            by_row[warning.row_number] = warning

    fixed_records: list[Record] = []
    fixed_count = 0
    for index, record in enumerate(records):
        warning = by_id.get(record.id) or by_row.get(index + 1)
        if warning is not None and warning.derived_battle_date is not None:
            fixed_records.append(apply_date_fix(record, warning.derived_battle_date))
            fixed_count += 1
        else:
            fixed_records.append(record)

    logger.debug("applied %d date fixes, %d unfixable", fixed_count, unfixable_count)
    return BulkFixResult(fixed_records, fixed_count, unfixable_count)


def count_warnings_by_fixability(warnings: Sequence[DateValidationWarning]) -> tuple[int, int]:
    """Return (fixable_count, unfixable_count)."""
    fixable = sum(1 for w in warnings if _is_fixable(w))
    return fixable, len(warnings) - fixable
