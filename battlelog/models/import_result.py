from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .date_errors import BattleDateValidationError
from .record import Record

"""Structured results of the parse and export entry points.

None of these values are persisted; they are produced once per call and
handed to the caller (UI, CLI) for rendering.
"""

__all__ = [
    "FieldStatus",
    "SimilarityType",
    "FieldMapping",
    "SimilarField",
    "FieldMappingReport",
    "DateWarningContext",
    "DateValidationWarning",
    "ParseResult",
    "DelimiterConflict",
    "ExportResult",
]


class FieldStatus(Enum):
    EXACT_MATCH = "exact-match"
    NEW_FIELD = "new-field"
    SIMILAR_FIELD = "similar-field"


class SimilarityType(Enum):
    EXACT = "exact"
    CASE_VARIATION = "case-variation"
    LEVENSHTEIN = "levenshtein"


@dataclass(frozen=True)
class FieldMapping:
    """Classification of one input header."""
    csv_header: str
    field_key: str  # camelCase key after legacy migration
    supported: bool  # key is in the supported field catalogue
    status: FieldStatus
    similar_to: str | None = None
    similarity_type: SimilarityType | None = None
    is_internal: bool = False


@dataclass(frozen=True)
class SimilarField:
    imported_field: str
    existing_field: str
    similarity_type: SimilarityType


@dataclass(frozen=True)
class FieldMappingReport:
    mapped_fields: list[FieldMapping] = field(default_factory=list)
    new_fields: list[str] = field(default_factory=list)
    similar_fields: list[SimilarField] = field(default_factory=list)
    unsupported_fields: list[str] = field(default_factory=list)  # not in the catalogue, still imported


@dataclass(frozen=True)
class DateWarningContext:
    """Hints that help a user locate the offending run."""
    tier: float | None = None
    wave: float | None = None
    duration: str | None = None


@dataclass(frozen=True)
class DateValidationWarning:
    """A record whose battle date failed validation.

    The record still imports; `derived_battle_date` is only a proposal and is
    never applied by the parser itself.
    """
    row_number: int  # 1-based data row (header excluded)
    raw_value: str
    error: BattleDateValidationError
    context: DateWarningContext
    is_fixable: bool
    fallback_used: str = "import-time"
    date_field_value: str | None = None
    time_field_value: str | None = None
    derived_battle_date: datetime | None = None
    record_id: str | None = None  # id of the record the warning belongs to


@dataclass(frozen=True)
class ParseResult:
    records: list[Record]
    rejected_count: int
    errors: list[str]
    field_mapping_report: FieldMappingReport
    date_warnings: list[DateValidationWarning] | None = None
    missing_battle_date_column: bool = False


@dataclass
class DelimiterConflict:
    """Values of one field that contain the export delimiter."""
    field_name: str
    original_key: str
    conflicting_values: list[str] = field(default_factory=list)  # up to 3 examples
    affected_row_count: int = 0


@dataclass(frozen=True)
class ExportResult:
    csv_content: str
    conflicts: list[DelimiterConflict]
    field_count: int
    row_count: int
