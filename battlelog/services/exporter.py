from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Sequence

from ..fields import internal_fields
from ..fields.notes_encoding import encode_notes_for_storage
from ..formatting.date_formatters import (
    format_canonical_battle_date,
    format_filename_datetime,
    format_iso_date,
    format_iso_time,
)
from ..formatting.locale_config import DEFAULT_DISPLAY_LOCALE, resolve_display_separators
from ..formatting.number_scale import format_exact_number, format_large_number, has_scale_suffix
from ..models.field import DateField, Field, NumberField
from ..models.format_settings import CANONICAL_STORAGE_FORMAT, ImportFormatSettings
from ..models.import_result import DelimiterConflict, ExportResult
from ..models.record import Record
from .delimiter import CsvDelimiter, get_delimiter_string

logger = logging.getLogger(__name__)

"""Export codec: records -> delimited text.

Column order: internal fields (fixed order), then battleDate, then the rest
alphabetically by original header. Numbers are written either canonically
(period decimal, ungrouped; for storage) or localized (display locale
decimal separator, ungrouped; for user files). Values that contain the
delimiter are reported as conflicts but still written.
"""

__all__ = [
    "OutputFormat",
    "ExportConfig",
    "MAX_CONFLICT_EXAMPLES",
    "export_to_csv",
    "generate_export_filename",
]

MAX_CONFLICT_EXAMPLES = 3
BATTLE_DATE_KEY = "battleDate"


class OutputFormat(Enum):
    CANONICAL = "canonical"
    LOCALIZED = "localized"


@dataclass(frozen=True)
class ExportConfig:
    """Options for one export call.

    `output_format=None` writes every raw value unchanged.
    """
    delimiter: CsvDelimiter | str = CsvDelimiter.TAB
    custom_delimiter: str | None = None
    include_app_fields: bool = True
    output_format: OutputFormat | None = None
    display_locale: str = DEFAULT_DISPLAY_LOCALE


@dataclass(frozen=True)
class _Column:
    key: str
    header: str
    is_internal: bool


def _collect_columns(records: Sequence[Record]) -> list[_Column]:
    internal = [
        _Column(key, internal_fields.INTERNAL_FIELD_MAPPINGS[key], True)
        for key in internal_fields.INTERNAL_FIELD_ORDER
        if any(key in r.fields for r in records)
    ]

    game: dict[str, _Column] = {}
    for record in records:
        for key, f in record.fields.items():
            if internal_fields.is_internal_field(key) or key in game:
                continue
            game[key] = _Column(key, f.original_key, False)

    ordered = sorted(
        game.values(),
        key=lambda c: (c.key != BATTLE_DATE_KEY, c.header.casefold(), c.header),
    )
    return internal + ordered


def _internal_value(record: Record, key: str) -> str:
    f = record.fields.get(key)
    raw = f.raw_value if f is not None else ""
    if key == internal_fields.DATE:
        return raw or format_iso_date(record.timestamp)
    if key == internal_fields.TIME:
        return raw or format_iso_time(record.timestamp)
    if key == internal_fields.RUN_TYPE:
        return raw or record.run_type.value
    if key == internal_fields.NOTES:
        return encode_notes_for_storage(raw)
    return raw


def _resolve_number_format(cfg: ExportConfig) -> ImportFormatSettings | None:
    if cfg.output_format is OutputFormat.CANONICAL:
        return CANONICAL_STORAGE_FORMAT
    if cfg.output_format is OutputFormat.LOCALIZED:
        decimal_separator, _ = resolve_display_separators(cfg.display_locale)
        return ImportFormatSettings(decimal_separator=decimal_separator, thousands_separator="")
    return None


def _game_value(key: str, f: Field | None, number_format: ImportFormatSettings | None, cfg: ExportConfig) -> str:
    if f is None:
        return ""
    if key == BATTLE_DATE_KEY and isinstance(f, DateField) and cfg.output_format is OutputFormat.CANONICAL:
        return format_canonical_battle_date(f.value)
    if number_format is None or not isinstance(f, NumberField):
        return f.raw_value
    if f.value == 0 and not any(ch.isdigit() for ch in f.raw_value):
        return f.raw_value  # unparseable text in a numeric column
    if has_scale_suffix(f.raw_value):
        return format_large_number(f.value, number_format)
    return format_exact_number(f.value, number_format.decimal_separator)


def export_to_csv(records: Sequence[Record], config: ExportConfig | None = None) -> ExportResult:
    """Serialize records with the configured delimiter and number mode.

    Raises:
        ValueError: unknown delimiter name
    """
    cfg = config or ExportConfig()
    if not records:
        return ExportResult(csv_content="", conflicts=[], field_count=0, row_count=0)

    delimiter = get_delimiter_string(cfg.delimiter, cfg.custom_delimiter)
    columns = [c for c in _collect_columns(records) if cfg.include_app_fields or not c.is_internal]
    number_format = _resolve_number_format(cfg)

    conflicts: dict[str, DelimiterConflict] = {}
    lines = [delimiter.join(c.header for c in columns)]
    for record in records:
        values: list[str] = []
        for column in columns:
            if column.is_internal:
                value = _internal_value(record, column.key)
            else:
                value = _game_value(column.key, record.fields.get(column.key), number_format, cfg)
            if delimiter in value:
                conflict = conflicts.setdefault(
                    column.key, DelimiterConflict(field_name=column.key, original_key=column.header)
                )
                conflict.affected_row_count += 1
                if len(conflict.conflicting_values) < MAX_CONFLICT_EXAMPLES and value not in conflict.conflicting_values:
                    conflict.conflicting_values.append(value)
            values.append(value)
        lines.append(delimiter.join(values))

    if conflicts:
        logger.warning(
            "export: %d field(s) contain the delimiter %r: %s",
            len(conflicts), delimiter, ", ".join(c.original_key for c in conflicts.values()),
        )
    logger.debug("exported %d records, %d columns", len(records), len(columns))
    return ExportResult(
        csv_content="\n".join(lines),
        conflicts=list(conflicts.values()),
        field_count=len(columns),
        row_count=len(records),
    )


def generate_export_filename(run_count: int, now: datetime | None = None) -> str:
    """Suggested name for a user-facing export file.

    Args:
        run_count: Number of exported records
        now: Timestamp to embed (default: current local time)

    Returns:
        `tower_tracking_export_<count>_runs_<yyyy-MM-dd_HH-mm-ss>.csv`
    """
    stamp = format_filename_datetime(now or datetime.now())
    return f"tower_tracking_export_{run_count}_runs_{stamp}.csv"
