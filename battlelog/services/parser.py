from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from ..fields import internal_fields
from ..fields.builder import create_field, create_internal_field
from ..fields.normalizer import normalize_header, strip_quotes
from ..fields.supported_fields import SUPPORTED_FIELDS
from ..formatting.date_formatters import derive_date_time_from_battle_date, parse_timestamp_from_fields
from ..formatting.date_issues import try_derive_from_internal_fields
from ..formatting.date_validation import validate_battle_date
from ..formatting.locale_config import DEFAULT_DISPLAY_LOCALE
from ..models.date_errors import BattleDateValidationError
from ..models.field import Field, NumberField
from ..models.format_settings import DEFAULT_IMPORT_FORMAT, ImportFormatSettings
from ..models.import_result import (
    DateValidationWarning,
    DateWarningContext,
    FieldMappingReport,
    ParseResult,
)
from ..models.record import Record
from .delimiter import detect_delimiter
from .field_mapping import create_field_mapping_report, extract_key_stats

logger = logging.getLogger(__name__)

"""Row parser: raw delimited text -> records, mapping report, date warnings.

Never raises for malformed data. Rows with more values than headers and
rows whose parsing throws are rejected individually; everything else is
parsed in input order. Date problems never reject a row, they become
warnings carrying a proposed fix when one can be derived.
"""

__all__ = [
    "ParseConfig",
    "parse_csv",
    "known_fields_from",
]

BATTLE_DATE_KEY = "battleDate"


@dataclass(frozen=True)
class ParseConfig:
    """Options for one parse call.

    Attributes:
        delimiter: Field separator; detected from the header line when None
        import_format: Separators and month scheme of the text
        known_fields: Header names seen in earlier imports (similarity corpus)
        supported_fields: Catalogue of recognized field keys
        fallback_timestamp: Used when a row carries no usable date
        display_locale: Locale for display values
    """
    delimiter: str | None = None
    import_format: ImportFormatSettings = DEFAULT_IMPORT_FORMAT
    known_fields: tuple[str, ...] = ()
    supported_fields: frozenset[str] = SUPPORTED_FIELDS
    fallback_timestamp: datetime | None = None
    display_locale: str = DEFAULT_DISPLAY_LOCALE


@dataclass
class _ParseContext:
    delimiter: str
    headers: list[str]
    column_keys: list[str]
    battle_date_index: int | None
    config: ParseConfig
    records: list[Record] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[DateValidationWarning] = field(default_factory=list)
    rejected: int = 0


def _empty_result() -> ParseResult:
    return ParseResult(
        records=[],
        rejected_count=0,
        errors=["No data provided"],
        field_mapping_report=FieldMappingReport(),
    )


def _split_line(line: str, delimiter: str) -> list[str]:
    return [strip_quotes(value) for value in line.split(delimiter)]


def _number_or_none(f: Field | None) -> float | None:
    return f.value if isinstance(f, NumberField) else None


def _warning_context(fields: dict[str, Field]) -> DateWarningContext:
    real_time = fields.get("realTime")
    return DateWarningContext(
        tier=_number_or_none(fields.get("tier")),
        wave=_number_or_none(fields.get("wave")),
        duration=real_time.raw_value if real_time is not None else None,
    )


def _check_battle_date(
    fields: dict[str, Field], values: list[str], row_number: int, record_id: str, ctx: _ParseContext
) -> tuple[DateValidationWarning | None, BattleDateValidationError | None]:
    """Validate the battle date column; derive `_date`/`_time` on success.

    Returns the warning (or None) and the validation error to carry on the
    record.
    """
    raw = values[ctx.battle_date_index] if ctx.battle_date_index < len(values) else ""
    result = validate_battle_date(raw, ctx.config.import_format.date_format, warn_future_dates=False)

    if result.success:
        if internal_fields.DATE not in fields or internal_fields.TIME not in fields:
            date_text, time_text = derive_date_time_from_battle_date(result.date)
            fields[internal_fields.DATE] = create_internal_field("Date", date_text)
            fields[internal_fields.TIME] = create_internal_field("Time", time_text)
        return None, None

    logger.debug("row %d: battle date %r rejected (%s)", row_number, raw, result.error.code.value)
    derivation = try_derive_from_internal_fields(fields)
    warning = DateValidationWarning(
        row_number=row_number,
        raw_value=raw,
        error=result.error,
        context=_warning_context(fields),
        is_fixable=derivation.success,
        date_field_value=derivation.date_value,
        time_field_value=derivation.time_value,
        derived_battle_date=derivation.date,
        record_id=record_id,
    )
    return warning, result.error


def _parse_row(values: list[str], row_number: int, ctx: _ParseContext) -> tuple[Record, DateValidationWarning | None]:
    cfg = ctx.config
    fields: dict[str, Field] = {}
    for index, key in enumerate(ctx.column_keys):
        raw = values[index] if index < len(values) else ""
        if not raw:
            continue
        fields[key] = create_field(ctx.headers[index], raw, cfg.import_format, cfg.display_locale)

    record_id = uuid.uuid4().hex
    warning, validation_error = None, None
    if ctx.battle_date_index is not None:
        warning, validation_error = _check_battle_date(fields, values, row_number, record_id, ctx)

    record = Record(
        id=record_id,
        timestamp=parse_timestamp_from_fields(fields, cfg.fallback_timestamp, cfg.import_format.date_format),
        fields=fields,
        date_validation_error=validation_error,
        **extract_key_stats(fields),
    )
    return record, warning


def parse_csv(text: str | None, config: ParseConfig | None = None) -> ParseResult:
    """Parse pasted or uploaded delimited text.

    The first line holds the headers; the delimiter is detected from it
    unless `config.delimiter` is set. Row errors use the 1-based line
    number (`Row 3: ...`), warnings the 1-based data row number.
    """
    cfg = config or ParseConfig()
    if not text or not text.strip():
        return _empty_result()

    lines = text.strip().split("\n")
    header_line = lines[0].rstrip("\r")
    delimiter = cfg.delimiter or detect_delimiter(header_line)
    headers = _split_line(header_line, delimiter)
    column_keys = [normalize_header(h) for h in headers]
    battle_date_index = column_keys.index(BATTLE_DATE_KEY) if BATTLE_DATE_KEY in column_keys else None

    ctx = _ParseContext(delimiter, headers, column_keys, battle_date_index, cfg)
    report = create_field_mapping_report(headers, cfg.known_fields, cfg.supported_fields)

    for i in range(1, len(lines)):
        line = lines[i].rstrip()
        if not line.strip():
            continue
        try:
            values = _split_line(line, delimiter)
            if len(values) > len(headers):
                ctx.errors.append(
                    f"Row {i + 1}: Too many columns (expected max {len(headers)}, got {len(values)})"
                )
                ctx.rejected += 1
                logger.warning("row %d rejected: %d values for %d headers", i + 1, len(values), len(headers))
                continue
            record, warning = _parse_row(values, i, ctx)
        except Exception as exc:  # one bad row never aborts the parse
            ctx.errors.append(f"Row {i + 1}: {exc}")
            ctx.rejected += 1
            logger.warning("row %d rejected: %s", i + 1, exc)
            continue
        ctx.records.append(record)
        if warning is not None:
            ctx.warnings.append(warning)

    logger.debug(
        "parsed %d records (%d rejected, %d date warnings)",
        len(ctx.records), ctx.rejected, len(ctx.warnings),
    )
    return ParseResult(
        records=ctx.records,
        rejected_count=ctx.rejected,
        errors=ctx.errors,
        field_mapping_report=report,
        date_warnings=ctx.warnings or None,
        missing_battle_date_column=battle_date_index is None,
    )


def known_fields_from(headers: Iterable[str]) -> tuple[str, ...]:
    """Deduplicated header names, preserving first-seen order."""
    return tuple(dict.fromkeys(h for h in headers if h))
