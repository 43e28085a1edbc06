from __future__ import annotations

import re
from datetime import datetime
from typing import Mapping

from dateutil import parser as date_parser

from ..models.field import Field
from ..models.format_settings import DEFAULT_IMPORT_FORMAT, DateFormat
from .locale_config import ENGLISH_MONTH_ABBREVIATIONS, MONTH_MAPPINGS

"""Date/time codec for battle dates and internal date/time fragments.

ISO helpers are locale independent and used for storage keys and the
internal `_date` / `_time` fields. The canonical battle date form
(`Oct 14, 2025 13:14`) is always English month-first, 24-hour.
"""

__all__ = [
    "BATTLE_DATE_PATTERN",
    "format_iso_date",
    "format_iso_time",
    "format_iso_datetime_minute",
    "format_duration_for_key",
    "format_filename_datetime",
    "format_canonical_battle_date",
    "derive_date_time_from_battle_date",
    "lookup_month",
    "parse_generic_date",
    "parse_battle_date",
    "construct_date",
    "parse_timestamp_from_fields",
]

# month token, optional period, day, optional comma, year, hour:minute
BATTLE_DATE_PATTERN = re.compile(
    r"^(\S+?)\.?\s+(\d{1,2}),?\s+(\d{4})\s+(\d{1,2}):(\d{2})", re.IGNORECASE
)
_YEAR_RE = re.compile(r"\d{4}")
_DEFAULT_PARSE_BASE = datetime(1900, 1, 1)


def format_iso_date(value: datetime) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def format_iso_time(value: datetime) -> str:
    return f"{value.hour:02d}:{value.minute:02d}:{value.second:02d}"


def format_iso_datetime_minute(value: datetime) -> str:
    """yyyy-MM-ddTHH:mm, used for composite keys at minute precision."""
    return f"{format_iso_date(value)}T{value.hour:02d}:{value.minute:02d}"


def format_duration_for_key(seconds: int) -> str:
    """Format seconds as `7h 45m 33s`, always with all three units."""
    seconds = int(seconds)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours}h {minutes}m {secs}s"


def format_filename_datetime(value: datetime) -> str:
    """yyyy-MM-dd_HH-mm-ss (no colons, safe for file names)."""
    return f"{format_iso_date(value)}_{value.hour:02d}-{value.minute:02d}-{value.second:02d}"


def format_canonical_battle_date(value: datetime) -> str:
    """Render the storage form `Oct 14, 2025 13:14`; never localized."""
    month = ENGLISH_MONTH_ABBREVIATIONS[value.month - 1]
    return f"{month} {value.day}, {value.year} {value.hour:02d}:{value.minute:02d}"


def derive_date_time_from_battle_date(value: datetime) -> tuple[str, str]:
    """Split a battle date into the `_date` and `_time` internal field values."""
    return format_iso_date(value), format_iso_time(value)


def lookup_month(token: str, date_format: DateFormat) -> int | None:
    """Resolve a month token (with or without trailing period) to 1-12."""
    key = token.lower().rstrip(".")
    return MONTH_MAPPINGS[date_format].get(key)


def parse_generic_date(text: str) -> datetime | None:
    """Lenient parse for text that carries a four-digit year; None on failure."""
    if not _YEAR_RE.search(text):
        return None
    try:
        parsed = date_parser.parse(text, default=_DEFAULT_PARSE_BASE)
    except (ValueError, OverflowError):
        return None
    return parsed.replace(tzinfo=None)


def _parse_with_format(text: str, date_format: DateFormat) -> datetime | None:
    match = BATTLE_DATE_PATTERN.match(text)
    if match is None:
        return None
    month_token, day, year, hour, minute = match.groups()
    month = lookup_month(month_token, date_format)
    if month is None:
        return None
    try:
        return datetime(int(year), month, int(day), int(hour), int(minute))
    except ValueError:
        return None


def parse_battle_date(
    battle_date: str | None,
    date_format: DateFormat | str = DEFAULT_IMPORT_FORMAT.date_format,
) -> datetime | None:
    """Parse a battle date, returning None when it cannot be read.

    Month-first input is tried with generic date parsing first; every scheme
    then falls back to the month-table grammar
    `<month>[.] <day>[,] <year> <hour>:<minute>`.
    """
    if not battle_date or not isinstance(battle_date, str):
        return None
    date_format = DateFormat(date_format)
    text = battle_date.strip()

    if date_format is DateFormat.MONTH_FIRST:
        parsed = parse_generic_date(text)
        if parsed is not None:
            return parsed
    return _parse_with_format(text, date_format)


def construct_date(date_str: str | None, time_str: str | None = None) -> datetime | None:
    """Combine `2025-10-14` and `13:14:00` into a datetime.

    A missing time means midnight. Returns None if the pair cannot be parsed.
    """
    if not date_str or not date_str.strip():
        return None
    combined = f"{date_str.strip()} {time_str.strip()}" if time_str and time_str.strip() else date_str.strip()
    try:
        parsed = date_parser.parse(combined, default=_DEFAULT_PARSE_BASE)
    except (ValueError, OverflowError):
        return None
    return parsed.replace(tzinfo=None)


def parse_timestamp_from_fields(
    fields: Mapping[str, Field],
    fallback: datetime | None = None,
    date_format: DateFormat | str = DEFAULT_IMPORT_FORMAT.date_format,
) -> datetime:
    """Resolve the best timestamp for a record.

    Priority: battleDate, then `_date`/`_time` (or legacy `date`/`time`),
    then `fallback`, then the current time.
    """
    battle_date_field = fields.get("battleDate")
    if battle_date_field is not None:
        parsed = parse_battle_date(battle_date_field.raw_value, date_format)
        if parsed is not None:
            return parsed

    date_field = fields.get("_date") or fields.get("date")
    time_field = fields.get("_time") or fields.get("time")
    if date_field is not None:
        constructed = construct_date(
            date_field.raw_value, time_field.raw_value if time_field is not None else None
        )
        if constructed is not None:
            return constructed

    return fallback if fallback is not None else datetime.now()
