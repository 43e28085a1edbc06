from __future__ import annotations

import re
from typing import Final

from ..formatting.date_formatters import construct_date, parse_battle_date
from ..formatting.locale_config import DEFAULT_DISPLAY_LOCALE
from ..formatting.number_scale import format_large_number, parse_shorthand_number
from ..models.field import DataType, DateField, DurationField, Field, NumberField, StringField
from ..models.format_settings import DEFAULT_IMPORT_FORMAT, ImportFormatSettings
from .notes_encoding import decode_notes_from_storage

"""Build one typed field from a header and its raw cell text.

Type resolution, first match wins:

1. exact lower-cased header (`_date`, `notes`, `battle date`, ...)
2. `tier` whose value carries a `+` (`10+`) stays a string
3. header containing `time` -> duration, containing `date` -> date
4. anything else is a number
"""

__all__ = [
    "resolve_field_type",
    "parse_duration",
    "format_duration",
    "create_field",
    "create_internal_field",
]

_EXACT_FIELD_TYPES: Final[dict[str, DataType]] = {
    "_date": DataType.DATE,
    "date": DataType.DATE,
    # clock fragments such as 13:14:00 are kept verbatim
    "_time": DataType.STRING,
    "time": DataType.STRING,
    "_notes": DataType.STRING,
    "notes": DataType.STRING,
    "_runtype": DataType.STRING,
    "runtype": DataType.STRING,
    "_run_type": DataType.STRING,
    "_run type": DataType.STRING,
    "run_type": DataType.STRING,
    "run type": DataType.STRING,
    "_rank": DataType.STRING,
    "battle date": DataType.DATE,
    "battledate": DataType.DATE,
    "battle_date": DataType.DATE,
    "killed by": DataType.STRING,
}

_PATTERN_FIELD_TYPES: Final[tuple[tuple[str, DataType], ...]] = (
    ("time", DataType.DURATION),
    ("date", DataType.DATE),
)

_NOTES_KEYS = frozenset({"_notes", "notes"})

_DURATION_RE = re.compile(r"(?:(\d+)d)?\s*(?:(\d+)h)?\s*(?:(\d+)m)?\s*(?:(\d+)s)?", re.IGNORECASE)


def resolve_field_type(original_key: str, raw_value: str | None = None) -> DataType:
    """Infer the data type of a column.

    Known headers map directly. A `Tier` cell with `+` (tournament tier) is
    kept as a string. Otherwise `time`/`date` in the header name pick
    duration/date, and everything else is a number.

    Args:
        original_key: Header display name
        raw_value: Cell text (only consulted for the tier column)

    Returns:
        DataType for the field
    """
    lower_key = original_key.strip().lower()
    exact = _EXACT_FIELD_TYPES.get(lower_key)
    if exact is not None:
        return exact
    if lower_key == "tier" and raw_value and "+" in raw_value:
        return DataType.STRING
    for pattern, data_type in _PATTERN_FIELD_TYPES:
        if pattern in lower_key:
            return data_type
    return DataType.NUMBER


def parse_duration(text: str | None) -> int:
    """`7H 45M 35S` or `1d 13h 24m 51s` -> seconds. Unparseable text is 0."""
    if not text or not isinstance(text, str):
        return 0
    match = _DURATION_RE.match(text.strip())
    if match is None:
        return 0
    days, hours, minutes, seconds = (int(group or 0) for group in match.groups())
    return days * 86400 + hours * 3600 + minutes * 60 + seconds


def format_duration(seconds: int) -> str:
    """Seconds -> `1d 2h 3m 4s`, omitting zero units (`0s` for zero)."""
    seconds = int(seconds)
    days, rest = divmod(seconds, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    parts = [f"{n}{unit}" for n, unit in ((days, "d"), (hours, "h"), (minutes, "m"), (secs, "s")) if n > 0]
    return " ".join(parts) or "0s"


def create_field(
    original_key: str,
    raw_value: str,
    fmt: ImportFormatSettings | None = None,
    display_locale: str = DEFAULT_DISPLAY_LOCALE,
) -> Field:
    """Create a typed field with value, raw and display representations.

    Date values that cannot be parsed degrade to a string field. Notes are
    decoded here and the decoded text becomes `raw_value`, so a later export
    re-encodes them exactly once.
    """
    fmt = fmt or DEFAULT_IMPORT_FORMAT
    data_type = resolve_field_type(original_key, raw_value)

    if data_type is DataType.DURATION:
        seconds = parse_duration(raw_value)
        return DurationField(raw_value, format_duration(seconds), original_key, value=seconds)

    if data_type is DataType.DATE:
        parsed = parse_battle_date(raw_value, fmt.date_format) or construct_date(raw_value)
        if parsed is not None:
            return DateField(raw_value, raw_value, original_key, value=parsed)
        return StringField(raw_value, raw_value, original_key, value=raw_value)

    if data_type is DataType.NUMBER:
        number = parse_shorthand_number(raw_value, fmt)
        return NumberField(
            raw_value,
            format_large_number(number, display_locale=display_locale),
            original_key,
            value=number,
        )

    text = raw_value
    if original_key.strip().lower() in _NOTES_KEYS:
        text = decode_notes_from_storage(raw_value)
    return StringField(text, text, original_key, value=text)


def create_internal_field(original_key: str, value: str) -> StringField:
    """App-generated metadata is always a plain string field."""
    return StringField(value, value, original_key, value=value)
