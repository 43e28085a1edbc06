from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping

from ..fields.normalizer import normalize_header
from ..models.format_settings import DateFormat, ImportFormatSettings

"""Detect when pasted data disagrees with the configured import format.

Only a few canary columns are inspected: coins earned and damage dealt for
the decimal separator (they never carry currency glyphs) and the battle
date for the month-name scheme.
"""

__all__ = [
    "FormatMismatchResult",
    "detect_decimal_separator_from_value",
    "detect_date_format_from_value",
    "detect_format_mismatch",
]

_COMMA_DECIMAL_RE = re.compile(r"\d,\d{1,2}[KMBTqQsSONDa-j]", re.IGNORECASE)
_PERIOD_DECIMAL_RE = re.compile(r"\d\.\d+[KMBTqQsSONDa-j]", re.IGNORECASE)
_CAPITALIZED_MONTH_RE = re.compile(r"^[A-Z][a-z]{2}\s+\d")
_LOWERCASE_MONTH_RE = re.compile(r"^\S+\.?\s+\d")

_NUMBER_CANARIES = ("coinsEarned", "damageDealt")
_DATE_CANARY = "battleDate"


@dataclass(frozen=True)
class FormatMismatchResult:
    number_mismatch: bool
    date_mismatch: bool
    detected_decimal_separator: str | None
    detected_date_format: DateFormat | None


def detect_decimal_separator_from_value(value: str | None) -> str | None:
    """`43,91T` -> `,`; `43.91T` -> `.`; None when there is no decimal part."""
    if not value:
        return None
    if _COMMA_DECIMAL_RE.search(value):
        return ","
    if _PERIOD_DECIMAL_RE.search(value):
        return "."
    return None


def detect_date_format_from_value(value: str | None) -> DateFormat | None:
    if not value:
        return None
    trimmed = value.strip()
    if _CAPITALIZED_MONTH_RE.match(trimmed):
        return DateFormat.MONTH_FIRST
    first = trimmed[:1]
    if first and first.islower() and _LOWERCASE_MONTH_RE.match(trimmed):
        return DateFormat.MONTH_FIRST_LOWERCASE
    return None


def detect_format_mismatch(
    raw_row: Mapping[str, str], settings: ImportFormatSettings
) -> FormatMismatchResult:
    """Compare one raw row (header -> cell text) with the import settings.

    Headers are matched by their normalized key, so `Coins earned`,
    `coins_earned` and `coinsEarned` are all recognized.
    """
    by_key = {normalize_header(header): value for header, value in raw_row.items()}

    detected_separator = None
    for key in _NUMBER_CANARIES:
        detected_separator = detect_decimal_separator_from_value(by_key.get(key))
        if detected_separator is not None:
            break
    detected_date_format = detect_date_format_from_value(by_key.get(_DATE_CANARY))

    return FormatMismatchResult(
        number_mismatch=detected_separator is not None and detected_separator != settings.decimal_separator,
        date_mismatch=detected_date_format is not None and detected_date_format is not settings.date_format,
        detected_decimal_separator=detected_separator,
        detected_date_format=detected_date_format,
    )
