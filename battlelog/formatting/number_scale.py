from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Final

from ..models.format_settings import DEFAULT_IMPORT_FORMAT, ImportFormatSettings
from .locale_config import DEFAULT_DISPLAY_LOCALE, resolve_display_separators

"""Locale-aware codec for game shorthand numbers (`43.91T`, `1aa`).

Parsing honours the import separators; formatting writes the mantissa with
either explicit separators (storage) or the display locale's separators and
appends the magnitude suffix unchanged. Suffixes are case-sensitive:
`q` is 10^15 and `Q` is 10^18.
"""

__all__ = [
    "SCALE_SUFFIXES",
    "SCALE_MULTIPLIERS",
    "parse_shorthand_number",
    "format_large_number",
    "format_exact_number",
    "has_scale_suffix",
]

# Ordered powers of 1000 from 10^3 through 10^63
SCALE_SUFFIXES: Final[tuple[str, ...]] = (
    "K", "M", "B", "T", "q", "Q", "s", "S", "O", "N", "D",
    "aa", "ab", "ac", "ad", "ae", "af", "ag", "ah", "ai", "aj",
)

SCALE_MULTIPLIERS: Final[dict[str, float]] = {
    suffix: 10.0 ** (3 * (idx + 1)) for idx, suffix in enumerate(SCALE_SUFFIXES)
}

_CURRENCY_RE = re.compile(r"[$€£¥]")
_PLAIN_RE = re.compile(r"^-?\d+\.?\d*$")
_SHORTHAND_RE = re.compile(r"^(-?\d+\.?\d*)\s*([A-Za-z]{1,2})$")
_SUFFIX_TAIL_RE = re.compile(r"\d\s*(?:[KMBTqQsSOND]|a[a-j])$")
# Space grouping also appears as NBSP / narrow NBSP in copied text.
_SPACE_GROUPING = (" ", "\u00a0", "\u202f")


def _clean(value: str, fmt: ImportFormatSettings) -> str:
    cleaned = _CURRENCY_RE.sub("", value).strip()
    if cleaned.startswith("x"):
        cleaned = cleaned[1:].strip()
    if fmt.thousands_separator == " ":
        for sep in _SPACE_GROUPING:
            cleaned = cleaned.replace(sep, "")
    elif fmt.thousands_separator:
        cleaned = cleaned.replace(fmt.thousands_separator, "")
    if fmt.decimal_separator != ".":
        cleaned = cleaned.replace(fmt.decimal_separator, ".")
    return cleaned


def parse_shorthand_number(value: str | None, fmt: ImportFormatSettings | None = None) -> float:
    """Parse a shorthand number string into a float.

    Handles plain numbers (`1234.56`), currency (`$1.5M`), multipliers
    (`x8.00`), grouped digits and one- or two-letter magnitude suffixes.
    Separators come from `fmt` (defaults to the period-decimal format).

    Returns 0.0 for anything unparseable; never raises.
    """
    if not value or not isinstance(value, str):
        return 0.0
    cleaned = _clean(value, fmt or DEFAULT_IMPORT_FORMAT)
    if not cleaned:
        return 0.0

    if _PLAIN_RE.match(cleaned):
        return float(cleaned)

    match = _SHORTHAND_RE.match(cleaned)
    if match is None:
        return 0.0
    multiplier = SCALE_MULTIPLIERS.get(match.group(2))
    if multiplier is None:
        return 0.0
    return float(match.group(1)) * multiplier


def has_scale_suffix(raw_value: str | None) -> bool:
    """True when the raw text ends in a digit followed by a magnitude suffix."""
    if not raw_value:
        return False
    return _SUFFIX_TAIL_RE.search(raw_value.strip()) is not None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _group_digits(integer_part: str, grouping: str) -> str:
    if not grouping or len(integer_part) <= 3:
        return integer_part
    head = len(integer_part) % 3 or 3
    groups = [integer_part[:head]]
    groups.extend(integer_part[i:i + 3] for i in range(head, len(integer_part), 3))
    return grouping.join(groups)


def _render_mantissa(mantissa: float, decimal_separator: str, grouping: str = "") -> str:
    negative = mantissa < 0
    text = f"{abs(mantissa):.2f}".rstrip("0").rstrip(".")
    integer_part, _, fraction = text.partition(".")
    rendered = _group_digits(integer_part, grouping)
    if fraction:
        rendered = f"{rendered}{decimal_separator}{fraction}"
    return f"-{rendered}" if negative else rendered


def format_large_number(
    value: float,
    fmt: ImportFormatSettings | None = None,
    display_locale: str = DEFAULT_DISPLAY_LOCALE,
) -> str:
    """Format a number in shorthand notation (`1500000` -> `1.5M`).

    Values below 1000 in magnitude render as a rounded integer. Larger values
    pick their suffix directly from log10 since every level is exactly 1000x
    the previous one; magnitudes past `aj` stay in the `aj` bucket.

    With `fmt` the mantissa uses its decimal separator and no grouping (the
    storage path). Without it, separators come from `display_locale`.
    """
    if math.isnan(value) or math.isinf(value):
        return str(value)
    if abs(value) < 1000:
        return str(_round_half_up(value))

    index = int(math.floor(math.log10(abs(value)) / 3)) - 1
    index = max(0, min(index, len(SCALE_SUFFIXES) - 1))
    mantissa = round(value / SCALE_MULTIPLIERS[SCALE_SUFFIXES[index]], 2)
    # 999.995K rounds to 1000K; move up a bucket
    if abs(mantissa) >= 1000 and index < len(SCALE_SUFFIXES) - 1:
        index += 1
        mantissa = round(value / SCALE_MULTIPLIERS[SCALE_SUFFIXES[index]], 2)
    suffix = SCALE_SUFFIXES[index]

    if fmt is not None:
        return _render_mantissa(mantissa, fmt.decimal_separator) + suffix
    decimal_separator, grouping = resolve_display_separators(display_locale)
    return _render_mantissa(mantissa, decimal_separator, grouping) + suffix


def format_exact_number(value: float, decimal_separator: str = ".") -> str:
    """Render a number at full precision without grouping.

    Integral values drop the fractional part; others keep every significant
    digit of the shortest round-tripping representation.
    """
    if math.isnan(value) or math.isinf(value):
        return str(value)
    if float(value).is_integer():
        return str(int(value))
    text = f"{Decimal(repr(float(value))):f}"
    if decimal_separator != ".":
        text = text.replace(".", decimal_separator)
    return text
