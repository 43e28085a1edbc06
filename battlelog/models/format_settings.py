from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Import format settings for locale-dependent parsing.

The settings object is threaded explicitly through every parse call; nothing
in the pipeline reads a global locale.
"""

__all__ = [
    "DateFormat",
    "ImportFormatSettings",
    "DEFAULT_IMPORT_FORMAT",
    "CANONICAL_STORAGE_FORMAT",
    "DECIMAL_SEPARATORS",
    "THOUSANDS_SEPARATORS",
]

DECIMAL_SEPARATORS = (".", ",")
THOUSANDS_SEPARATORS = (",", ".", " ", "")


class DateFormat(Enum):
    """Month-name scheme used by the battle date column.

    - MONTH_FIRST: capitalized English abbreviations ("Oct 14, 2025 13:14")
    - MONTH_FIRST_LOWERCASE: lowercase abbreviations, optionally with a
      trailing period, including French/German variants ("okt. 14, 2025 13:14")
    """
    MONTH_FIRST = "month-first"
    MONTH_FIRST_LOWERCASE = "month-first-lowercase"


@dataclass(frozen=True)
class ImportFormatSettings:
    """Separators and date scheme of the text being imported."""
    decimal_separator: str = "."
    thousands_separator: str = ","
    date_format: DateFormat = DateFormat.MONTH_FIRST

    def __post_init__(self) -> None:
        if self.decimal_separator not in DECIMAL_SEPARATORS:
            raise ValueError(f"unsupported decimal separator: {self.decimal_separator!r}")
        if self.thousands_separator not in THOUSANDS_SEPARATORS:
            raise ValueError(f"unsupported thousands separator: {self.thousands_separator!r}")
        if self.decimal_separator == self.thousands_separator:
            raise ValueError("decimal and thousands separators must differ")
        if not isinstance(self.date_format, DateFormat):
            # accept the plain string form used in config files
            object.__setattr__(self, "date_format", DateFormat(self.date_format))


DEFAULT_IMPORT_FORMAT = ImportFormatSettings()

# Storage is always written in this form so later locale changes cannot
# reinterpret stored values.
CANONICAL_STORAGE_FORMAT = ImportFormatSettings(
    decimal_separator=".",
    thousands_separator=",",
    date_format=DateFormat.MONTH_FIRST,
)
