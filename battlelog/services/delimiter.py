from __future__ import annotations

from enum import Enum

"""Field delimiter detection and named delimiter lookup."""

__all__ = [
    "CsvDelimiter",
    "DELIMITER_MAP",
    "detect_delimiter",
    "get_delimiter_string",
]


class CsvDelimiter(Enum):
    TAB = "tab"
    COMMA = "comma"
    SEMICOLON = "semicolon"
    CUSTOM = "custom"


DELIMITER_MAP: dict[CsvDelimiter, str] = {
    CsvDelimiter.TAB: "\t",
    CsvDelimiter.COMMA: ",",
    CsvDelimiter.SEMICOLON: ";",
}

# Tie-break order: earlier entries win equal counts.
_CANDIDATES = ("\t", ",", ";")


def detect_delimiter(line: str | None) -> str:
    """Detect the field delimiter of a header line.

    Counts tab, comma and semicolon; the most frequent wins and ties go to
    tab, then comma. Empty input or a line without any candidate yields tab,
    the game's own export format.

    Args:
        line: First line of the pasted text

    Returns:
        Delimiter character
    """
    if not line:
        return "\t"
    best, best_count = "\t", 0
    for candidate in _CANDIDATES:
        count = line.count(candidate)
        if count > best_count:
            best, best_count = candidate, count
    return best


def get_delimiter_string(delimiter: CsvDelimiter | str, custom_delimiter: str | None = None) -> str:
    """Resolve a delimiter name to its character.

    Args:
        delimiter: `tab`, `comma`, `semicolon` or `custom` (or the enum member)
        custom_delimiter: Character used when `delimiter` is `custom`

    Returns:
        Delimiter character

    Raises:
        ValueError: unknown name, or `custom` without a custom delimiter
    """
    kind = CsvDelimiter(delimiter)
    if kind is CsvDelimiter.CUSTOM:
        if not custom_delimiter:
            raise ValueError("custom delimiter requires a delimiter character")
        return custom_delimiter
    return DELIMITER_MAP[kind]
