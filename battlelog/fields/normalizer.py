from __future__ import annotations

import re

from .internal_fields import get_migrated_field_name

"""Header text -> internal camelCase field key."""

__all__ = [
    "to_camel_case",
    "normalize_header",
    "strip_quotes",
]

_SEPARATOR_RE = re.compile(r"[^a-zA-Z0-9]+(.)")


def to_camel_case(text: str) -> str:
    """`Coins Earned` -> `coinsEarned`, `battle_date` -> `battleDate`."""
    return _SEPARATOR_RE.sub(lambda m: m.group(1).upper(), text.lower())


def normalize_header(header: str) -> str:
    """Map a header to its field key, applying legacy migrations.

    Underscore-prefixed headers are internal: the prefix is kept and only
    the remainder is camelCased (`_Run Type` -> `_runType`).
    """
    header = header.strip()
    if header.startswith("_"):
        return "_" + to_camel_case(header[1:])
    key = to_camel_case(header)
    return get_migrated_field_name(key) or key


def strip_quotes(value: str) -> str:
    """Trim whitespace and one pair of surrounding quotes."""
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value
