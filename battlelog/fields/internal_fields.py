from __future__ import annotations

from typing import Final

"""App-generated internal fields.

Internal keys carry a leading underscore so they never collide with game
columns. Export headers also keep the underscore (`_Run Type`).
"""

__all__ = [
    "DATE",
    "TIME",
    "NOTES",
    "RUN_TYPE",
    "RANK",
    "INTERNAL_FIELD_MAPPINGS",
    "INTERNAL_FIELD_ORDER",
    "LEGACY_FIELD_MIGRATIONS",
    "is_internal_field",
    "is_legacy_field",
    "get_migrated_field_name",
]

DATE: Final = "_date"
TIME: Final = "_time"
NOTES: Final = "_notes"
RUN_TYPE: Final = "_runType"
RANK: Final = "_rank"

# internal key -> export header
INTERNAL_FIELD_MAPPINGS: Final[dict[str, str]] = {
    DATE: "_Date",
    TIME: "_Time",
    NOTES: "_Notes",
    RUN_TYPE: "_Run Type",
    RANK: "_Rank",
}

# exported before any game field
INTERNAL_FIELD_ORDER: Final[tuple[str, ...]] = (DATE, TIME, NOTES, RUN_TYPE, RANK)

# legacy key -> internal key
LEGACY_FIELD_MIGRATIONS: Final[dict[str, str]] = {
    "date": DATE,
    "time": TIME,
    "notes": NOTES,
    "runType": RUN_TYPE,
    "run_type": RUN_TYPE,
    "rank": RANK,
    "placement": RANK,
}


def is_internal_field(field_name: str) -> bool:
    """Check if a key is an app-generated internal field.

    Args:
        field_name: Field key (`_date`, `coinsEarned`, ...)

    Returns:
        True for the underscore-prefixed internal keys
    """
    return field_name in INTERNAL_FIELD_MAPPINGS


def is_legacy_field(field_name: str) -> bool:
    """Check if a key is an old internal key that must be migrated (`notes`, `runType`)."""
    return field_name in LEGACY_FIELD_MIGRATIONS


def get_migrated_field_name(field_name: str) -> str | None:
    """Look up the current internal key for a legacy key.

    Args:
        field_name: Legacy field key

    Returns:
        Internal key, or None if the key is not a legacy one
    """
    return LEGACY_FIELD_MIGRATIONS.get(field_name)
