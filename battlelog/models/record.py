from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .date_errors import BattleDateValidationError
from .field import Field

"""Record model: one parsed game run.

Records are immutable values. Fix operations build a new Record with
`dataclasses.replace` instead of mutating an existing one.
"""

__all__ = [
    "RunType",
    "Record",
]


class RunType(Enum):
    FARM = "farm"
    TOURNAMENT = "tournament"
    MILESTONE = "milestone"


@dataclass(frozen=True)
class Record:
    """A single run with its typed fields and cached scalar projections.

    The cached stats (tier, wave, coins_earned, cells_earned, real_time,
    run_type) are computed once from `fields` at construction time by the
    parser and are never set independently.
    """
    id: str
    timestamp: datetime
    fields: dict[str, Field]
    tier: int = 0
    wave: int = 0
    coins_earned: float = 0.0
    cells_earned: float = 0.0
    real_time: int = 0  # seconds
    run_type: RunType = RunType.FARM
    date_validation_error: BattleDateValidationError | None = field(default=None, compare=False)

    def get_value(self, field_name: str) -> Any:
        """Typed value of a field, or None when the record lacks it."""
        f = self.fields.get(field_name)
        return f.value if f is not None else None

    def get_display(self, field_name: str) -> str:
        """Display text of a field, or `-` when the record lacks it."""
        f = self.fields.get(field_name)
        return f.display_value if f is not None else "-"

    def get_raw(self, field_name: str) -> str:
        """Original cell text of a field, or an empty string."""
        f = self.fields.get(field_name)
        return f.raw_value if f is not None else ""
