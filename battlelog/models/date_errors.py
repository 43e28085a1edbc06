from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Battle date validation outcomes.

Validation failures are returned as values, one closed error code per
failing stage, each with a message and a suggestion for the user.
"""

__all__ = [
    "BattleDateErrorCode",
    "BattleDateValidationError",
    "BattleDateValidationResult",
]


class BattleDateErrorCode(Enum):
    EMPTY = "empty"
    INVALID_FORMAT = "invalid-format"
    INVALID_MONTH = "invalid-month"
    INVALID_HOUR = "invalid-hour"
    INVALID_MINUTE = "invalid-minute"
    INVALID_DAY = "invalid-day"
    FUTURE_DATE = "future-date"
    TOO_OLD = "too-old"


@dataclass(frozen=True)
class BattleDateValidationError:
    code: BattleDateErrorCode
    raw_value: str
    message: str
    suggestion: str


@dataclass(frozen=True)
class BattleDateValidationResult:
    """Either `date` (success) or `error` is set, never both."""
    date: datetime | None = None
    error: BattleDateValidationError | None = None

    @property
    def success(self) -> bool:
        return self.error is None and self.date is not None
