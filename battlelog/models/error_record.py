from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

Structured per-row and per-file problems collected during a batch import.
Row -1 marks file-level errors where no data row applies.
"""

__all__ = [
    "ErrorRecord",
    "ROW_REJECTED",
    "DATE_VALIDATION_WARNING",
    "FILE_READ_ERROR",
    "EXPORT_WRITE_ERROR",
]

ROW_REJECTED = "ROW_REJECTED"
DATE_VALIDATION_WARNING = "DATE_VALIDATION_WARNING"
FILE_READ_ERROR = "FILE_READ_ERROR"
EXPORT_WRITE_ERROR = "EXPORT_WRITE_ERROR"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Source filename being imported
        row: Data row number (1-based). -1 for file-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line with exactly the five schema keys."""
        return json.dumps(asdict(self), ensure_ascii=False)
