from __future__ import annotations

import re
from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import (
    DATE_VALIDATION_WARNING,
    ROW_REJECTED,
    ErrorRecord,
)
from ..models.import_result import ParseResult

"""Error log buffering.

Records are kept in memory during a batch run and flushed once as JSON Lines
to `logs/errors-YYYYMMDD-HHMMSS.log` (UTC stamp, fixed five-key schema).
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "ERROR_LOG_SCHEMA_PATH",
    "records_from_parse_result",
]

LOGS_DIR = Path("./logs")
ERROR_LOG_SCHEMA_PATH = Path(__file__).parent / "error_log_schema.json"
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"

_ROW_ERROR_RE = re.compile(r"^Row (\d+): (.*)$", re.DOTALL)


class ErrorLogBuffer:
    """In-memory buffer for error records. `flush` appends JSON Lines.

    The file path is fixed on first access; nothing is written while the
    buffer is empty.
    """

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._file_path: Path | None = None
        self._logs_dir = logs_dir or LOGS_DIR

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._logs_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: ErrorRecord) -> None:
        """Buffer one error record."""
        self._records.append(record)

    def extend(self, records: list[ErrorRecord]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None if nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp


def records_from_parse_result(file_name: str, result: ParseResult) -> list[ErrorRecord]:
    """Convert row errors and date warnings of one parse into error records."""
    records: list[ErrorRecord] = []
    for message in result.errors:
        match = _ROW_ERROR_RE.match(message)
        if match is not None:
            records.append(ErrorRecord.create(file_name, int(match.group(1)), ROW_REJECTED, match.group(2)))
        else:
            records.append(ErrorRecord.create(file_name, -1, ROW_REJECTED, message))
    for warning in result.date_warnings or []:
        fix = "fixable" if warning.is_fixable else "unfixable"
        records.append(
            ErrorRecord.create(
                file_name,
                warning.row_number,
                DATE_VALIDATION_WARNING,
                f"{warning.error.code.value}: {warning.error.message} ({fix})",
            )
        )
    return records
