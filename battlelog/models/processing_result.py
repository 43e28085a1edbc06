from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models for the batch file import.

Aggregates per-file outcomes into the totals printed on the SUMMARY line.
"""

__all__ = [
    "FileStat",
    "ProcessingResult",
]


@dataclass(frozen=True)
class FileStat:
    """Per-file import statistics."""
    file_name: str
    status: str  # success/failed
    record_count: int
    rejected_count: int
    date_warning_count: int
    elapsed_seconds: float
    output_path: str | None = None  # canonical export written to storage


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of one batch run.

    Contains all metrics needed for the SUMMARY output line.
    """
    success_files: int
    failed_files: int
    total_records: int
    rejected_rows: int
    date_warnings: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_records_per_sec: float
    file_stats: list[FileStat] | None = None
