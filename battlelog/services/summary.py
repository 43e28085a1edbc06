from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering for the batch import."""

__all__ = [
    "render_summary_line",
]


def _format_metric(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if abs(value) < 0.01:
        # avoid scientific notation
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(total_files: int, result: ProcessingResult) -> str:
    """Render the one-line run summary.

    Format:
    SUMMARY files={total}/{total} success={success} failed={failed} records={records}
    rejected={rejected} date_warnings={warnings} elapsed_sec={elapsed} throughput_rps={rps}

    Examples:
        >>> from datetime import datetime
        >>> start = datetime(2025, 1, 1, 10, 0, 0)
        >>> end = datetime(2025, 1, 1, 10, 0, 2)
        >>> result = ProcessingResult(
        ...     success_files=1, failed_files=0, total_records=1000, rejected_rows=2,
        ...     date_warnings=3, start_time=start, end_time=end,
        ...     elapsed_seconds=2.0, throughput_records_per_sec=500.0,
        ... )
        >>> render_summary_line(1, result)
        'SUMMARY files=1/1 success=1 failed=0 records=1000 rejected=2 date_warnings=3 elapsed_sec=2 throughput_rps=500'
    """
    return (
        f"SUMMARY files={total_files}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"records={result.total_records} "
        f"rejected={result.rejected_rows} "
        f"date_warnings={result.date_warnings} "
        f"elapsed_sec={_format_metric(result.elapsed_seconds)} "
        f"throughput_rps={_format_metric(result.throughput_records_per_sec)}"
    )
