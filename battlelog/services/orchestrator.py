from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import ImportConfig
from ..formatting.format_detection import detect_format_mismatch
from ..logging.error_log import ErrorLogBuffer, records_from_parse_result
from ..models.error_record import EXPORT_WRITE_ERROR, FILE_READ_ERROR, ErrorRecord
from ..models.import_result import ParseResult
from ..models.processing_result import FileStat, ProcessingResult
from .exporter import export_to_csv
from .parser import known_fields_from, parse_csv
from .progress import ProgressTracker

logger = logging.getLogger(__name__)

"""Batch import of exported run files.

Scans the source directory, parses each file with the configured import
format and writes the canonical export of every parsed file to the storage
directory. Headers of earlier files join the known-field corpus used to
classify later files. Rejected rows never fail a file; unreadable input or
an unwritable export does.
"""

__all__ = [
    "ProcessingError",
    "SUPPORTED_SUFFIXES",
    "FileParse",
    "scan_source_files",
    "parse_file",
    "inspect_files",
    "process_all",
]

SUPPORTED_SUFFIXES = (".txt", ".tsv", ".csv")
STORAGE_SUFFIX = ".tsv"


class ProcessingError(Exception):
    """Fatal error that stops the whole batch."""


@dataclass(frozen=True)
class FileParse:
    path: Path
    result: ParseResult


def scan_source_files(directory: Path) -> list[Path]:
    """List importable files (non-recursive, sorted by name).

    Raises:
        ProcessingError: directory missing, not a directory or unreadable
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def parse_file(path: Path, config: ImportConfig, known_fields: tuple[str, ...] | None = None) -> ParseResult:
    """Read and parse one file. OSError/UnicodeDecodeError propagate to the caller."""
    text = path.read_text(encoding="utf-8-sig")
    return parse_csv(text, config.parse_config(known_fields))


def inspect_files(config: ImportConfig) -> list[FileParse]:
    """Parse every source file without writing anything."""
    parsed: list[FileParse] = []
    known = config.known_fields
    for path in scan_source_files(Path(config.source_directory)):
        try:
            result = parse_file(path, config, known)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("cannot read %s: %s", path.name, e)
            continue
        parsed.append(FileParse(path, result))
        known = known_fields_from(known + tuple(m.csv_header for m in result.field_mapping_report.mapped_fields))
    return parsed


def _warn_format_mismatch(path: Path, config: ImportConfig, result: ParseResult) -> None:
    if not result.records:
        return
    first = result.records[0]
    raw_row = {f.original_key: f.raw_value for f in first.fields.values()}
    mismatch = detect_format_mismatch(raw_row, config.import_format)
    if mismatch.number_mismatch:
        logger.warning(
            "%s: numbers look like decimal separator %r, import format uses %r",
            path.name, mismatch.detected_decimal_separator, config.import_format.decimal_separator,
        )
    if mismatch.date_mismatch:
        logger.warning(
            "%s: battle dates look like %s, import format uses %s",
            path.name, mismatch.detected_date_format.value, config.import_format.date_format.value,
        )


def _write_storage(path: Path, config: ImportConfig, result: ParseResult) -> Path | None:
    if not config.storage_directory or not result.records:
        return None
    storage = Path(config.storage_directory)
    storage.mkdir(parents=True, exist_ok=True)
    exported = export_to_csv(result.records, config.storage_export_config())
    target = storage / f"{path.stem}{STORAGE_SUFFIX}"
    target.write_text(exported.csv_content + "\n", encoding="utf-8")
    return target


def _result(
    start_time: datetime,
    success: int,
    failed: int,
    records: int,
    rejected: int,
    warnings: int,
    file_stats: list[FileStat],
) -> ProcessingResult:
    end_time = datetime.now(UTC)
    elapsed = (end_time - start_time).total_seconds()
    return ProcessingResult(
        success_files=success,
        failed_files=failed,
        total_records=records,
        rejected_rows=rejected,
        date_warnings=warnings,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed,
        throughput_records_per_sec=records / elapsed if elapsed > 0 else 0.0,
        file_stats=file_stats,
    )


def process_all(config: ImportConfig, error_log: ErrorLogBuffer | None = None) -> ProcessingResult:
    """Import every file in the configured source directory.

    Returns:
        ProcessingResult with per-file stats and totals

    Raises:
        ProcessingError: source directory cannot be scanned
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    file_paths = scan_source_files(Path(config.source_directory))

    if not file_paths:
        logger.info("no importable files in %s", config.source_directory)
        return _result(start_time, 0, 0, 0, 0, 0, [])

    known = config.known_fields
    file_stats: list[FileStat] = []
    success = failed = total_records = total_rejected = total_warnings = 0

    with ProgressTracker(len(file_paths)) as progress:
        for path in file_paths:
            progress.start_file(path)
            file_start = datetime.now(UTC)
            status, output = "failed", None
            records = rejected = warnings = 0

            try:
                result = parse_file(path, config, known)
            except (OSError, UnicodeDecodeError) as e:
                logger.error("cannot read %s: %s", path.name, e)
                error_log.append(ErrorRecord.create(path.name, -1, FILE_READ_ERROR, str(e)))
                result = None

            if result is not None:
                records = len(result.records)
                rejected = result.rejected_count
                warnings = len(result.date_warnings or [])
                error_log.extend(records_from_parse_result(path.name, result))
                _warn_format_mismatch(path, config, result)
                if rejected:
                    logger.warning("%s: %d row(s) rejected", path.name, rejected)
                if warnings:
                    logger.warning("%s: %d battle date warning(s)", path.name, warnings)
                try:
                    output = _write_storage(path, config, result)
                    status = "success"
                except OSError as e:
                    logger.error("cannot write storage export for %s: %s", path.name, e)
                    error_log.append(ErrorRecord.create(path.name, -1, EXPORT_WRITE_ERROR, str(e)))
                known = known_fields_from(
                    known + tuple(m.csv_header for m in result.field_mapping_report.mapped_fields)
                )

            if status == "success":
                success += 1
                total_records += records
                total_rejected += rejected
                total_warnings += warnings
                logger.info("%s: %d record(s) imported", path.name, records)
            else:
                failed += 1

            file_stats.append(
                FileStat(
                    file_name=path.name,
                    status=status,
                    record_count=records,
                    rejected_count=rejected,
                    date_warning_count=warnings,
                    elapsed_seconds=(datetime.now(UTC) - file_start).total_seconds(),
                    output_path=str(output) if output is not None else None,
                )
            )
            progress.finish_file(records=total_records)

    log_path = error_log.flush()
    if log_path is not None:
        logger.info("error log written to %s", log_path)

    return _result(start_time, success, failed, total_records, total_rejected, total_warnings, file_stats)
