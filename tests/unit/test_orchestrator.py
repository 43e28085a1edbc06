from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

import pytest

from battlelog.config.loader import load_config
from battlelog.logging.error_log import ErrorLogBuffer
from battlelog.models.processing_result import ProcessingResult
from battlelog.services.orchestrator import (
    ProcessingError,
    inspect_files,
    process_all,
    scan_source_files,
)
from battlelog.services.parser import parse_csv


def _error_lines(workdir: Path) -> list[dict]:
    logs = sorted((workdir / "logs").glob("errors-*.log"))
    if not logs:
        return []
    return [json.loads(line) for line in logs[-1].read_text(encoding="utf-8").splitlines()]


def test_scan_source_files(temp_workdir: Path) -> None:
    data_dir = temp_workdir / "data"
    (data_dir / "b.tsv").write_text("x")
    (data_dir / "a.txt").write_text("x")
    (data_dir / "c.CSV").write_text("x")
    (data_dir / "sheet.xlsx").write_bytes(b"ignored")
    (data_dir / "nested").mkdir()
    (data_dir / "nested" / "d.txt").write_text("not scanned")

    assert [f.name for f in scan_source_files(data_dir)] == ["a.txt", "b.tsv", "c.CSV"]


def test_scan_directory_not_found() -> None:
    with pytest.raises(ProcessingError, match="Directory not found"):
        scan_source_files(Path("/non/existent/path"))


def test_scan_path_is_file(temp_workdir: Path) -> None:
    target = temp_workdir / "data" / "a.txt"
    target.write_text("x")
    with pytest.raises(ProcessingError, match="not a directory"):
        scan_source_files(target)


def test_process_all_empty_directory(temp_workdir: Path, write_config: Path) -> None:
    result = process_all(load_config(write_config))

    assert isinstance(result, ProcessingResult)
    assert result.success_files == 0
    assert result.failed_files == 0
    assert result.total_records == 0
    assert result.file_stats == []
    assert result.elapsed_seconds >= 0
    assert _error_lines(temp_workdir) == []


def test_process_all_imports_and_stores(temp_workdir: Path, write_config: Path, battle_exports) -> None:
    """Rejected rows and date warnings never fail a file."""
    result = process_all(load_config(write_config))

    assert result.success_files == 2
    assert result.failed_files == 0
    assert result.total_records == 3
    assert result.rejected_rows == 1
    assert result.date_warnings == 1
    assert [s.file_name for s in result.file_stats] == ["run_a.txt", "run_b.tsv"]
    assert [s.record_count for s in result.file_stats] == [2, 1]
    assert all(s.status == "success" for s in result.file_stats)

    stored = temp_workdir / "storage" / "run_a.tsv"
    assert result.file_stats[0].output_path == str(Path("storage") / "run_a.tsv")
    lines = stored.read_text(encoding="utf-8").splitlines()
    assert lines[0].split("\t") == ["_Date", "_Time", "Battle Date", "Coins Earned", "Real Time", "Tier", "Wave"]
    assert lines[1].split("\t") == [
        "2025-10-14", "13:14:00", "Oct 14, 2025 13:14", "43.91T", "7h 45m 35s", "12", "7639",
    ]
    assert (temp_workdir / "storage" / "run_b.tsv").exists()

    errors = _error_lines(temp_workdir)
    assert {(e["file"], e["row"], e["error_type"]) for e in errors} == {
        ("run_b.tsv", 3, "ROW_REJECTED"),
        ("run_b.tsv", 1, "DATE_VALIDATION_WARNING"),
    }


def test_stored_export_reimports_identically(temp_workdir: Path, write_config: Path, battle_exports) -> None:
    process_all(load_config(write_config))
    stored = (temp_workdir / "storage" / "run_a.tsv").read_text(encoding="utf-8")
    original = parse_csv(battle_exports[0].read_text(encoding="utf-8")).records
    reread = parse_csv(stored).records

    assert [(r.tier, r.wave, r.timestamp, r.run_type) for r in reread] == [
        (r.tier, r.wave, r.timestamp, r.run_type) for r in original
    ]
    assert [r.coins_earned for r in reread] == pytest.approx([r.coins_earned for r in original])


def test_unreadable_file_fails_only_that_file(temp_workdir: Path, write_config: Path, battle_exports) -> None:
    (temp_workdir / "data" / "broken.txt").write_bytes(b"\xff\xfe\xfa not utf-8")

    result = process_all(load_config(write_config))

    assert result.success_files == 2
    assert result.failed_files == 1
    broken = next(s for s in result.file_stats if s.file_name == "broken.txt")
    assert broken.status == "failed"
    assert broken.output_path is None
    assert ("broken.txt", -1, "FILE_READ_ERROR") in {
        (e["file"], e["row"], e["error_type"]) for e in _error_lines(temp_workdir)
    }


def test_storage_write_error_fails_file(temp_workdir: Path, write_config: Path, battle_exports) -> None:
    with patch("battlelog.services.orchestrator._write_storage", side_effect=OSError("disk full")):
        result = process_all(load_config(write_config))

    assert result.success_files == 0
    assert result.failed_files == 2
    assert result.total_records == 0
    types = {e["error_type"] for e in _error_lines(temp_workdir)}
    assert "EXPORT_WRITE_ERROR" in types


def test_without_storage_directory_nothing_is_written(temp_workdir: Path, write_config: Path, battle_exports) -> None:
    config = replace(load_config(write_config), storage_directory=None)
    result = process_all(config)

    assert result.success_files == 2
    assert all(s.output_path is None for s in result.file_stats)
    assert not (temp_workdir / "storage").exists()


def test_known_fields_grow_across_files(temp_workdir: Path, write_config: Path) -> None:
    data_dir = temp_workdir / "data"
    (data_dir / "1.txt").write_text("Tier\tMystery Stat\n1\t2\n", encoding="utf-8")
    (data_dir / "2.txt").write_text("Tier\tMystery Stats\n1\t2\n", encoding="utf-8")

    with patch("battlelog.services.orchestrator.parse_csv", wraps=parse_csv) as spy:
        process_all(load_config(write_config))

    second_config = spy.call_args_list[1].args[1]
    assert "Mystery Stat" in second_config.known_fields
    assert spy.call_args_list[0].args[1].known_fields == ()


def test_error_log_buffer_can_be_injected(temp_workdir: Path, write_config: Path, battle_exports) -> None:
    buffer = ErrorLogBuffer(logs_dir=temp_workdir / "custom_logs")
    process_all(load_config(write_config), error_log=buffer)
    assert list((temp_workdir / "custom_logs").glob("errors-*.log"))
    assert len(buffer) == 0


def test_inspect_files_does_not_write(temp_workdir: Path, write_config: Path, battle_exports) -> None:
    parsed = inspect_files(load_config(write_config))

    assert [p.path.name for p in parsed] == ["run_a.txt", "run_b.tsv"]
    assert len(parsed[0].result.records) == 2
    assert parsed[1].result.rejected_count == 1
    assert not (temp_workdir / "storage").exists()


def test_process_all_warns_on_format_mismatch(
    temp_workdir: Path, write_config: Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Comma-decimal shorthand under a period-decimal import format is reported."""
    (temp_workdir / "data" / "eu.txt").write_text(
        "Battle Date\tTier\tWave\tCoins Earned\nOct 16, 2025 14:30\t11\t4500\t43,91T\n",
        encoding="utf-8",
    )

    with caplog.at_level(logging.WARNING, logger="battlelog"):
        result = process_all(load_config(write_config))

    assert result.success_files == 1
    assert "eu.txt: numbers look like decimal separator ','" in caplog.text
    assert "battle dates look like" not in caplog.text
