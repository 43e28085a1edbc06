from __future__ import annotations

import importlib.util
import time
from pathlib import Path

import pytest

from battlelog.services.exporter import ExportConfig, OutputFormat, export_to_csv
from battlelog.services.parser import parse_csv

"""Performance test: parse/export throughput for a pasted history.

Typical pastes are tens to low thousands of runs; 5k rows must parse and
export well within interactive budgets.
"""

ROWS = 5_000
MIN_PARSE_RPS = 500


def _load_generator():
    path = Path(__file__).resolve().parents[2] / "scripts" / "gen_perf_dataset.py"
    spec = importlib.util.spec_from_file_location("gen_perf_dataset", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="module")
def report_text(tmp_path_factory) -> str:
    gen = _load_generator()
    df = gen.generate_battle_reports(ROWS, seed=7, bad_date_ratio=0.01)
    path = tmp_path_factory.mktemp("perf") / "reports.txt"
    gen.write_report(path, df, extra_column_rows=5)
    return path.read_text(encoding="utf-8")


def test_parse_throughput(report_text: str):
    start = time.perf_counter()
    result = parse_csv(report_text)
    elapsed = time.perf_counter() - start

    assert result.rejected_count == 5
    assert len(result.records) == ROWS - 5
    assert result.date_warnings
    throughput = len(result.records) / elapsed
    assert throughput >= MIN_PARSE_RPS, f"parse too slow: {throughput:.0f} rows/sec"


def test_export_round_trip_budget(report_text: str):
    records = parse_csv(report_text).records
    start = time.perf_counter()
    exported = export_to_csv(records, ExportConfig(output_format=OutputFormat.CANONICAL))
    elapsed = time.perf_counter() - start

    assert exported.row_count == len(records)
    assert elapsed < 10.0, f"export too slow: {elapsed:.2f}s"
    assert len(parse_csv(exported.csv_content).records) == len(records)
