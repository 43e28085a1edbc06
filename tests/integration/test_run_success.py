from __future__ import annotations

import json
import re
from pathlib import Path

from battlelog.cli.__main__ import main as cli_main

SUMMARY_RE = re.compile(
    r"^SUMMARY files=2/2 success=2 failed=0 records=3 rejected=1 date_warnings=1 "
    r"elapsed_sec=[0-9.]+ throughput_rps=[0-9.]+$",
    re.MULTILINE,
)


def test_full_run(temp_workdir: Path, write_config: Path, battle_exports, capsys):
    """End to end: parse, store canonical exports, write the error log, print SUMMARY."""
    code = cli_main([])
    out = capsys.readouterr().out

    assert code == 0
    assert SUMMARY_RE.search(out), out
    assert "WARN run_b.tsv: 1 row(s) rejected" in out
    assert "WARN run_b.tsv: 1 battle date warning(s)" in out

    assert sorted(p.name for p in (temp_workdir / "storage").iterdir()) == ["run_a.tsv", "run_b.tsv"]

    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    entries = [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]
    assert {e["error_type"] for e in entries} == {"ROW_REJECTED", "DATE_VALIDATION_WARNING"}


def test_second_run_over_storage_is_stable(temp_workdir: Path, write_config: Path, battle_exports):
    """Re-importing the storage directory reproduces the stored text byte for byte."""
    cli_main([])
    first = {p.name: p.read_text(encoding="utf-8") for p in (temp_workdir / "storage").iterdir()}

    text = write_config.read_text(encoding="utf-8")
    text = text.replace("source_directory: ./data", "source_directory: ./storage")
    text = text.replace("storage_directory: ./storage", "storage_directory: ./storage2")
    write_config.write_text(text, encoding="utf-8")
    assert cli_main([]) == 0

    second = {p.name: p.read_text(encoding="utf-8") for p in (temp_workdir / "storage2").iterdir()}
    assert second["run_a.tsv"] == first["run_a.tsv"]
