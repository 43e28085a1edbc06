from __future__ import annotations

from pathlib import Path

from battlelog.cli.__main__ import main as cli_main


def test_partial_failure_exit_code(temp_workdir: Path, write_config: Path, battle_exports, capsys):
    """One unreadable file yields exit code 2 while the others are still imported."""
    (temp_workdir / "data" / "broken.csv").write_bytes(b"\xff\xfe\xfa\x00")

    code = cli_main([])
    out = capsys.readouterr().out

    assert code == 2
    assert "SUMMARY files=3/3 success=2 failed=1" in out
    assert "ERROR cannot read broken.csv" in out
    assert (temp_workdir / "storage" / "run_a.tsv").exists()


def test_empty_file_is_not_a_failure(temp_workdir: Path, write_config: Path, capsys):
    (temp_workdir / "data" / "empty.txt").write_text("", encoding="utf-8")

    code = cli_main([])
    out = capsys.readouterr().out

    assert code == 0
    assert "SUMMARY files=1/1 success=1 failed=0 records=0 rejected=0" in out
    assert not (temp_workdir / "storage" / "empty.tsv").exists()
