from __future__ import annotations

from pathlib import Path

from battlelog.cli.__main__ import main as cli_main


def test_cli_inspect_data(temp_workdir: Path, write_config: Path, battle_exports, capsys):
    """--inspect-data prints mapping and sample rows without writing storage."""
    code = cli_main(["--inspect-data"])
    out = capsys.readouterr().out

    assert code == 0
    assert "FILE: run_a.txt records=2 rejected=0" in out
    assert "FILE: run_b.tsv records=1 rejected=1" in out
    assert "FIELD: Coins Earned -> coinsEarned [exact-match]" in out
    assert "tournament" in out
    assert "SUMMARY" not in out
    assert not (temp_workdir / "storage").exists()


def test_cli_inspect_data_no_files(temp_workdir: Path, write_config: Path, capsys):
    assert cli_main(["--inspect-data"]) == 0
    assert "inspect: no importable files" in capsys.readouterr().out


def test_cli_inspect_reports_similar_fields(temp_workdir: Path, write_config: Path, capsys):
    text = write_config.read_text(encoding="utf-8").replace("known_fields: []", "known_fields: [coinsEarned]")
    write_config.write_text(text, encoding="utf-8")
    (temp_workdir / "data" / "x.txt").write_text("Coins Earned\tOdd Column\n1\t2\n", encoding="utf-8")

    cli_main(["--inspect-data"])
    out = capsys.readouterr().out
    assert "FIELD: Coins Earned -> coinsEarned [similar-field] similar_to=coinsEarned" in out
    assert "unsupported=['Odd Column']" in out
