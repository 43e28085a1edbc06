# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from battlelog.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("BATTLELOG_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
storage_directory: ./storage
import_format:
  decimal_separator: "."
  thousands_separator: ","
  date_format: month-first
display_locale: en-US
known_fields: []
export:
  delimiter: tab
  include_app_fields: true
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "battlelog.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def battle_exports(temp_workdir: Path) -> list[Path]:
    """Two tab-separated battle report exports in ./data."""
    first = temp_workdir / "data" / "run_a.txt"
    first.write_text(
        "Battle Date\tTier\tWave\tCoins Earned\tReal Time\n"
        "Oct 14, 2025 13:14\t12\t7639\t43.91T\t7h 45m 35s\n"
        "Oct 15, 2025 09:02\t10+\t4100\t1.2T\t3h 1m 0s\n",
        encoding="utf-8",
    )
    second = temp_workdir / "data" / "run_b.tsv"
    second.write_text(
        "Battle Date\tTier\tWave\tCoins Earned\n"
        "Oct 16, 2025 25:10\t11\t5000\t2.5T\n"
        "Oct 17, 2025 18:40\t11\t5100\t2.6T\t999\n",
        encoding="utf-8",
    )
    return [first, second]


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()
