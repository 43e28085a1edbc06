from __future__ import annotations

from pathlib import Path

import pytest

from battlelog.config.loader import ConfigError, load_config, resolve_config_path
from battlelog.models.format_settings import DateFormat
from battlelog.services.delimiter import CsvDelimiter
from battlelog.services.exporter import OutputFormat


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.source_directory == "./data"
    assert cfg.storage_directory == "./storage"
    assert cfg.import_format.decimal_separator == "."
    assert cfg.import_format.date_format is DateFormat.MONTH_FIRST
    assert cfg.display_locale == "en-US"
    assert cfg.known_fields == ()
    assert cfg.export.delimiter is CsvDelimiter.TAB


def test_defaults_for_minimal_config(temp_workdir: Path):
    path = temp_workdir / "config" / "battlelog.yml"
    path.write_text("source_directory: ./data\n", encoding="utf-8")
    cfg = load_config(path)
    assert cfg.storage_directory is None
    assert cfg.import_format.thousands_separator == ","
    assert cfg.export.include_app_fields is True


def test_comma_decimal_defaults_to_period_grouping(temp_workdir: Path):
    path = temp_workdir / "config" / "battlelog.yml"
    path.write_text(
        "source_directory: ./data\nimport_format:\n  decimal_separator: ','\n"
        "  date_format: month-first-lowercase\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.import_format.thousands_separator == "."
    assert cfg.import_format.date_format is DateFormat.MONTH_FIRST_LOWERCASE


def test_equal_separators_is_config_error(temp_workdir: Path):
    path = temp_workdir / "config" / "battlelog.yml"
    path.write_text(
        "source_directory: ./data\nimport_format:\n  decimal_separator: ','\n  thousands_separator: ','\n",
        encoding="utf-8",
    )
    with pytest.raises(ConfigError) as e:
        load_config(path)
    assert "import_format invalid" in str(e.value)


def test_load_config_missing_file(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError):
        load_config(missing)


def test_load_config_missing_required(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("source_directory: ./data\n", "")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_bad_enum(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("delimiter: tab", "delimiter: pipe")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(write_config)


def test_load_config_invalid_yaml(temp_workdir: Path):
    path = temp_workdir / "config" / "battlelog.yml"
    path.write_text("source_directory: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(path)
    assert "invalid yaml" in str(e.value)


def test_parse_and_export_config(write_config: Path):
    cfg = load_config(write_config)
    parse_cfg = cfg.parse_config(("Tier",))
    assert parse_cfg.known_fields == ("Tier",)
    assert parse_cfg.import_format == cfg.import_format
    assert cfg.parse_config().known_fields == ()
    export_cfg = cfg.storage_export_config()
    assert export_cfg.output_format is OutputFormat.CANONICAL
    assert export_cfg.delimiter is CsvDelimiter.TAB
    assert export_cfg.include_app_fields is True
    assert export_cfg.display_locale == "en-US"


def test_resolve_config_path_env(monkeypatch, temp_workdir: Path):
    assert resolve_config_path() == Path("config/battlelog.yml")
    monkeypatch.setenv("BATTLELOG_CONFIG", "other.yml")
    assert resolve_config_path() == Path("other.yml")
    assert resolve_config_path(Path("explicit.yml")) == Path("explicit.yml")
