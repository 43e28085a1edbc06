from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..formatting.locale_config import DEFAULT_DISPLAY_LOCALE
from ..models.format_settings import CANONICAL_STORAGE_FORMAT, ImportFormatSettings
from ..services.delimiter import CsvDelimiter
from ..services.exporter import ExportConfig, OutputFormat
from ..services.parser import ParseConfig

"""YAML config loader validated against the bundled JSON schema.

Config path resolution: explicit argument, then the BATTLELOG_CONFIG
environment variable (a `.env` file is honoured by the CLI), then
`config/battlelog.yml`.
"""

__all__ = [
    "ConfigError",
    "ExportSettings",
    "ImportConfig",
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_PATH",
    "SCHEMA_PATH",
    "resolve_config_path",
    "load_config",
]

CONFIG_ENV_VAR = "BATTLELOG_CONFIG"
DEFAULT_CONFIG_PATH = Path("config/battlelog.yml")
SCHEMA_PATH = Path(__file__).parent / "config_schema.json"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ExportSettings:
    delimiter: CsvDelimiter = CsvDelimiter.TAB
    include_app_fields: bool = True


@dataclass(frozen=True)
class ImportConfig:
    source_directory: str
    storage_directory: str | None
    import_format: ImportFormatSettings
    display_locale: str
    known_fields: tuple[str, ...]
    export: ExportSettings

    def parse_config(self, known_fields: tuple[str, ...] | None = None) -> ParseConfig:
        """ParseConfig for the core; `known_fields` overrides the configured corpus."""
        return ParseConfig(
            import_format=self.import_format,
            known_fields=self.known_fields if known_fields is None else known_fields,
            display_locale=self.display_locale,
        )

    def storage_export_config(self) -> ExportConfig:
        """ExportConfig for files written to storage.

        Numbers and battle dates are always canonical; only the delimiter and
        the app-field switch come from the config.
        """
        return ExportConfig(
            delimiter=self.export.delimiter,
            include_app_fields=self.export.include_app_fields,
            output_format=OutputFormat.CANONICAL,
            display_locale=self.display_locale,
        )


def _validate_config_schema(data: Any) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema missing or unreadable, or data does not conform
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def resolve_config_path(path: Path | None = None) -> Path:
    """Pick the config file: explicit path, then BATTLELOG_CONFIG, then the default.

    Args:
        path: Path given on the command line, if any

    Returns:
        Path of the config file to load (not checked for existence)
    """
    if path is not None:
        return path
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def _import_format(raw: dict[str, Any]) -> ImportFormatSettings:
    base = CANONICAL_STORAGE_FORMAT
    decimal = raw.get("decimal_separator", base.decimal_separator)
    default_thousands = "." if decimal == "," else base.thousands_separator
    try:
        return ImportFormatSettings(
            decimal_separator=decimal,
            thousands_separator=raw.get("thousands_separator", default_thousands),
            date_format=raw.get("date_format", base.date_format.value),
        )
    except ValueError as e:
        raise ConfigError(f"config import_format invalid: {e}") from e


def load_config(path: Path | None = None) -> ImportConfig:
    """Load, validate and convert the YAML config.

    Args:
        path: Config file; see `resolve_config_path` when omitted

    Returns:
        ImportConfig with defaults applied

    Raises:
        ConfigError: file missing, invalid YAML, schema violation or
            inconsistent import separators
    """
    path = resolve_config_path(path)
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e

    _validate_config_schema(data)

    export_raw = data.get("export", {})
    export = ExportSettings(
        delimiter=CsvDelimiter(export_raw.get("delimiter", CsvDelimiter.TAB.value)),
        include_app_fields=export_raw.get("include_app_fields", True),
    )
    return ImportConfig(
        source_directory=data["source_directory"],
        storage_directory=data.get("storage_directory"),
        import_format=_import_format(data.get("import_format", {})),
        display_locale=data.get("display_locale", DEFAULT_DISPLAY_LOCALE),
        known_fields=tuple(data.get("known_fields", [])),
        export=export,
    )
