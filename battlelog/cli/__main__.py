from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from battlelog.config.loader import ConfigError, ImportConfig, load_config
from battlelog.logging.init import log_summary, setup_logging
from battlelog.services.frame import records_to_dataframe
from battlelog.services.orchestrator import ProcessingError, inspect_files, process_all
from battlelog.services.summary import render_summary_line

"""CLI entrypoint.

Flow: load `.env`, load config, import every file of the source directory,
write canonical exports to the storage directory, print the SUMMARY line.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_SAMPLE_ROWS = 3


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load `.env` so BATTLELOG_CONFIG can come from it."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="battlelog", description="Battle history importer")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print field mapping & first rows then exit")
    p.add_argument("--config", type=Path, default=None, help="Config file (default: config/battlelog.yml)")
    return p.parse_args(argv)


def _inspect_data(cfg: ImportConfig) -> int:
    try:
        parsed = inspect_files(cfg)
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not parsed:
        print("inspect: no importable files")
        return EXIT_SUCCESS_ALL
    for item in parsed:
        result = item.result
        report = result.field_mapping_report
        print(f"FILE: {item.path.name} records={len(result.records)} rejected={result.rejected_count}")
        for m in report.mapped_fields:
            similar = f" similar_to={m.similar_to}" if m.similar_to else ""
            print(f"  FIELD: {m.csv_header} -> {m.field_key} [{m.status.value}]{similar}")
        if report.unsupported_fields:
            print(f"  unsupported={report.unsupported_fields}")
        if result.records:
            df = records_to_dataframe(result.records[:INSPECT_SAMPLE_ROWS])
            print(df[["timestamp", "tier", "wave", "coins_earned", "run_type"]].to_string(index=False))
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    """Run the batch import.

    Returns:
        Exit code: 0 all files imported, 2 some file failed, 1 fatal error
    """
    # argv=[] must not fall back to sys.argv (pytest flags would leak in)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    logger.info(f"Processing files from: {directory}")
    try:
        result = process_all(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    total_files = result.success_files + result.failed_files
    summary_line = render_summary_line(total_files, result)
    # log_summary adds the SUMMARY label itself
    log_summary(summary_line.removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
