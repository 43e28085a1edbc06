#!/usr/bin/env python3
"""Dataset generation script for performance testing.

Generates synthetic battle report exports (tab separated, game header names,
shorthand numbers, English battle dates) that `battlelog` can import. A
fraction of rows can be corrupted on purpose to exercise rejected rows and
date warnings.
"""
from __future__ import annotations

import argparse
import random
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pandas as pd

from battlelog.formatting.date_formatters import format_canonical_battle_date
from battlelog.formatting.number_scale import format_large_number
from battlelog.models.format_settings import CANONICAL_STORAGE_FORMAT

BASE_DATE = datetime(2025, 1, 1, 0, 0)
SHORTHAND_COLUMNS = ("Coins Earned", "Cash Earned", "Damage Dealt", "Damage Taken", "Death Wave Damage")


def _duration(rng: random.Random) -> str:
    seconds = rng.randint(600, 12 * 3600)
    return f"{seconds // 3600}h {seconds % 3600 // 60}m {seconds % 60}s"


def generate_battle_reports(rows: int, seed: int = 42, bad_date_ratio: float = 0.0) -> pd.DataFrame:
    """Build a DataFrame with one battle report per row.

    Args:
        rows: Number of runs
        seed: Random seed for reproducible data
        bad_date_ratio: Share of rows whose battle date has an impossible hour
    """
    rng = random.Random(seed)
    data: dict[str, list[str]] = {
        "Battle Date": [],
        "Game Time": [],
        "Real Time": [],
        "Tier": [],
        "Wave": [],
        "Killed By": [],
        **{name: [] for name in SHORTHAND_COLUMNS},
        "Cells Earned": [],
    }
    for i in range(rows):
        when = BASE_DATE + timedelta(minutes=37 * i)
        battle_date = format_canonical_battle_date(when)
        if rng.random() < bad_date_ratio:
            battle_date = battle_date.rsplit(" ", 1)[0] + " 25:00"
        tier = rng.randint(1, 18)
        data["Battle Date"].append(battle_date)
        data["Game Time"].append(_duration(rng))
        data["Real Time"].append(_duration(rng))
        data["Tier"].append(f"{tier}+" if rng.random() < 0.1 else str(tier))
        data["Wave"].append(str(rng.randint(100, 12000)))
        data["Killed By"].append(rng.choice(["Boss", "Ranged", "Fast", "Scatter", "Vampire"]))
        for name in SHORTHAND_COLUMNS:
            value = rng.uniform(1, 999) * 10 ** (3 * rng.randint(1, 7))
            data[name].append(format_large_number(value, CANONICAL_STORAGE_FORMAT))
        data["Cells Earned"].append(str(rng.randint(0, 50000)))
    return pd.DataFrame(data)


def write_report(path: Path, df: pd.DataFrame, extra_column_rows: int = 0) -> None:
    """Write tab separated text; `extra_column_rows` rows get one value too many."""
    text = df.to_csv(sep="\t", index=False, lineterminator="\n")
    if extra_column_rows:
        lines = text.rstrip("\n").split("\n")
        for idx in range(1, min(extra_column_rows, len(lines) - 1) + 1):
            lines[idx] += "\tEXTRA"
        text = "\n".join(lines) + "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate synthetic battle report exports")
    parser.add_argument("output", type=Path, help="Output directory")
    parser.add_argument("--files", type=int, default=1, help="Number of files (default: 1)")
    parser.add_argument("--rows", type=int, default=5_000, help="Runs per file (default: 5,000)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--bad-dates", type=float, default=0.0, help="Share of rows with an invalid battle date")
    parser.add_argument("--extra-columns", type=int, default=0, help="Rows per file with one value too many")
    parser.add_argument("--dry-run", action="store_true", help="Show the plan without writing files")
    args = parser.parse_args()

    if args.rows <= 0 or args.files <= 0:
        print("Error: --rows and --files must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.bad_dates <= 1.0:
        print("Error: --bad-dates must be between 0 and 1", file=sys.stderr)
        return 1

    print("Dataset generation plan:")
    print(f"  Output directory: {args.output}")
    print(f"  Files: {args.files}")
    print(f"  Runs per file: {args.rows:,}")
    print(f"  Invalid battle dates: {args.bad_dates:.0%}")
    print(f"  Rejected rows per file: {args.extra_columns}")
    if args.dry_run:
        print("\n[DRY RUN] Would generate files but not creating them.")
        return 0

    for n in range(args.files):
        df = generate_battle_reports(args.rows, seed=args.seed + n, bad_date_ratio=args.bad_dates)
        path = args.output / f"battle_reports_{n + 1:03d}.txt"
        write_report(path, df, args.extra_columns)
        print(f"  wrote {path} ({len(df):,} runs)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
