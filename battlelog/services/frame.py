from __future__ import annotations

from typing import Sequence

import pandas as pd

from ..models.record import Record

"""Tabular projection of parsed records.

One row per record: id, timestamp, the cached stats, then one column per
field key holding the coerced value. Row order follows the input.
"""

__all__ = [
    "STAT_COLUMNS",
    "records_to_dataframe",
]

STAT_COLUMNS = ("id", "timestamp", "tier", "wave", "coins_earned", "cells_earned", "real_time", "run_type")


def records_to_dataframe(records: Sequence[Record], field_keys: Sequence[str] | None = None) -> pd.DataFrame:
    """Project records into a DataFrame.

    Parameters
    ----------
    records: parsed records
    field_keys: field columns to include (None = union of all keys, first-seen order)
    """
    if field_keys is None:
        seen: dict[str, None] = {}
        for record in records:
            for key in record.fields:
                seen.setdefault(key, None)
        field_keys = list(seen)

    rows = []
    for record in records:
        row = {
            "id": record.id,
            "timestamp": record.timestamp,
            "tier": record.tier,
            "wave": record.wave,
            "coins_earned": record.coins_earned,
            "cells_earned": record.cells_earned,
            "real_time": record.real_time,
            "run_type": record.run_type.value,
        }
        for key in field_keys:
            if key not in STAT_COLUMNS:
                row[key] = record.get_value(key)
        rows.append(row)

    columns = list(STAT_COLUMNS) + [k for k in field_keys if k not in STAT_COLUMNS]
    df = pd.DataFrame(rows, columns=columns)
    if not df.empty:
        df["timestamp"] = pd.to_datetime(df["timestamp"])
    return df
