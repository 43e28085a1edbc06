from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Mapping

from ..models.field import DurationField, Field, NumberField
from ..models.record import RunType

logger = logging.getLogger(__name__)

"""Run type detection and the cached numeric projections of a record."""

__all__ = [
    "NumericStats",
    "has_explicit_run_type",
    "detect_run_type_from_fields",
    "extract_numeric_stats",
]

_RUN_TYPE_KEYS = ("_runType", "runType")
_LEADING_INT_RE = re.compile(r"\d+")


@dataclass(frozen=True)
class NumericStats:
    tier: int = 0
    wave: int = 0
    coins_earned: float = 0.0
    cells_earned: float = 0.0
    real_time: int = 0  # seconds


def _explicit_run_type(fields: Mapping[str, Field]) -> RunType | None:
    for key in _RUN_TYPE_KEYS:
        f = fields.get(key)
        if f is None or not f.raw_value:
            continue
        try:
            return RunType(f.raw_value.strip().lower())
        except ValueError:
            logger.debug("ignoring unknown run type %r", f.raw_value)
    return None


def has_explicit_run_type(fields: Mapping[str, Field]) -> bool:
    return _explicit_run_type(fields) is not None


def detect_run_type_from_fields(fields: Mapping[str, Field]) -> RunType:
    """Explicit run type wins; a `+` tier (`10+`) means tournament; else farm."""
    explicit = _explicit_run_type(fields)
    if explicit is not None:
        return explicit
    tier = fields.get("tier")
    if tier is not None and "+" in tier.raw_value:
        return RunType.TOURNAMENT
    return RunType.FARM


def _number(fields: Mapping[str, Field], key: str) -> float:
    f = fields.get(key)
    if isinstance(f, (NumberField, DurationField)):
        return float(f.value)
    if f is not None:
        match = _LEADING_INT_RE.search(f.raw_value)
        if match is not None:
            return float(match.group(0))
    return 0.0


def extract_numeric_stats(fields: Mapping[str, Field]) -> NumericStats:
    """Read tier, wave, coins, cells and real time; missing values are 0."""
    return NumericStats(
        tier=int(_number(fields, "tier")),
        wave=int(_number(fields, "wave")),
        coins_earned=_number(fields, "coinsEarned"),
        cells_earned=_number(fields, "cellsEarned"),
        real_time=int(_number(fields, "realTime")),
    )
