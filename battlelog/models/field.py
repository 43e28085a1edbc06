from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar, TypeAlias

"""Typed field variants for a parsed run.

A run carries an open-ended set of columns, so each value is one of four
variants sharing the same textual representations. `data_type` is fixed per
variant, which keeps the value's runtime type and its tag in agreement.
"""

__all__ = [
    "DataType",
    "NumberField",
    "DurationField",
    "DateField",
    "StringField",
    "Field",
]


class DataType(Enum):
    NUMBER = "number"
    DURATION = "duration"
    STRING = "string"
    DATE = "date"


@dataclass(frozen=True)
class _FieldBase:
    raw_value: str  # Original text (re-encoded canonical text for derived fields)
    display_value: str  # Human-facing formatted text
    original_key: str  # Header exactly as supplied


@dataclass(frozen=True)
class NumberField(_FieldBase):
    value: float = 0.0
    data_type: ClassVar[DataType] = DataType.NUMBER


@dataclass(frozen=True)
class DurationField(_FieldBase):
    value: int = 0  # seconds
    data_type: ClassVar[DataType] = DataType.DURATION


@dataclass(frozen=True)
class DateField(_FieldBase):
    value: datetime = datetime.min
    data_type: ClassVar[DataType] = DataType.DATE


@dataclass(frozen=True)
class StringField(_FieldBase):
    value: str = ""
    data_type: ClassVar[DataType] = DataType.STRING


Field: TypeAlias = NumberField | DurationField | DateField | StringField
