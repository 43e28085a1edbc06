"""Domain models for the run statistics import pipeline.

Field variants, parsed records, format settings and the structured results
returned by the parse and export entry points.
"""

from .date_errors import BattleDateErrorCode, BattleDateValidationError
from .field import DataType, DateField, DurationField, Field, NumberField, StringField
from .format_settings import (
    CANONICAL_STORAGE_FORMAT,
    DEFAULT_IMPORT_FORMAT,
    DateFormat,
    ImportFormatSettings,
)
from .record import Record, RunType

__all__ = [
    # Field variants
    "DataType",
    "DateField",
    "DurationField",
    "Field",
    "NumberField",
    "StringField",
    # Records
    "Record",
    "RunType",
    # Settings
    "CANONICAL_STORAGE_FORMAT",
    "DEFAULT_IMPORT_FORMAT",
    "DateFormat",
    "ImportFormatSettings",
    # Validation errors
    "BattleDateErrorCode",
    "BattleDateValidationError",
]
