from __future__ import annotations

import calendar
import re
from datetime import datetime, timedelta

from ..models.date_errors import (
    BattleDateErrorCode,
    BattleDateValidationError,
    BattleDateValidationResult,
)
from ..models.format_settings import DEFAULT_IMPORT_FORMAT, DateFormat
from .date_formatters import BATTLE_DATE_PATTERN, parse_generic_date, lookup_month

"""Staged battle date validation with typed diagnostics.

Stricter than `parse_battle_date`: used at import time so that each problem
is reported with one error code, a message and a suggestion. Stages run in
order and stop at the first failure:

    empty -> format -> month -> hour -> minute -> day -> future -> too old
"""

__all__ = [
    "DEFAULT_MIN_DATE",
    "validate_not_empty",
    "validate_format_match",
    "validate_month_name",
    "validate_time_range",
    "validate_date_exists",
    "validate_not_future",
    "validate_not_too_old",
    "validate_battle_date",
    "parse_battle_date_with_validation",
]

DEFAULT_MIN_DATE = datetime(2020, 1, 1)
FUTURE_TOLERANCE = timedelta(days=1)

_TIME_RE = re.compile(r"(\d{1,2}):(\d{2})")


def _error(code: BattleDateErrorCode, raw_value: str, message: str, suggestion: str) -> BattleDateValidationError:
    return BattleDateValidationError(code=code, raw_value=raw_value, message=message, suggestion=suggestion)


def _fail(error: BattleDateValidationError) -> BattleDateValidationResult:
    return BattleDateValidationResult(error=error)


def validate_not_empty(value: str | None) -> BattleDateValidationError | None:
    if not value or not isinstance(value, str):
        return _error(
            BattleDateErrorCode.EMPTY,
            value or "",
            "Battle date is empty",
            "Ensure the Battle Date field contains a value",
        )
    if not value.strip():
        return _error(
            BattleDateErrorCode.EMPTY,
            value,
            "Battle date contains only whitespace",
            "Ensure the Battle Date field contains a valid date",
        )
    return None


def validate_format_match(value: str) -> re.Match[str] | BattleDateValidationError:
    match = BATTLE_DATE_PATTERN.match(value)
    if match is None:
        return _error(
            BattleDateErrorCode.INVALID_FORMAT,
            value,
            f'Battle date format not recognized: "{value}"',
            'Expected format: "Oct 14, 2025 13:14" or "nov. 20, 2025 22:28"',
        )
    return match


def validate_month_name(
    month_token: str, date_format: DateFormat, raw_value: str
) -> int | BattleDateValidationError:
    month = lookup_month(month_token, date_format)
    if month is None:
        return _error(
            BattleDateErrorCode.INVALID_MONTH,
            raw_value,
            f'Unknown month name: "{month_token}"',
            "Use abbreviated month names like Jan, Feb, Mar, Apr, May, Jun, "
            "Jul, Aug, Sep, Oct, Nov, Dec",
        )
    return month


def validate_time_range(hour: int, minute: int, raw_value: str) -> BattleDateValidationError | None:
    if not 0 <= hour <= 23:
        return _error(
            BattleDateErrorCode.INVALID_HOUR,
            raw_value,
            f"Invalid hour: {hour}",
            "Hour must be between 0 and 23",
        )
    if not 0 <= minute <= 59:
        return _error(
            BattleDateErrorCode.INVALID_MINUTE,
            raw_value,
            f"Invalid minute: {minute}",
            "Minute must be between 0 and 59",
        )
    return None


def validate_date_exists(year: int, month: int, day: int, raw_value: str) -> BattleDateValidationError | None:
    """Check the day against the month length (leap years included)."""
    max_days = calendar.monthrange(year, month)[1]
    if not 1 <= day <= max_days:
        month_name = calendar.month_name[month]
        return _error(
            BattleDateErrorCode.INVALID_DAY,
            raw_value,
            f"Invalid day {day} for {month_name}",
            f"{month_name} {year} has {max_days} days",
        )
    return None


def validate_not_future(
    value: datetime, raw_value: str, now: datetime | None = None
) -> BattleDateValidationError | None:
    # one day of slack for timezone differences
    limit = (now or datetime.now()) + FUTURE_TOLERANCE
    if value > limit:
        return _error(
            BattleDateErrorCode.FUTURE_DATE,
            raw_value,
            "Date is in the future",
            "Check that the year and date are correct",
        )
    return None


def validate_not_too_old(
    value: datetime, raw_value: str, min_date: datetime | None = None
) -> BattleDateValidationError | None:
    if value < (min_date or DEFAULT_MIN_DATE):
        return _error(
            BattleDateErrorCode.TOO_OLD,
            raw_value,
            "Date appears to be too old",
            "Check that the year is correct",
        )
    return None


def _validate_range(
    value: datetime,
    raw_value: str,
    warn_future_dates: bool,
    min_date: datetime | None,
    now: datetime | None,
) -> BattleDateValidationError | None:
    if warn_future_dates:
        future_error = validate_not_future(value, raw_value, now)
        if future_error is not None:
            return future_error
    return validate_not_too_old(value, raw_value, min_date)


def _try_generic(
    raw_value: str, warn_future_dates: bool, min_date: datetime | None, now: datetime | None
) -> BattleDateValidationResult | None:
    parsed = parse_generic_date(raw_value.strip())
    if parsed is None:
        return None

    # generic parsing may normalize out-of-range clock values, so re-check
    # the hour and minute as written
    time_match = _TIME_RE.search(raw_value)
    if time_match is not None:
        time_error = validate_time_range(int(time_match.group(1)), int(time_match.group(2)), raw_value)
        if time_error is not None:
            return _fail(time_error)

    range_error = _validate_range(parsed, raw_value, warn_future_dates, min_date, now)
    if range_error is not None:
        return _fail(range_error)
    return BattleDateValidationResult(date=parsed)


def _parse_manually(
    raw_value: str,
    date_format: DateFormat,
    warn_future_dates: bool,
    min_date: datetime | None,
    now: datetime | None,
) -> BattleDateValidationResult:
    match = validate_format_match(raw_value.strip())
    if isinstance(match, BattleDateValidationError):
        return _fail(match)
    month_token, day_str, year_str, hour_str, minute_str = match.groups()

    month = validate_month_name(month_token, date_format, raw_value)
    if isinstance(month, BattleDateValidationError):
        return _fail(month)

    year, day, hour, minute = int(year_str), int(day_str), int(hour_str), int(minute_str)

    time_error = validate_time_range(hour, minute, raw_value)
    if time_error is not None:
        return _fail(time_error)

    day_error = validate_date_exists(year, month, day, raw_value)
    if day_error is not None:
        return _fail(day_error)

    value = datetime(year, month, day, hour, minute)
    range_error = _validate_range(value, raw_value, warn_future_dates, min_date, now)
    if range_error is not None:
        return _fail(range_error)
    return BattleDateValidationResult(date=value)


def validate_battle_date(
    battle_date: str | None,
    date_format: DateFormat | str = DEFAULT_IMPORT_FORMAT.date_format,
    *,
    warn_future_dates: bool = True,
    min_date: datetime | None = None,
    now: datetime | None = None,
) -> BattleDateValidationResult:
    """Validate a raw battle date.

    Parameters:
        battle_date: Raw cell text
        date_format: Month-name scheme of the import
        warn_future_dates: Report dates more than one day ahead of `now`
        min_date: Earliest accepted date (default 2020-01-01)
        now: Reference time for the future check (default: current time)

    Returns:
        BattleDateValidationResult with either the parsed date or one error
    """
    empty_error = validate_not_empty(battle_date)
    if empty_error is not None:
        return _fail(empty_error)
    date_format = DateFormat(date_format)

    if date_format is DateFormat.MONTH_FIRST:
        result = _try_generic(battle_date, warn_future_dates, min_date, now)
        if result is not None:
            return result

    return _parse_manually(battle_date, date_format, warn_future_dates, min_date, now)


def parse_battle_date_with_validation(
    battle_date: str | None, date_format: DateFormat | str = DEFAULT_IMPORT_FORMAT.date_format
) -> datetime | None:
    """Validated parse returning only the date (None on any failure)."""
    return validate_battle_date(battle_date, date_format).date
