from __future__ import annotations

from datetime import datetime

from battlelog.formatting.date_issues import (
    DateFixSource,
    DateIssueType,
    apply_date_derivation_fixes,
    apply_date_fix,
    categorize_warnings,
    count_warnings_by_fixability,
    detect_date_issue,
    try_derive_from_internal_fields,
)
from battlelog.models.date_errors import BattleDateErrorCode
from battlelog.services.parser import parse_csv

HEADER = "Battle Date\t_Date\t_Time\tTier\n"


def _parse(rows: str):
    return parse_csv(HEADER + rows)


def test_valid_record_has_no_issue():
    record = _parse("Oct 14, 2025 13:14\t\t\t5").records[0]
    assert detect_date_issue(record).has_issue is False


def test_invalid_battle_date_fixable_from_internal_fields():
    record = _parse("Oct 14, 2025 25:14\t2025-01-15\t13:45:00\t5").records[0]
    info = detect_date_issue(record)

    assert info.has_issue
    assert info.issue_type is DateIssueType.INVALID
    assert info.is_fixable
    assert info.fix_source is DateFixSource.INTERNAL_FIELDS
    assert info.derived_date == datetime(2025, 1, 15, 13, 45)
    assert info.validation_error.code is BattleDateErrorCode.INVALID_HOUR
    assert info.date_field_value == "2025-01-15"
    assert info.time_field_value == "13:45:00"


def test_missing_battle_date_fixable_from_internal_fields():
    record = parse_csv("_Date\t_Time\tTier\n2025-01-15\t13:45:00\t5").records[0]
    info = detect_date_issue(record)
    assert info.issue_type is DateIssueType.MISSING
    assert info.fix_source is DateFixSource.INTERNAL_FIELDS
    assert info.derived_date == datetime(2025, 1, 15, 13, 45)


def test_user_selected_date_is_second_choice():
    record = parse_csv("Tier\n5").records[0]
    chosen = datetime(2025, 3, 1, 9, 30)

    assert detect_date_issue(record).is_fixable is False
    info = detect_date_issue(record, user_selected_date=chosen)
    assert info.is_fixable
    assert info.fix_source is DateFixSource.USER_SELECTED
    assert info.derived_date == chosen


def test_internal_fields_need_both_parts():
    record = parse_csv("_Date\tTier\n2025-01-15\t5").records[0]
    derivation = try_derive_from_internal_fields(record.fields)
    assert derivation.success is False
    assert derivation.date_value == "2025-01-15"
    assert derivation.time_value is None


def test_apply_date_fix_returns_new_record():
    record = _parse("garbage\t2025-01-15\t13:45:00\t5").records[0]
    fixed = apply_date_fix(record, datetime(2025, 1, 15, 13, 45))

    assert fixed is not record
    assert fixed.id == record.id
    assert fixed.date_validation_error is None
    assert fixed.timestamp == datetime(2025, 1, 15, 13, 45)
    assert fixed.get_raw("battleDate") == "Jan 15, 2025 13:45"
    assert fixed.fields["battleDate"].original_key == "Battle Date"
    # input untouched
    assert record.date_validation_error is not None
    assert record.get_raw("battleDate") == "garbage"
    assert detect_date_issue(fixed).has_issue is False


def test_bulk_fix_by_record_id():
    result = _parse(
        "garbage\t2025-01-15\t13:45:00\t1\n"
        "Oct 14, 2025 13:14\t\t\t2\n"
        "bad\t\t\t3\n"
        "Oct 14, 2025 99:14\t2025-02-01\t08:00:00\t4"
    )
    warnings = result.date_warnings
    assert len(warnings) == 3

    categorized = categorize_warnings(warnings)
    assert len(categorized.fixable) == 2
    assert len(categorized.unfixable) == 1
    assert count_warnings_by_fixability(warnings) == (2, 1)

    bulk = apply_date_derivation_fixes(result.records, warnings)
    assert bulk.fixed_count == 2
    assert bulk.unfixable_count == 1
    fixed = bulk.fixed_records
    assert fixed[0].timestamp == datetime(2025, 1, 15, 13, 45)
    assert fixed[1] is result.records[1]
    assert fixed[2] is result.records[2]
    assert fixed[3].get_raw("battleDate") == "Feb 1, 2025 08:00"


def test_bulk_fix_survives_rejected_rows():
    """A rejected row shifts positions but not record ids."""
    result = _parse(
        "x\ty\tz\t1\textra\n"
        "garbage\t2025-01-15\t13:45:00\t2"
    )
    assert result.rejected_count == 1
    bulk = apply_date_derivation_fixes(result.records, result.date_warnings)
    assert bulk.fixed_count == 1
    assert bulk.fixed_records[0].timestamp == datetime(2025, 1, 15, 13, 45)
