from __future__ import annotations

import pytest

from battlelog.formatting.number_scale import (
    SCALE_MULTIPLIERS,
    SCALE_SUFFIXES,
    format_exact_number,
    format_large_number,
    has_scale_suffix,
    parse_shorthand_number,
)
from battlelog.models.format_settings import DateFormat, ImportFormatSettings

EU = ImportFormatSettings(decimal_separator=",", thousands_separator=".", date_format=DateFormat.MONTH_FIRST)


def test_suffix_table_is_powers_of_thousand():
    assert len(SCALE_SUFFIXES) == 21
    assert SCALE_MULTIPLIERS["K"] == 1e3
    assert SCALE_MULTIPLIERS["D"] == 1e33
    assert SCALE_MULTIPLIERS["aj"] == 1e63


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1234.56", 1234.56),
        ("1,234", 1234.0),
        ("43.91T", 43.91e12),
        ("$1.5M", 1.5e6),
        ("x8.00", 8.0),
        ("2.5 B", 2.5e9),
        ("1aa", 1e36),
        ("-3K", -3000.0),
    ],
)
def test_parse_default_format(raw, expected):
    assert parse_shorthand_number(raw) == pytest.approx(expected)


def test_parse_suffix_is_case_sensitive():
    """`q` (quadrillion) and `Q` (quintillion) are different levels."""
    assert parse_shorthand_number("1q") == pytest.approx(1e15)
    assert parse_shorthand_number("1Q") == pytest.approx(1e18)
    assert parse_shorthand_number("1k") == 0.0


def test_parse_european_separators():
    assert parse_shorthand_number("1.234,5", EU) == pytest.approx(1234.5)
    assert parse_shorthand_number("43,91T", EU) == pytest.approx(43.91e12)


def test_parse_space_grouping_includes_nbsp():
    fmt = ImportFormatSettings(decimal_separator=",", thousands_separator=" ")
    assert parse_shorthand_number("1 234,5", fmt) == pytest.approx(1234.5)
    assert parse_shorthand_number("12 345", fmt) == pytest.approx(12345.0)


@pytest.mark.parametrize("raw", ["", None, "abc", "1.2.3", "5zz"])
def test_parse_unparseable_is_zero(raw):
    assert parse_shorthand_number(raw) == 0.0


def test_format_small_values_round_half_up():
    assert format_large_number(0) == "0"
    assert format_large_number(999.4) == "999"
    assert format_large_number(12.5) == "13"


def test_format_picks_suffix():
    assert format_large_number(1_500_000) == "1.5M"
    assert format_large_number(43.91e12) == "43.91T"
    assert format_large_number(1000) == "1K"
    assert format_large_number(-2_500) == "-2.5K"


def test_format_clamps_past_last_suffix():
    assert format_large_number(1e66).endswith("aj")


def test_format_with_explicit_format_uses_its_decimal():
    assert format_large_number(1_500_000, EU) == "1,5M"


def test_format_display_locale_groups_mantissa():
    assert format_large_number(1_234_000, display_locale="de-DE") == "1,23M"
    assert format_large_number(1e66, display_locale="en-US") == "1,000aj"


ROUND_TRIP_FORMATS = [
    ImportFormatSettings(),
    ImportFormatSettings(decimal_separator=",", thousands_separator="."),
    ImportFormatSettings(decimal_separator=",", thousands_separator=" "),
    ImportFormatSettings(decimal_separator=",", thousands_separator=""),
]


@pytest.mark.parametrize("fmt", ROUND_TRIP_FORMATS, ids=["period", "comma-dot", "comma-space", "comma-none"])
def test_round_trip_within_one_percent(fmt):
    """Formatting then parsing with the same separators recovers every magnitude within 1%."""
    for suffix, multiplier in SCALE_MULTIPLIERS.items():
        for mantissa in (1.0, 12.34, 999.99, -12.34, -999.99):
            value = mantissa * multiplier
            text = format_large_number(value, fmt)
            assert parse_shorthand_number(text, fmt) == pytest.approx(value, rel=0.01), (suffix, text)


def test_format_rounding_moves_to_next_suffix():
    """A mantissa that rounds up to 1000 is written with the next suffix."""
    assert format_large_number(999_999) == "1M"
    assert format_large_number(-999_999_999) == "-1B"
    assert format_large_number(999_999, EU) == "1M"
    assert format_large_number(999_990) == "999.99K"


def test_has_scale_suffix():
    assert has_scale_suffix("43.91T")
    assert has_scale_suffix("1 aa")
    assert not has_scale_suffix("1234")
    assert not has_scale_suffix("Farm")
    assert not has_scale_suffix(None)


def test_format_exact_number():
    assert format_exact_number(12.0) == "12"
    assert format_exact_number(1234.5678) == "1234.5678"
    assert format_exact_number(0.1, ",") == "0,1"
    assert format_exact_number(1e20) == "100000000000000000000"
