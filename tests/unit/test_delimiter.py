from __future__ import annotations

import pytest

from battlelog.services.delimiter import CsvDelimiter, detect_delimiter, get_delimiter_string


def test_detect_tab_header():
    assert detect_delimiter("Tier\tWave\tCoins Earned") == "\t"


def test_detect_comma_and_semicolon():
    assert detect_delimiter("Tier,Wave,Coins") == ","
    assert detect_delimiter("Tier;Wave;Coins") == ";"


def test_detect_majority_wins():
    """Commas inside a semicolon header do not win when fewer."""
    assert detect_delimiter("a;b;c,d") == ";"


def test_detect_tie_prefers_tab_then_comma():
    assert detect_delimiter("a\tb,c") == "\t"
    assert detect_delimiter("a,b;c") == ","


@pytest.mark.parametrize("line", ["", None, "single"])
def test_detect_fallback_is_tab(line):
    assert detect_delimiter(line) == "\t"


def test_get_delimiter_string_named():
    assert get_delimiter_string("tab") == "\t"
    assert get_delimiter_string(CsvDelimiter.COMMA) == ","
    assert get_delimiter_string("semicolon") == ";"


def test_get_delimiter_string_custom():
    assert get_delimiter_string("custom", "|") == "|"
    with pytest.raises(ValueError):
        get_delimiter_string("custom")


def test_get_delimiter_string_unknown_name():
    with pytest.raises(ValueError):
        get_delimiter_string("pipe")
