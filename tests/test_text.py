"""Tests for text normalization and display formatting."""

from datetime import date, datetime

import pytest

from docpress.text import format_currency, format_date, format_datetime, normalize


@pytest.mark.parametrize("raw, expected", [
    ("“Quoted”", '"Quoted"'),
    ("it’s", "it's"),
    ("a — b – c", "a - b - c"),
    ("wait…", "wait..."),
    ("• point", "- point"),
    ("go → there", "go -> there"),
    ("✓ done", "[v] done"),
    ("€10", "EUR10"),
    ("½ cup", "1/2 cup"),
    ("Acme™", "Acme(TM)"),
    ("non\u00a0breaking", "non breaking"),
    ("soft\u00adhyphen", "softhyphen"),
])
def test_substitutions(raw, expected):
    assert normalize(raw) == expected


def test_drops_characters_outside_latin1():
    assert normalize("ok \U0001F680 launch 中") == "ok  launch "


def test_keeps_latin1_accents():
    assert normalize("café naïve") == "café naïve"


def test_none_and_non_strings():
    assert normalize(None) == ""
    assert normalize(42) == "42"
    assert normalize(1.5) == "1.5"


@pytest.mark.parametrize("raw", [
    "plain text",
    "“mixed” — → ✓ € \U0001F600 ⅓",
    "© 2025 …",
])
def test_normalize_is_idempotent_and_latin1(raw):
    once = normalize(raw)
    assert normalize(once) == once
    assert all(ord(ch) <= 0xFF for ch in once)


def test_format_currency():
    assert format_currency(200) == "$200.00"
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(-5) == "-$5.00"
    assert format_currency(None) == "$0.00"
    assert format_currency(12, symbol="CAD ") == "CAD 12.00"


def test_format_date():
    assert format_date(datetime(2025, 1, 1, 23, 59)) == "January 1, 2025"
    assert format_date(date(2024, 12, 25)) == "December 25, 2024"


def test_format_date_defaults_to_today():
    today = date.today()
    assert str(today.year) in format_date(None)


def test_format_datetime():
    moment = datetime(2025, 1, 1, 15, 4)
    assert format_datetime(moment) == "Jan 1, 2025 3:04 PM"
    assert format_datetime(moment, long=True) == "January 1, 2025 3:04 PM"
    assert format_datetime(datetime(2025, 6, 9, 0, 0)) == "Jun 9, 2025 12:00 AM"
