from __future__ import annotations

from datetime import datetime

import pytest

from fieldmis.csvfeed.identifiers import normalize_id, parse_amount, parse_date_timestamp, parse_number


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("007", "7"),
        ("7", "7"),
        ("0", "0"),
        (" 12 ", "12"),
        ("F-01", "F-01"),
        ("", ""),
        (None, ""),
        (42, "42"),
    ],
)
def test_normalize_id(raw, expected):
    assert normalize_id(raw) == expected


def test_normalize_id_joins_padded_and_plain_ids():
    assert normalize_id("007") == normalize_id("7")


def test_normalize_id_only_strips_ascii_digit_padding():
    # Devanagari digits are kept verbatim
    assert normalize_id("\u0966\u0966\u096d") == "\u0966\u0966\u096d"
    assert normalize_id("\u0966\u0966\u096d") != normalize_id("7")


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("150", 150.0),
        ("₹1,500.00", 1500.0),
        ("", 0.0),
        ("abc", 0.0),
        (None, 0.0),
        ("1.2.3", 1.2),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_parse_number_reads_leading_float():
    assert parse_number("12 hrs") == 12.0
    assert parse_number("  7.5") == 7.5
    assert parse_number("n/a") == 0.0


def test_parse_date_timestamp_day_first():
    assert parse_date_timestamp("12/03/2024") == datetime(2024, 3, 12).timestamp()
    assert parse_date_timestamp("13/03/2024") > parse_date_timestamp("12/03/2024")
    assert parse_date_timestamp("2024-03-12") == datetime(2024, 3, 12).timestamp()


def test_parse_date_timestamp_unparseable_is_zero():
    assert parse_date_timestamp("N/A") == 0.0
    assert parse_date_timestamp("") == 0.0
    assert parse_date_timestamp(None) == 0.0
