from __future__ import annotations

from datetime import date

import pytest

from fieldmis.csvfeed.parser import parse_records
from fieldmis.services.attendance import (
    load_attendance,
    marked_dates,
    monthly_report,
    normalize_date,
    parse_dmy,
    report_period,
    report_period_label,
    summarize_attendance,
)

HEADER = (
    "Timestamp,Select Your Name,Choose Date,Working/Leave/Holiday,"
    "Write the reason for not working,Place of Visit,Purpose of Visit,Working Hours,Outcome"
)

CSV = "\n".join([
    HEADER,
    "26/2/2024 9:00,Asha,26/2/2024,Working,,V1,Survey,6,Done",
    "25/2/2024 9:00,Asha,25/2/2024,Working,,V2,Training,7,Done",
    "26/1/2024 9:00,Asha,26/1/2024,Leave,Sick,,,,",
    "25/1/2024 9:00,Asha,25/1/2024,Working,,V3,Meeting,5,Done",
    "1/2/2024 9:00,Ravi,1/2/2024,Working,,V4,Survey,8,Done",
    "broken,row",
]) + "\n"


def _records():
    return load_attendance(parse_records(CSV, strict=True).records)


def test_strict_parse_drops_malformed_row():
    feed = parse_records(CSV, strict=True)
    assert len(feed) == 5
    assert feed.dropped_lines == [7]


def test_fields_resolved_and_date_padded():
    first = _records()[0]
    assert first.name == "Asha"
    assert first.date == "26/02/2024"
    assert first.working_status == "Working"
    assert first.working_hours == "6"
    assert first.place_of_visit == "V1"
    assert first.purpose_of_visit == "Survey"


def test_normalize_date():
    assert normalize_date("1/3/2024") == "01/03/2024"
    assert normalize_date("2024-03-01") == "2024-03-01"


def test_parse_dmy():
    assert parse_dmy("26/02/2024") == date(2024, 2, 26)
    assert parse_dmy("31/02/2024") is None
    assert parse_dmy("garbage") is None


def test_report_period_spans_26th_to_25th():
    assert report_period(2, 2024) == (date(2024, 1, 26), date(2024, 2, 25))
    assert report_period(1, 2024) == (date(2023, 12, 26), date(2024, 1, 25))
    assert report_period_label(2, 2024) == "26/1/2024 to 25/2/2024"
    with pytest.raises(ValueError):
        report_period(13, 2024)


def test_monthly_report_filters_user_and_period_sorted_ascending():
    rows = monthly_report(_records(), "Asha", 2, 2024)
    assert [r.date for r in rows] == ["26/01/2024", "25/02/2024"]


def test_marked_dates_last_entry_wins():
    records = _records()
    records.append(records[0].__class__(**{**records[0].__dict__, "outcome": "Revised"}))
    marked = marked_dates(records, "Asha")
    assert marked["2024-02-26"].outcome == "Revised"
    assert "2024-02-01" not in marked


def test_payload_blanks_reason_when_working():
    rec = _records()[0]
    payload = rec.__class__(**{**rec.__dict__, "reason_not_working": "n/a"}).to_payload()
    assert payload["reasonNotWorking"] == ""
    assert payload["workingStatus"] == "Working"
    assert "action" not in payload
    leave = _records()[2].to_payload()
    assert leave["reasonNotWorking"] == "Sick"


def test_summary():
    summary = summarize_attendance(_records())
    assert summary["entries"] == 5
    assert summary["working_days"] == 4
    assert summary["working_hours"] == 26.0
    assert [s.label for s in summary["status_split"]] == ["Working", "Leave"]
