from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any

from ..csvfeed.identifiers import parse_number
from ..models.attendance import AttendanceRecord
from ..models.raw_record import RawRecord
from .kpi import count_by, percent_distribution

"""Attendance feed: staff day-entries submitted through the attendance form.

The feed is parsed in strict mode (rows whose field count differs from the
header are dropped). Dates are D/M/YYYY. A monthly work-done report covers the
26th of the previous month through the 25th of the selected month.
"""

__all__ = [
    "PERIOD_START_DAY",
    "PERIOD_END_DAY",
    "attendance_from_record",
    "load_attendance",
    "normalize_date",
    "parse_dmy",
    "report_period",
    "report_period_label",
    "monthly_report",
    "marked_dates",
    "summarize_attendance",
]

PERIOD_START_DAY = 26
PERIOD_END_DAY = 25

# most specific header first; "WORKING" alone would also hit "WORKING HOURS"
TIMESTAMP_ALIASES = ("TIMESTAMP",)
NAME_ALIASES = ("SELECTYOURNAME", "NAME", "PERSON")
DATE_ALIASES = ("CHOOSEDATE", "DATE")
STATUS_ALIASES = ("WORKING/LEAVE/HOLIDAY", "STATUS", "WORKING")
REASON_ALIASES = ("WRITETHEREASONFORNOTWORKING", "REASON")
PLACE_ALIASES = ("PLACEOFVISIT", "PLACE", "VILLAGE")
PURPOSE_ALIASES = ("PURPOSEOFVISIT", "PURPOSE", "ACTIVITY")
HOURS_ALIASES = ("WORKINGHOURS", "HOURS")
OUTCOME_ALIASES = ("OUTCOME",)


def normalize_date(value: str) -> str:
    """Zero-pad day and month of a D/M/YYYY string ("1/3/2024" -> "01/03/2024")."""
    parts = (value or "").strip().split("/")
    if len(parts) != 3:
        return value
    return f"{parts[0].zfill(2)}/{parts[1].zfill(2)}/{parts[2]}"


def parse_dmy(value: str) -> date | None:
    parts = (value or "").strip().split("/")
    if len(parts) != 3:
        return None
    try:
        day, month, year = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        return None


def attendance_from_record(record: RawRecord) -> AttendanceRecord:
    def pick(aliases: tuple[str, ...]) -> str:
        return record.resolve(aliases, skip_empty=True)

    return AttendanceRecord(
        timestamp=pick(TIMESTAMP_ALIASES),
        name=pick(NAME_ALIASES).strip(),
        date=normalize_date(pick(DATE_ALIASES)),
        working_status=pick(STATUS_ALIASES),
        reason_not_working=pick(REASON_ALIASES),
        place_of_visit=pick(PLACE_ALIASES),
        purpose_of_visit=pick(PURPOSE_ALIASES),
        working_hours=pick(HOURS_ALIASES),
        outcome=pick(OUTCOME_ALIASES),
    )


def load_attendance(records: Iterable[RawRecord]) -> list[AttendanceRecord]:
    return [attendance_from_record(r) for r in records]


def report_period(month: int, year: int) -> tuple[date, date]:
    """Inclusive (start, end) of the work-done period for ``month``/``year``."""
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range: {month}")
    if month == 1:
        start = date(year - 1, 12, PERIOD_START_DAY)
    else:
        start = date(year, month - 1, PERIOD_START_DAY)
    return start, date(year, month, PERIOD_END_DAY)


def report_period_label(month: int, year: int) -> str:
    start, end = report_period(month, year)

    def fmt(d: date) -> str:
        return f"{d.day}/{d.month}/{d.year}"

    return f"{fmt(start)} to {fmt(end)}"


def monthly_report(records: Iterable[AttendanceRecord], username: str, month: int, year: int) -> list[AttendanceRecord]:
    """The user's entries inside the period, oldest first."""
    start, end = report_period(month, year)
    dated = []
    for r in records:
        if r.name != username:
            continue
        d = parse_dmy(r.date)
        if d is not None and start <= d <= end:
            dated.append((d, r))
    dated.sort(key=lambda pair: pair[0])
    return [r for _, r in dated]


def marked_dates(records: Iterable[AttendanceRecord], username: str) -> dict[str, AttendanceRecord]:
    """ISO date -> entry for the user; a later entry for the same day wins."""
    out: dict[str, AttendanceRecord] = {}
    for r in records:
        if r.name != username:
            continue
        d = parse_dmy(r.date)
        if d is not None:
            out[d.isoformat()] = r
    return out


def summarize_attendance(records: Sequence[AttendanceRecord]) -> dict[str, Any]:
    n = len(records)
    status_counts = count_by(records, lambda r: r.working_status or "Unknown")
    return {
        "entries": n,
        "status_split": percent_distribution(status_counts, n),
        "working_days": sum(1 for r in records if r.working_status == "Working"),
        "working_hours": sum(parse_number(r.working_hours) for r in records),
    }
