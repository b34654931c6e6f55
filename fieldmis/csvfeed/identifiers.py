from __future__ import annotations

import re
from datetime import datetime
from typing import Any

"""Value normalization helpers shared by all reports.

- normalize_id: join key canonicalization ("007" and "7" -> "7")
- parse_amount: currency-like strings ("₹1,500.00" -> 1500.0)
- parse_number: plain numeric cells
- parse_date_timestamp: sort key for loosely formatted dates (0.0 if unknown)
"""

__all__ = [
    "normalize_id",
    "parse_amount",
    "parse_number",
    "parse_date_timestamp",
    "DATE_FORMATS",
]

_DIGITS = re.compile(r"^[0-9]+$")
_NON_NUMERIC = re.compile(r"[^0-9.]")
_FLOAT_PREFIX = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)")

# Day-first, matching the D/M/YYYY convention of the form-backed sheets.
DATE_FORMATS = (
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%d/%m/%Y",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d",
    "%d-%m-%Y",
    "%d-%b-%Y",
    "%d %b %Y",
    "%b %d, %Y",
)


def normalize_id(value: Any) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    if _DIGITS.match(text):
        return str(int(text))
    return text


def _leading_float(text: str) -> float:
    m = _FLOAT_PREFIX.match(text)
    if not m:
        return 0.0
    try:
        return float(m.group(0))
    except ValueError:  # pragma: no cover - regex guarantees a float literal
        return 0.0


def parse_amount(value: Any) -> float:
    """Strip everything but digits and dots, then read a leading float."""
    if value is None:
        return 0.0
    return _leading_float(_NON_NUMERIC.sub("", str(value)))


def parse_number(value: Any) -> float:
    """Read a leading float from a cell without stripping separators."""
    if value is None:
        return 0.0
    return _leading_float(str(value).strip())


def parse_date_timestamp(value: Any) -> float:
    """POSIX timestamp of a loosely formatted date, or 0.0 when unparseable."""
    if value is None:
        return 0.0
    text = str(value).strip()
    if not text:
        return 0.0
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).timestamp()
        except ValueError:
            continue
    return 0.0
