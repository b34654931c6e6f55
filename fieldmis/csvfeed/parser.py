from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..models.raw_record import RawRecord, normalize_header

"""Tolerant CSV parsing for published spreadsheet feeds.

The feeds are exported from hand-maintained sheets, so the parser is
deliberately forgiving:
- lines are split on CRLF or LF and blank lines are dropped
- a double quote toggles the "inside quotes" state; commas inside quotes do not
  split fields
- every field is trimmed, and the last field of a line loses one surrounding
  quote on either side

Escaped quotes (``""`` inside a quoted field) are not supported: each ``"``
simply toggles the quote state and is removed from the value.

One parser serves every report. ``strict`` decides what happens to a data line
whose field count differs from the header count:
- strict=True  -> the line is dropped (attendance feed)
- strict=False -> missing fields become "" and extra fields are ignored
"""

__all__ = [
    "ParsedFeed",
    "split_lines",
    "parse_line",
    "parse_rows",
    "parse_records",
]

_LINE_SPLIT = re.compile(r"\r?\n")
_EDGE_QUOTES = re.compile(r'^"|"$')


@dataclass
class ParsedFeed:
    """Result of parsing one CSV document into records."""
    headers: list[str]  # normalized header keys in column order ("" for blank headers)
    records: list[RawRecord]
    dropped_lines: list[int] = field(default_factory=list)  # 1-based source line numbers

    def __len__(self) -> int:
        return len(self.records)


def split_lines(text: str) -> list[str]:
    """Split raw CSV text into non-blank lines."""
    if not text:
        return []
    return [line for line in _LINE_SPLIT.split(text.lstrip("\ufeff")) if line.strip()]


def parse_line(line: str) -> list[str]:
    values: list[str] = []
    in_quote = False
    current: list[str] = []
    for ch in line:
        if ch == '"':
            in_quote = not in_quote
        elif ch == "," and not in_quote:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    values.append(_EDGE_QUOTES.sub("", "".join(current).strip()))
    return values


def parse_rows(text: str) -> list[list[str]]:
    """Parse every non-blank line into a list of fields (header row included).

    Used by positionally-addressed sheets where some columns are read by index.
    """
    return [parse_line(line) for line in split_lines(text)]


def parse_records(
    text: str,
    *,
    strict: bool = False,
    strip_underscores: bool = False,
) -> ParsedFeed:
    """Parse CSV text into ``RawRecord`` instances keyed by normalized header.

    Parameters
    ----------
    text: raw CSV document (first non-blank line is the header row)
    strict: drop data lines whose field count differs from the header count
    strip_underscores: budget-sheet header variant (underscores removed too)
    """
    lines = split_lines(text)
    if not lines:
        return ParsedFeed(headers=[], records=[])

    raw_headers = parse_line(lines[0])
    headers = [normalize_header(h, strip_underscores=strip_underscores) for h in raw_headers]

    records: list[RawRecord] = []
    dropped: list[int] = []
    for line_no, line in enumerate(lines[1:], start=2):
        values = parse_line(line)
        if strict and len(values) != len(headers):
            dropped.append(line_no)
            continue
        fields: dict[str, str] = {}
        for idx, key in enumerate(headers):
            if not key:
                continue
            fields[key] = values[idx] if idx < len(values) else ""
        records.append(RawRecord(fields=fields, values=tuple(values), line_number=line_no))

    return ParsedFeed(headers=headers, records=records, dropped_lines=dropped)
