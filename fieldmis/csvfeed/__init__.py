"""CSV feed parsing and value normalization."""

from .identifiers import normalize_id, parse_amount, parse_date_timestamp, parse_number
from .parser import ParsedFeed, parse_line, parse_records, parse_rows, split_lines

__all__ = [
    "ParsedFeed",
    "normalize_id",
    "parse_amount",
    "parse_date_timestamp",
    "parse_line",
    "parse_number",
    "parse_records",
    "parse_rows",
    "split_lines",
]
