from __future__ import annotations

from ..models.report_result import ReportResult

"""SUMMARY line rendering.

Format:
SUMMARY report=<name> feeds=<ok>/<total> failed=<n> records=<n> dropped=<n>
rows=<n> elapsed_sec=<x>
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for very small values
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: ReportResult) -> str:
    """Render the SUMMARY line for one report run.

    >>> from datetime import datetime, timezone
    >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> render_summary_line(ReportResult("mis", [], {}, t, t, 0.0))
    'SUMMARY report=mis feeds=0/0 failed=0 records=0 dropped=0 rows=0 elapsed_sec=0'
    """
    total_feeds = len(result.feed_stats)
    return (
        f"SUMMARY report={result.report} "
        f"feeds={result.success_feeds}/{total_feeds} "
        f"failed={result.failed_feeds} "
        f"records={result.total_records} "
        f"dropped={result.dropped_lines} "
        f"rows={len(result.rows)} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
