from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

"""Result models for a report run (fetch -> parse -> reconcile -> aggregate).

FeedStat tracks one CSV feed; ReportResult carries the report rows, its KPI
summary and the metrics printed on the SUMMARY line.
"""

__all__ = [
    "FeedStatus",
    "FeedStat",
    "ReportResult",
]


class FeedStatus(Enum):
    """Lifecycle of a single feed within a run.

    - SUCCESS: fetched and parsed
    - FAILED: transport error or non-2xx response; the report sees no rows
    """
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class FeedStat:
    name: str
    status: FeedStatus
    records: int = 0  # parsed data records
    dropped_lines: int = 0  # malformed lines rejected by the parser
    elapsed_seconds: float = 0.0
    error: str | None = None


@dataclass(frozen=True)
class ReportResult:
    report: str  # report name ("contributions", "assets", ...)
    rows: list[Any]  # report entities (dataclass instances)
    summary: dict[str, Any]  # KPI summary
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    feed_stats: list[FeedStat] = field(default_factory=list)
    error: str | None = None  # report-level failure message

    @property
    def success_feeds(self) -> int:
        return sum(1 for s in self.feed_stats if s.status is FeedStatus.SUCCESS)

    @property
    def failed_feeds(self) -> int:
        return sum(1 for s in self.feed_stats if s.status is FeedStatus.FAILED)

    @property
    def total_records(self) -> int:
        return sum(s.records for s in self.feed_stats)

    @property
    def dropped_lines(self) -> int:
        return sum(s.dropped_lines for s in self.feed_stats)
