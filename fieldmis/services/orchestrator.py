from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..csvfeed.parser import ParsedFeed, parse_records
from ..feeds.fetcher import FeedFetcher, FeedResult
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import FieldMISConfig
from ..models.report_result import FeedStat, FeedStatus, ReportResult
from .assets import filter_assets, load_assets, summarize_assets
from .attendance import load_attendance, monthly_report, report_period_label, summarize_attendance
from .baseline import BASELINE_SEARCH_FIELDS, load_baseline
from .beneficiaries import BENEFICIARY_SEARCH_FIELDS, load_beneficiaries, summarize_beneficiaries
from .contributions import CONTRIBUTION_SEARCH_FIELDS, reconcile_contributions, summarize_contributions
from .filters import ALL, RecordFilter, apply_filter, filter_options
from .kpi import count_by, unique_count
from .mis import load_components, sum_achievements, summarize_components
from .progress import FeedProgress
from .registry import load_bills, load_media

"""Report orchestration: fetch -> parse -> reconcile -> aggregate.

Each report names the feeds it needs. The feeds are fetched concurrently,
parsed with the per-feed options below, and handed to the report builder.

Read failures degrade: a feed that cannot be fetched is logged and the report
continues with no rows from it. The contributions report is the exception;
its baseline and contribution feeds form one unit and the report fails as a
whole when either is missing.
"""

__all__ = [
    "ProcessingError",
    "ReportOptions",
    "REPORT_FEEDS",
    "FEED_PARSE_OPTIONS",
    "parse_feed",
    "run_report",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal report error (unknown report, feed not configured)."""


# feed name -> parse_records keyword overrides
FEED_PARSE_OPTIONS: dict[str, dict[str, bool]] = {
    "attendance": {"strict": True},
    "assets": {"strip_underscores": True},
}

REPORT_FEEDS: dict[str, tuple[str, ...]] = {
    "contributions": ("baseline", "contributions"),
    "baseline": ("baseline",),
    "beneficiaries": ("beneficiaries",),
    "assets": ("assets",),
    "mis": ("mis_targets", "mis_achievements"),
    "attendance": ("attendance",),
    "media": ("media",),
    "bills": ("bills",),
}

# feeds that must all succeed for the report to produce rows
ATOMIC_REPORTS = {"contributions"}


@dataclass(frozen=True)
class ReportOptions:
    flt: RecordFilter = field(default_factory=RecordFilter)
    budget_head: str = ALL
    cluster_index: int | None = None  # asset cluster stage, 0-based
    username: str | None = None
    month: int | None = None
    year: int | None = None


Builder = Callable[[dict[str, ParsedFeed], FieldMISConfig, ReportOptions, ErrorLogBuffer], tuple[list[Any], dict[str, Any]]]


def parse_feed(name: str, text: str, cfg: FieldMISConfig) -> ParsedFeed:
    options: dict[str, bool] = {"strict": cfg.strict_csv}
    options.update(FEED_PARSE_OPTIONS.get(name, {}))
    return parse_records(text, **options)


def _build_contributions(feeds, cfg, opts, error_log):
    rec = reconcile_contributions(feeds["baseline"], feeds["contributions"], cfg.activity_columns, error_log)
    rows = apply_filter(rec.transactions, opts.flt, CONTRIBUTION_SEARCH_FIELDS)
    summary = summarize_contributions(rows)
    summary["activities_detected"] = rec.activities
    summary["baseline_households"] = rec.baseline_size
    summary["unmatched_rows"] = len(rec.unmatched_rows)
    summary["filter_options"] = filter_options(rec.transactions, opts.flt)
    return rows, summary


def _build_baseline(feeds, cfg, opts, error_log):
    households = load_baseline(feeds["baseline"].records)
    rows = apply_filter(households, opts.flt, BASELINE_SEARCH_FIELDS)
    summary = {
        "households": len(rows),
        "cluster_counts": count_by(rows, lambda h: h.cluster or "Unassigned"),
        "unique_villages": unique_count(rows, lambda h: h.village),
        "filter_options": filter_options(households, opts.flt),
    }
    return rows, summary


def _build_beneficiaries(feeds, cfg, opts, error_log):
    items = load_beneficiaries(feeds["beneficiaries"].records)
    rows = apply_filter(items, opts.flt, BENEFICIARY_SEARCH_FIELDS)
    summary = summarize_beneficiaries(rows)
    summary["filter_options"] = filter_options(items, opts.flt)
    return rows, summary


def _build_assets(feeds, cfg, opts, error_log):
    assets = load_assets(feeds["assets"].records)
    rows = filter_assets(assets, budget_head=opts.budget_head, cluster=opts.cluster_index, search=opts.flt.search)
    summary = summarize_assets(rows)
    summary["budget_heads"] = [ALL, *sorted({a.budget_head for a in assets if a.budget_head})]
    return rows, summary


def _build_mis(feeds, cfg, opts, error_log):
    achievements = sum_achievements(feeds["mis_achievements"].records)
    rows = load_components(feeds["mis_targets"].records, achievements)
    return rows, summarize_components(rows)


def _build_attendance(feeds, cfg, opts, error_log):
    records = load_attendance(feeds["attendance"].records)
    if opts.username and opts.month and opts.year:
        rows = monthly_report(records, opts.username, opts.month, opts.year)
        summary = summarize_attendance(rows)
        summary["period"] = report_period_label(opts.month, opts.year)
        return rows, summary
    if opts.username:
        records = [r for r in records if r.name == opts.username]
    return records, summarize_attendance(records)


def _build_media(feeds, cfg, opts, error_log):
    rows = load_media(feeds["media"].records)
    return rows, {"entries": len(rows), "type_counts": count_by(rows, lambda m: m.type)}


def _build_bills(feeds, cfg, opts, error_log):
    rows = load_bills(feeds["bills"].records)
    return rows, {
        "bills": len(rows),
        "total_amount": sum(b.amount for b in rows),
        "status_counts": count_by(rows, lambda b: b.status),
    }


BUILDERS: dict[str, Builder] = {
    "contributions": _build_contributions,
    "baseline": _build_baseline,
    "beneficiaries": _build_beneficiaries,
    "assets": _build_assets,
    "mis": _build_mis,
    "attendance": _build_attendance,
    "media": _build_media,
    "bills": _build_bills,
}


def _feed_stat(result: FeedResult, parsed: ParsedFeed | None) -> FeedStat:
    if parsed is None:
        return FeedStat(
            name=result.name,
            status=FeedStatus.FAILED,
            elapsed_seconds=result.elapsed_seconds,
            error=result.error,
        )
    return FeedStat(
        name=result.name,
        status=FeedStatus.SUCCESS,
        records=len(parsed),
        dropped_lines=len(parsed.dropped_lines),
        elapsed_seconds=result.elapsed_seconds,
    )


def run_report(
    name: str,
    cfg: FieldMISConfig,
    fetcher: FeedFetcher | None = None,
    options: ReportOptions | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ReportResult:
    """Run one report end to end.

    Raises:
        ProcessingError: unknown report name or a required feed without a URL.
    """
    if name not in BUILDERS:
        raise ProcessingError(f"unknown report: {name}")
    missing = [f for f in REPORT_FEEDS[name] if not cfg.feed_url(f)]
    if missing:
        raise ProcessingError(f"feed not configured: {', '.join(missing)}")

    start_time = datetime.now(UTC)
    own_fetcher = fetcher is None
    fetcher = fetcher or FeedFetcher(cfg.http)
    options = options or ReportOptions()
    own_log = error_log is None
    error_log = error_log if error_log is not None else ErrorLogBuffer(Path(cfg.logs_dir))

    urls = {f: cfg.feed_url(f) for f in REPORT_FEEDS[name]}
    try:
        with FeedProgress(len(urls)) as progress:
            results = fetcher.fetch_many(urls, on_done=progress.feed_done)
    finally:
        if own_fetcher:
            fetcher.close()

    feeds: dict[str, ParsedFeed] = {}
    feed_stats: list[FeedStat] = []
    for feed_name, result in results.items():
        parsed = None
        if result.ok:
            parsed = parse_feed(feed_name, result.text, cfg)
            for line in parsed.dropped_lines:
                error_log.add(feed_name, line, "FIELD_COUNT_MISMATCH", "field count differs from header")
            if parsed.dropped_lines:
                logger.info(f"feed {feed_name}: {len(parsed.dropped_lines)} malformed line(s) dropped")
            logger.debug(f"feed {feed_name}: records={len(parsed)} headers={parsed.headers}")
        else:
            error_log.add(feed_name, -1, "FEED_FETCH_ERROR", result.error or "unknown error")
        feeds[feed_name] = parsed if parsed is not None else ParsedFeed(headers=[], records=[])
        feed_stats.append(_feed_stat(result, parsed))

    failed = [s.name for s in feed_stats if s.status is FeedStatus.FAILED]
    error = None
    if failed and name in ATOMIC_REPORTS:
        error = f"required feed(s) unavailable: {', '.join(failed)}"
        logger.error(f"{name}: {error}")
        rows, summary = [], {}
    else:
        rows, summary = BUILDERS[name](feeds, cfg, options, error_log)

    if own_log:
        try:
            error_log.flush()
        except OSError as e:
            logger.warning(f"error log flush failed: {e}")

    end_time = datetime.now(UTC)
    return ReportResult(
        report=name,
        rows=rows,
        summary=summary,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        feed_stats=feed_stats,
        error=error,
    )
