from __future__ import annotations

import json
from pathlib import Path

import pytest
import requests

from fieldmis.feeds.fetcher import FeedFetcher
from fieldmis.logging.error_log import ErrorLogBuffer
from fieldmis.models.config_models import FieldMISConfig
from fieldmis.models.report_result import FeedStatus
from fieldmis.services.filters import RecordFilter
from fieldmis.services.orchestrator import ProcessingError, ReportOptions, parse_feed, run_report

FEEDS = {
    "baseline": "https://x/baseline",
    "contributions": "https://x/contrib",
    "attendance": "https://x/attendance",
    "mis_targets": "https://x/targets",
    "mis_achievements": "https://x/achievements",
}


def _cfg(tmp_path: Path, **kw) -> FieldMISConfig:
    return FieldMISConfig(feeds=dict(FEEDS), apps_script_url=None, logs_dir=str(tmp_path / "logs"), **kw)


def test_contributions_report(tmp_path, make_session, baseline_csv, contributions_csv):
    fetcher = FeedFetcher(session=make_session({"https://x/baseline": baseline_csv, "https://x/contrib": contributions_csv}))
    buf = ErrorLogBuffer(tmp_path)
    result = run_report("contributions", _cfg(tmp_path), fetcher, error_log=buf)
    assert result.error is None
    assert [t.name for t in result.rows] == ["Ravi", "Asha"]
    assert result.summary["total_amount"] == 400.0
    assert result.summary["unmatched_rows"] == 1
    assert result.success_feeds == 2
    assert result.total_records == 5
    assert [r.error_type for r in buf.records] == ["UNMATCHED_BASELINE_ID"]


def test_contributions_filter_applies_to_rows_not_options(tmp_path, make_session, baseline_csv, contributions_csv):
    fetcher = FeedFetcher(session=make_session({"https://x/baseline": baseline_csv, "https://x/contrib": contributions_csv}))
    result = run_report("contributions", _cfg(tmp_path), fetcher, ReportOptions(flt=RecordFilter(cluster="North")))
    assert [t.name for t in result.rows] == ["Asha"]
    assert result.summary["filter_options"].clusters == ["All", "North", "South"]


def test_contributions_fail_as_a_unit(tmp_path, make_session, contributions_csv):
    fetcher = FeedFetcher(session=make_session({"https://x/baseline": 500, "https://x/contrib": contributions_csv}))
    result = run_report("contributions", _cfg(tmp_path), fetcher)
    assert result.rows == []
    assert "baseline" in result.error
    assert result.failed_feeds == 1
    assert result.success_feeds == 1
    stat = {s.name: s for s in result.feed_stats}["baseline"]
    assert stat.status is FeedStatus.FAILED


def test_failed_feed_is_written_to_error_log(tmp_path, make_session):
    fetcher = FeedFetcher(session=make_session({}))
    run_report("contributions", _cfg(tmp_path), fetcher)
    logs = list((tmp_path / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    entries = [json.loads(l) for l in logs[0].read_text(encoding="utf-8").splitlines()]
    assert {e["error_type"] for e in entries} == {"FEED_FETCH_ERROR"}
    assert {e["line"] for e in entries} == {-1}


def test_report_closes_the_fetcher_it_creates(tmp_path, monkeypatch, make_session, baseline_csv, contributions_csv):
    session = make_session({"https://x/baseline": baseline_csv, "https://x/contrib": contributions_csv})
    monkeypatch.setattr(requests, "Session", lambda: session)
    result = run_report("contributions", _cfg(tmp_path))
    assert result.failed_feeds == 0
    session.close.assert_called_once_with()


def test_report_leaves_a_passed_fetcher_open(tmp_path, make_session, baseline_csv, contributions_csv):
    session = make_session({"https://x/baseline": baseline_csv, "https://x/contrib": contributions_csv})
    run_report("contributions", _cfg(tmp_path), FeedFetcher(session=session))
    session.close.assert_not_called()


def test_mis_degrades_when_achievements_missing(tmp_path, make_session):
    targets = "ID,Name,Target\nC1,Ponds,10\n"
    fetcher = FeedFetcher(session=make_session({"https://x/targets": targets, "https://x/achievements": 503}))
    result = run_report("mis", _cfg(tmp_path), fetcher)
    assert result.error is None
    assert [(c.id, c.achieved) for c in result.rows] == [("C1", 0.0)]
    assert result.failed_feeds == 1


def test_attendance_is_parsed_strictly(tmp_path, make_session):
    text = "Timestamp,Name,Date,Status\n1/2/2024,Asha,1/2/2024,Working\nbroken\n"
    fetcher = FeedFetcher(session=make_session({"https://x/attendance": text}))
    buf = ErrorLogBuffer(tmp_path)
    result = run_report("attendance", _cfg(tmp_path), fetcher, error_log=buf)
    assert len(result.rows) == 1
    assert result.dropped_lines == 1
    assert [(r.line, r.error_type) for r in buf.records] == [(3, "FIELD_COUNT_MISMATCH")]


def test_attendance_monthly_report_options(tmp_path, make_session):
    text = "Name,Date,Status\nAsha,26/1/2024,Working\nAsha,26/2/2024,Working\nRavi,1/2/2024,Leave\n"
    fetcher = FeedFetcher(session=make_session({"https://x/attendance": text}))
    opts = ReportOptions(username="Asha", month=2, year=2024)
    result = run_report("attendance", _cfg(tmp_path), fetcher, opts, ErrorLogBuffer(tmp_path))
    assert [r.date for r in result.rows] == ["26/01/2024"]
    assert result.summary["period"] == "26/1/2024 to 25/2/2024"


def test_unknown_report(tmp_path):
    with pytest.raises(ProcessingError, match="unknown report"):
        run_report("payroll", _cfg(tmp_path))


def test_feed_not_configured(tmp_path):
    with pytest.raises(ProcessingError, match="feed not configured: media"):
        run_report("media", _cfg(tmp_path))


def test_parse_feed_options(tmp_path):
    cfg = _cfg(tmp_path, strict_csv=True)
    assert parse_feed("baseline", "A,B\n1\n", cfg).dropped_lines == [2]
    assert parse_feed("assets", "Asset_Name\nx\n", cfg).headers == ["ASSETNAME"]
