from __future__ import annotations

import argparse
import getpass
import sys
from dataclasses import is_dataclass
from pathlib import Path
from typing import Any

from fieldmis.auth.credentials import StaticCredentialStore
from fieldmis.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config, load_env_file
from fieldmis.export.writer import ExportError, feed_to_frame, render_table, rows_to_frame, write_frame
from fieldmis.feeds.apps_script import AppsScriptClient
from fieldmis.feeds.fetcher import FeedFetcher
from fieldmis.logging.init import log_summary, set_debug, setup_logging
from fieldmis.models.attendance import AttendanceRecord
from fieldmis.services.attendance import normalize_date
from fieldmis.services.filters import ALL, RecordFilter
from fieldmis.services.kpi import Share
from fieldmis.services.orchestrator import (
    REPORT_FEEDS,
    ProcessingError,
    ReportOptions,
    parse_feed,
    run_report,
)
from fieldmis.services.summary import render_summary_line

"""CLI entrypoint.

Flow for a report subcommand:
- load .env (override) and the YAML config
- fetch the report's feeds, parse, reconcile and aggregate
- print the rows (or export them with --output) and the KPI summary
- finish with a SUMMARY line

Exit codes: 0 success, 2 partial failure (a feed failed), 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_SAMPLE_ROWS = 3


def _add_filter_flags(p: argparse.ArgumentParser, *, activity: bool = True) -> None:
    p.add_argument("--cluster", default=ALL)
    p.add_argument("--gp", default=ALL)
    p.add_argument("--village", default=ALL)
    if activity:
        p.add_argument("--activity", default=ALL)
    p.add_argument("--search", default="", help="Case-insensitive text search")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="fieldmis", description="Field MIS feed reports")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    sub = p.add_subparsers(dest="command", required=True)

    def report(name: str, help_text: str) -> argparse.ArgumentParser:
        sp = sub.add_parser(name, help=help_text)
        sp.add_argument("--output", type=Path, help="Export rows to .csv or .xlsx")
        sp.add_argument("--max-rows", type=int, default=20, help="Rows shown on the console")
        return sp

    _add_filter_flags(report("contributions", "Baseline x contribution reconciliation"))
    _add_filter_flags(report("baseline", "Baseline household registry"), activity=False)
    _add_filter_flags(report("beneficiaries", "Beneficiary registry"))

    sp = report("assets", "Asset procurement and distribution")
    sp.add_argument("--budget-head", default=ALL)
    sp.add_argument("--cluster-stage", type=int, choices=(1, 2, 3), help="Only assets stocked or issued at this cluster")
    sp.add_argument("--search", default="")

    report("mis", "Targets vs achievements")

    sp = report("attendance", "Attendance entries / monthly work-done report")
    sp.add_argument("--user", help="Staff name as entered in the form")
    sp.add_argument("--month", type=int, choices=range(1, 13), metavar="1-12")
    sp.add_argument("--year", type=int)

    report("media", "Photo registry (newest first)")
    report("bills", "Maintenance bills (newest first)")

    sp = sub.add_parser("inspect", help="Print a feed's headers and first rows then exit")
    sp.add_argument("feed", help="Feed name from the config")

    sp = sub.add_parser("login", help="Verify credentials against the configured users")
    sp.add_argument("username")
    sp.add_argument("--password-stdin", action="store_true", help="Read the password from stdin")

    sp = sub.add_parser("submit-attendance", help="Post one attendance entry to the write endpoint")
    sp.add_argument("--name", required=True)
    sp.add_argument("--date", required=True, help="D/M/YYYY")
    sp.add_argument("--status", required=True, choices=("Working", "Leave", "Holiday"))
    sp.add_argument("--reason", default="")
    sp.add_argument("--place", default="")
    sp.add_argument("--purpose", default="")
    sp.add_argument("--hours", default="")
    sp.add_argument("--outcome", default="")

    return p.parse_args(argv)


def _report_options(args: argparse.Namespace) -> ReportOptions:
    flt = RecordFilter(
        cluster=getattr(args, "cluster", ALL),
        gp=getattr(args, "gp", ALL),
        village=getattr(args, "village", ALL),
        activity=getattr(args, "activity", ALL),
        search=getattr(args, "search", ""),
    )
    stage = getattr(args, "cluster_stage", None)
    return ReportOptions(
        flt=flt,
        budget_head=getattr(args, "budget_head", ALL),
        cluster_index=stage - 1 if stage else None,
        username=getattr(args, "user", None),
        month=getattr(args, "month", None),
        year=getattr(args, "year", None),
    )


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, dict):
        return ", ".join(f"{k}={_format_value(v)}" for k, v in value.items())
    if isinstance(value, (list, tuple)):
        parts = []
        for v in value:
            if isinstance(v, Share):
                parts.append(f"{v.label}={v.value:g} ({v.percent:.1f}%)")
            elif isinstance(v, tuple) and len(v) == 2:
                parts.append(f"{v[0]}={_format_value(v[1])}")
            else:
                parts.append(str(v))
        return ", ".join(parts)
    return str(value)


def _print_summary(logger, summary: dict[str, Any]) -> None:
    for key, value in summary.items():
        if is_dataclass(value):
            # option lists are only interesting when debugging filters
            logger.debug(f"{key}: {value}")
            continue
        logger.info(f"{key}: {_format_value(value)}")


def _run_report(logger, cfg, args: argparse.Namespace) -> int:
    try:
        with FeedFetcher(cfg.http) as fetcher:
            result = run_report(args.command, cfg, fetcher, _report_options(args), None)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    if result.rows:
        frame = rows_to_frame(result.rows)
        if args.output:
            try:
                path = write_frame(frame, args.output, sheet_name=args.command)
            except ExportError as e:
                logger.error(f"export: {e}")
                return EXIT_FATAL
            logger.info(f"wrote {len(frame)} row(s) to {path}")
        else:
            print(render_table(frame, max_rows=args.max_rows))
    _print_summary(logger, result.summary)

    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.failed_feeds > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def _inspect_feed(logger, cfg, feed: str) -> int:
    url = cfg.feed_url(feed)
    if not url:
        logger.error(f"inspect: feed not configured: {feed} (known: {', '.join(sorted(cfg.feeds))})")
        return EXIT_FATAL
    with FeedFetcher(cfg.http) as fetcher:
        result = fetcher.fetch(feed, url)
    if not result.ok:
        return EXIT_PARTIAL_FAILURE
    parsed = parse_feed(feed, result.text, cfg)
    print(f"FEED: {feed} records={len(parsed)} dropped={len(parsed.dropped_lines)}")
    print(f"  headers={[h for h in parsed.headers if h]}")
    sample = feed_to_frame(parsed).head(INSPECT_SAMPLE_ROWS)
    print(render_table(sample))
    return EXIT_SUCCESS_ALL


def _login(logger, cfg, args: argparse.Namespace) -> int:
    store = StaticCredentialStore(cfg.users)
    if args.password_stdin:
        password = sys.stdin.readline().rstrip("\r\n")
    else:
        password = getpass.getpass("Password: ")
    role = store.verify(args.username, password)
    if role is None:
        logger.error("login: invalid username or password")
        return EXIT_FATAL
    logger.info(f"login: {args.username} role={role.value}")
    return EXIT_SUCCESS_ALL


def _submit_attendance(logger, cfg, args: argparse.Namespace) -> int:
    if not cfg.apps_script_url:
        logger.error("submit-attendance: apps_script_url is not configured")
        return EXIT_FATAL
    record = AttendanceRecord(
        timestamp="",
        name=args.name.strip(),
        date=normalize_date(args.date),
        working_status=args.status,
        reason_not_working=args.reason,
        place_of_visit=args.place,
        purpose_of_visit=args.purpose,
        working_hours=args.hours,
        outcome=args.outcome,
    )
    with AppsScriptClient(cfg.apps_script_url, cfg.http) as client:
        result = client.submit_attendance(record)
    if not result.ok:
        logger.error(f"submit-attendance: {result.message}")
        return EXIT_FATAL
    logger.info(f"submit-attendance: recorded {record.name} {record.date}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # only read sys.argv when argv is None; tests call main([...]) directly
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    if args.command in REPORT_FEEDS:
        return _run_report(logger, cfg, args)
    if args.command == "inspect":
        return _inspect_feed(logger, cfg, args.feed)
    if args.command == "login":
        return _login(logger, cfg, args)
    return _submit_attendance(logger, cfg, args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
