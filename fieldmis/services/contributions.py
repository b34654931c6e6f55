from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from ..csvfeed.identifiers import normalize_id, parse_amount, parse_date_timestamp
from ..csvfeed.parser import ParsedFeed
from ..logging.error_log import ErrorLogBuffer
from ..models.household import BaselineHousehold, ContributionTransaction
from ..models.raw_record import RawRecord, normalize_header
from .baseline import FARMER_ID_ALIASES, household_from_record
from .kpi import ranked_shares, sum_by, total, unique_count

"""Contribution reconciliation: baseline registry x wide contribution log.

Steps:
1. baseline map: normalized farmer id -> household. Insertion is unconditional,
   so a later row with the same id replaces an earlier one (last wins).
2. activity detection: which configured activity fragments occur as a
   substring of some contribution header.
3. rows whose normalized id is blank or not in the baseline map are skipped.
   They are counted and written to the error log, never shown as transactions.
4. every detected activity cell parsing to an amount > 0 becomes one
   transaction carrying the household's identity and location.
5. order: newest date first, then name ascending ignoring case. Unparseable
   dates sort as epoch 0 (last).
"""

__all__ = [
    "DATE_ALIASES",
    "ContributionReconciliation",
    "build_baseline_map",
    "detect_activity_columns",
    "explode_contributions",
    "reconcile_contributions",
    "summarize_contributions",
    "CONTRIBUTION_SEARCH_FIELDS",
]

logger = logging.getLogger(__name__)

DATE_ALIASES = ("DATE", "TIMESTAMP", "TIME", "SUBMISSIONDATE")
MISSING_DATE = "N/A"

CONTRIBUTION_SEARCH_FIELDS = ("name", "farmer_id", "activity")


@dataclass
class ContributionReconciliation:
    transactions: list[ContributionTransaction]
    activities: list[str]  # detected activity labels, in configured order
    baseline_size: int = 0  # distinct normalized ids in the baseline map
    unmatched_rows: list[int] = field(default_factory=list)  # contribution line numbers


def build_baseline_map(records: Iterable[RawRecord]) -> dict[str, BaselineHousehold]:
    baseline: dict[str, BaselineHousehold] = {}
    for record in records:
        household = household_from_record(record)
        norm_id = normalize_id(household.farmer_id)
        if norm_id:
            baseline[norm_id] = household
    return baseline


def detect_activity_columns(headers: Sequence[str], activity_columns: Sequence[str]) -> list[str]:
    """Activity labels with at least one header containing them."""
    keys = [h for h in headers if h]
    found = []
    for label in activity_columns:
        fragment = normalize_header(label)
        if fragment and any(fragment in h for h in keys):
            found.append(label)
    return found


def explode_contributions(
    records: Sequence[RawRecord],
    baseline: dict[str, BaselineHousehold],
    activities: Sequence[str],
    unmatched: list[int] | None = None,
) -> list[ContributionTransaction]:
    """Join each contribution row to its household and emit one row per paid activity.

    Dates are read day-first, so "12/03/2024" sorts as 12 March 2024. A
    month-first reading would put it in December and change the order.
    """
    out: list[ContributionTransaction] = []
    for row_index, record in enumerate(records):
        norm_id = normalize_id(record.resolve(FARMER_ID_ALIASES))
        household = baseline.get(norm_id) if norm_id else None
        if household is None:
            if unmatched is not None:
                unmatched.append(record.line_number)
            continue

        date = record.resolve(DATE_ALIASES) or MISSING_DATE
        date_ts = parse_date_timestamp(date)
        for activity in activities:
            amount = parse_amount(record.resolve((activity,), skip_empty=True) or "0")
            if amount <= 0:
                continue
            out.append(ContributionTransaction(
                id=f"{norm_id}-{activity}-{row_index}",
                farmer_id=household.farmer_id,
                name=household.hh_head_name,
                cluster=household.cluster,
                gp=household.gp,
                village=household.village,
                category=household.category,
                activity=activity,
                amount=amount,
                date=date,
                date_ts=date_ts,
            ))

    # names compare case-insensitively; the raw name only breaks exact casefold ties
    out.sort(key=lambda t: (-t.date_ts, t.name.casefold(), t.name))
    return out


def reconcile_contributions(
    baseline_feed: ParsedFeed,
    contribution_feed: ParsedFeed,
    activity_columns: Sequence[str],
    error_log: ErrorLogBuffer | None = None,
) -> ContributionReconciliation:
    baseline = build_baseline_map(baseline_feed.records)
    activities = detect_activity_columns(contribution_feed.headers, activity_columns)
    logger.debug(f"baseline ids={len(baseline)} activity columns={activities}")

    unmatched: list[int] = []
    transactions = explode_contributions(contribution_feed.records, baseline, activities, unmatched)

    if unmatched:
        logger.info(f"contributions without a baseline household: {len(unmatched)} row(s) skipped")
        if error_log is not None:
            for line in unmatched:
                error_log.add("contributions", line, "UNMATCHED_BASELINE_ID", "no baseline household for farmer id")

    return ContributionReconciliation(
        transactions=transactions,
        activities=activities,
        baseline_size=len(baseline),
        unmatched_rows=unmatched,
    )


def summarize_contributions(transactions: Sequence[ContributionTransaction]) -> dict[str, Any]:
    amount_total = total(transactions, lambda t: t.amount)
    return {
        "total_amount": amount_total,
        "count": len(transactions),
        "unique_farmers": unique_count(transactions, lambda t: t.farmer_id),
        "cluster_share": ranked_shares(sum_by(transactions, lambda t: t.cluster, lambda t: t.amount), amount_total),
        "activity_share": ranked_shares(sum_by(transactions, lambda t: t.activity, lambda t: t.amount), amount_total),
    }
