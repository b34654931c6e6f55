from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from ..csvfeed.identifiers import parse_amount
from ..models.asset import CLUSTER_COLUMNS, AssetRecord, ClusterStock
from ..models.raw_record import RawRecord
from .filters import ALL
from .kpi import sum_by, top_n, total

"""Asset procurement and distribution tracking.

The asset sheet is parsed with the budget-sheet header variant (underscores
removed). Named columns are resolved by alias; the three cluster stages are
read by column position (see CLUSTER_COLUMNS).
"""

__all__ = [
    "MIN_FIELDS",
    "TOP_ACTIVITIES",
    "asset_from_record",
    "load_assets",
    "filter_assets",
    "summarize_assets",
]

MIN_FIELDS = 10
TOP_ACTIVITIES = 5


def asset_from_record(record: RawRecord) -> AssetRecord | None:
    if len(record.values) < MIN_FIELDS:
        return None
    clusters = tuple(
        ClusterStock(
            name=record.at(name_idx) or f"Cluster {n}",
            received=parse_amount(record.at(recv_idx)),
            distributed=parse_amount(record.at(issued_idx)),
        )
        for n, (name_idx, recv_idx, issued_idx) in enumerate(CLUSTER_COLUMNS, start=1)
    )
    return AssetRecord(
        id=record.resolve(("SNO", "ID")),
        project_code=record.resolve(("PROJECTCODE",)),
        budget_head=record.resolve(("BUDGETHEAD",)),
        activity_code=record.resolve(("ACTIVITYCODE",)),
        asset_code=record.resolve(("ASSETCODE",)),
        asset_name=record.resolve(("ASSETNAME",)),
        date_of_purchase=record.resolve(("DATEOFPURCHASE",)),
        cost_per_unit=parse_amount(record.resolve(("COSTOFUNIT",))),
        hdfc_contribution=parse_amount(record.resolve(("HDFCCONTRIBUTION",))),
        community_contribution=parse_amount(record.resolve(("COMMUNITYCONTRIBUTION",))),
        qty_purchased=parse_amount(record.resolve(("NUMBEROFASSETPURCHASED",))),
        qty_received=parse_amount(record.resolve(("HOWMANYRECEIVED",))),
        pending=parse_amount(record.resolve(("PENDING",))),
        total_price=parse_amount(record.resolve(("TOTALPRICE",))),
        payment_status=record.resolve(("PAYMENTSTATUS",)),
        asset_status=record.resolve(("STATUSOFTHEASSET",)),
        clusters=clusters,
    )


def load_assets(records: Iterable[RawRecord]) -> list[AssetRecord]:
    out = []
    for record in records:
        asset = asset_from_record(record)
        if asset is not None and asset.asset_name:
            out.append(asset)
    return out


def filter_assets(
    assets: Sequence[AssetRecord],
    *,
    budget_head: str = ALL,
    cluster: int | None = None,
    search: str = "",
) -> list[AssetRecord]:
    """Filter by budget head, cluster stage (0-based, any stock or issue) and text."""
    query = search.strip().lower()
    out = []
    for a in assets:
        if query and query not in a.asset_name.lower() and query not in a.activity_code.lower():
            continue
        if budget_head != ALL and a.budget_head != budget_head:
            continue
        if cluster is not None:
            stage = a.cluster(cluster)
            if not (stage.received > 0 or stage.distributed > 0):
                continue
        out.append(a)
    return out


def summarize_assets(assets: Sequence[AssetRecord]) -> dict[str, Any]:
    investment = total(assets, lambda a: a.total_price)
    # substring test, so "Unpaid" also counts as paid
    paid = [a for a in assets if "paid" in a.payment_status.lower()]
    paid_total = total(paid, lambda a: a.total_price)
    distributed = [total(assets, lambda a, i=i: a.cluster(i).distributed) for i in range(len(CLUSTER_COLUMNS))]
    return {
        "total_investment": investment,
        "hdfc_total": total(assets, lambda a: a.hdfc_contribution),
        "community_total": total(assets, lambda a: a.community_contribution),
        "qty_purchased": total(assets, lambda a: a.qty_purchased),
        "qty_received": total(assets, lambda a: a.qty_received),
        "pending": total(assets, lambda a: a.pending),
        "paid_total": paid_total,
        "payment_progress": paid_total / investment * 100 if investment > 0 else 0.0,
        "distributed_by_cluster": distributed,
        "total_distributed": sum(distributed),
        "top_activities": top_n(sum_by(assets, lambda a: a.activity_code, lambda a: a.total_price), TOP_ACTIVITIES),
    }
