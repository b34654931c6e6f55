from __future__ import annotations

from dataclasses import dataclass

"""AssetRecord model for the procurement / distribution sheet.

Each asset row walks a pipeline: ordered (purchased) -> received centrally ->
reached a field cluster -> distributed (issued). The per-cluster columns have
no stable header text and are addressed by column index.
"""

__all__ = [
    "AssetRecord",
    "ClusterStock",
    "CLUSTER_COLUMNS",
]

# (name, received, issued) column indexes for cluster 1..3
CLUSTER_COLUMNS: tuple[tuple[int, int, int], ...] = (
    (19, 21, 22),
    (23, 25, 26),
    (27, 29, 30),
)


@dataclass(frozen=True)
class ClusterStock:
    name: str
    received: float  # stock that reached the cluster
    distributed: float  # issued to beneficiaries


@dataclass(frozen=True)
class AssetRecord:
    id: str
    project_code: str
    budget_head: str
    activity_code: str
    asset_code: str
    asset_name: str
    date_of_purchase: str
    cost_per_unit: float
    hdfc_contribution: float
    community_contribution: float
    qty_purchased: float
    qty_received: float
    pending: float
    total_price: float
    payment_status: str
    asset_status: str
    clusters: tuple[ClusterStock, ...] = ()

    def cluster(self, index: int) -> ClusterStock:
        """0-based cluster stage; empty stage when the row lacks that cluster."""
        if 0 <= index < len(self.clusters):
            return self.clusters[index]
        return ClusterStock(name=f"Cluster {index + 1}", received=0.0, distributed=0.0)

    @property
    def total_distributed(self) -> float:
        return sum(c.distributed for c in self.clusters)
