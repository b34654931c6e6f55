from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from fieldmis.csvfeed.parser import parse_records
from fieldmis.export.writer import ExportError, feed_to_frame, flatten_row, render_table, rows_to_frame, write_frame
from fieldmis.models.asset import AssetRecord, ClusterStock
from fieldmis.models.household import ContributionTransaction


def _txn(name: str, amount: float) -> ContributionTransaction:
    return ContributionTransaction(
        id=f"1-ASC-{name}", farmer_id="1", name=name, cluster="North", gp="GP1",
        village="V1", category="ST", activity="ASC", amount=amount, date="01/01/2024",
    )


def _asset() -> AssetRecord:
    return AssetRecord(
        id="1", project_code="P", budget_head="Livestock", activity_code="GOAT", asset_code="A1",
        asset_name="Goat kit", date_of_purchase="", cost_per_unit=1.0, hdfc_contribution=0.0,
        community_contribution=0.0, qty_purchased=1.0, qty_received=1.0, pending=0.0,
        total_price=1.0, payment_status="Paid", asset_status="",
        clusters=(ClusterStock("Kundra", 2.0, 1.0), ClusterStock("Jeypore", 0.0, 0.0)),
    )


def test_rows_to_frame():
    frame = rows_to_frame([_txn("Asha", 10.0), _txn("Ravi", 5.0)])
    assert list(frame["name"]) == ["Asha", "Ravi"]
    assert frame["amount"].sum() == 15.0


def test_asset_clusters_flattened():
    row = flatten_row(_asset())
    assert row["cluster1_name"] == "Kundra"
    assert row["cluster1_distributed"] == 1.0
    assert row["cluster2_name"] == "Jeypore"
    assert "clusters" not in row


def test_feed_to_frame_uses_normalized_headers():
    frame = feed_to_frame(parse_records("Farmer ID,,Name\n7,x,Asha\n"))
    assert list(frame.columns) == ["FARMERID", "NAME"]
    assert frame.iloc[0]["NAME"] == "Asha"


def test_write_csv(tmp_path: Path):
    path = write_frame(rows_to_frame([_txn("Asha", 10.0)]), tmp_path / "out" / "report.csv")
    back = pd.read_csv(path, encoding="utf-8-sig")
    assert list(back["name"]) == ["Asha"]


def test_write_xlsx(tmp_path: Path):
    path = write_frame(rows_to_frame([_txn("Asha", 10.0)]), tmp_path / "report.xlsx", sheet_name="contributions")
    back = pd.read_excel(path, sheet_name="contributions", engine="openpyxl")
    assert list(back["name"]) == ["Asha"]


def test_unsupported_suffix(tmp_path: Path):
    with pytest.raises(ExportError, match="unsupported output format"):
        write_frame(pd.DataFrame(), tmp_path / "report.json")


def test_render_table():
    assert render_table(pd.DataFrame()) == "(no rows)"
    assert "Asha" in render_table(rows_to_frame([_txn("Asha", 10.0)]))
