from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from ..csvfeed.parser import ParsedFeed

"""Tabular output of report rows with pandas.

Report entities are flat frozen dataclasses except AssetRecord, whose cluster
stages are expanded to ``cluster<N>_<field>`` columns.
"""

__all__ = [
    "ExportError",
    "SUPPORTED_SUFFIXES",
    "flatten_row",
    "rows_to_frame",
    "feed_to_frame",
    "write_frame",
    "render_table",
]

SUPPORTED_SUFFIXES = (".csv", ".xlsx")


class ExportError(Exception):
    pass


def flatten_row(row: Any) -> dict[str, Any]:
    data = asdict(row) if is_dataclass(row) else dict(row)
    out: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, (list, tuple)) and value and all(isinstance(v, dict) for v in value):
            for n, nested in enumerate(value, start=1):
                for nk, nv in nested.items():
                    out[f"{key.rstrip('s')}{n}_{nk}"] = nv
        else:
            out[key] = value
    return out


def rows_to_frame(rows: Sequence[Any]) -> pd.DataFrame:
    return pd.DataFrame([flatten_row(r) for r in rows])


def feed_to_frame(feed: ParsedFeed) -> pd.DataFrame:
    """Parsed records as a frame keyed by normalized header (blank headers dropped)."""
    columns = [h for h in feed.headers if h]
    return pd.DataFrame([r.fields for r in feed.records], columns=columns)


def write_frame(frame: pd.DataFrame, path: Path, sheet_name: str = "Report") -> Path:
    """Write CSV (utf-8-sig, for spreadsheet apps) or XLSX depending on suffix."""
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ExportError(f"unsupported output format: {path.suffix or '<none>'} (use .csv or .xlsx)")
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        if suffix == ".csv":
            frame.to_csv(path, index=False, encoding="utf-8-sig")
        else:
            with pd.ExcelWriter(path, engine="openpyxl") as writer:
                frame.to_excel(writer, sheet_name=sheet_name[:31], index=False)
    except OSError as e:
        raise ExportError(f"failed to write {path}: {e}") from e
    return path


def render_table(frame: pd.DataFrame, max_rows: int = 20) -> str:
    if frame.empty:
        return "(no rows)"
    return frame.to_string(index=False, max_rows=max_rows)
