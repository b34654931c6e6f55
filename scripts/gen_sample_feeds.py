#!/usr/bin/env python3
"""Synthetic feed generator for local runs.

Writes a baseline household CSV and a wide contribution CSV shaped like the
published sheets, so the reports can be exercised with file:// style URLs or a
local static server:

  python -m http.server -d data 8000
  FIELDMIS_FEED_BASELINE=http://localhost:8000/baseline.csv ...

A share of contribution rows carries farmer ids missing from the baseline, and
some ids are zero-padded, to exercise the join and id normalization.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

CLUSTERS = {
    "Kundra": ["Kundra GP", "Digapur"],
    "Boipariguda": ["Mathalput", "Ramagiri"],
    "Jeypore": ["Umuri", "Jayantigiri"],
}
CATEGORIES = ["ST", "SC", "OBC", "General"]
ACTIVITIES = ["BYP-NS", "MOBILE IRR", "PROCESSING", "ASC", "CROP MOD",
              "BYP-BFE", "FISHERIES", "GOAT SHED", "ECO-FARMPOND", "FIXED IRRIG"]


def generate_baseline(households: int, rng: np.random.Generator) -> pd.DataFrame:
    clusters = rng.choice(list(CLUSTERS), households)
    gps = [rng.choice(CLUSTERS[c]) for c in clusters]
    return pd.DataFrame({
        "Farmer ID": [f"{i:03d}" for i in range(1, households + 1)],
        "HH Head Name": [f"Farmer {i}" for i in range(1, households + 1)],
        "Cluster": clusters,
        "GP": gps,
        "Village": [f"{gp} Village {rng.integers(1, 4)}" for gp in gps],
        "Category": rng.choice(CATEGORIES, households),
    })


def generate_contributions(baseline: pd.DataFrame, rows: int, unmatched_ratio: float,
                           rng: np.random.Generator) -> pd.DataFrame:
    known = baseline["Farmer ID"].str.lstrip("0").tolist()
    ids = []
    for _ in range(rows):
        if rng.random() < unmatched_ratio:
            ids.append(str(rng.integers(90_000, 99_999)))
        else:
            fid = str(rng.choice(known))
            # some rows keep the zero padding, some do not
            ids.append(fid.zfill(3) if rng.random() < 0.5 else fid)
    dates = pd.date_range("2024-01-01", "2024-12-31", periods=60)
    data: dict[str, list] = {
        "Timestamp": pd.DatetimeIndex(rng.choice(dates, rows)).strftime("%d/%m/%Y").tolist(),
        "Farmer ID": ids,
    }
    for activity in ACTIVITIES:
        amounts = rng.choice([0, 0, 0, 50, 100, 150, 250, 500], rows)
        data[f"{activity} (Rs)"] = [str(a) if a else "" for a in amounts]
    return pd.DataFrame(data)


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate synthetic baseline / contribution CSV feeds")
    parser.add_argument("output_dir", type=Path, nargs="?", default=Path("data"))
    parser.add_argument("--households", type=int, default=200)
    parser.add_argument("--rows", type=int, default=500, help="Contribution rows")
    parser.add_argument("--unmatched", type=float, default=0.05, help="Share of rows with unknown farmer ids")
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    if args.households <= 0 or args.rows <= 0:
        print("Error: --households and --rows must be positive", file=sys.stderr)
        return 1
    if not 0 <= args.unmatched <= 1:
        print("Error: --unmatched must be between 0 and 1", file=sys.stderr)
        return 1

    rng = np.random.default_rng(args.seed)
    baseline = generate_baseline(args.households, rng)
    contributions = generate_contributions(baseline, args.rows, args.unmatched, rng)

    args.output_dir.mkdir(parents=True, exist_ok=True)
    baseline_path = args.output_dir / "baseline.csv"
    contributions_path = args.output_dir / "contributions.csv"
    baseline.to_csv(baseline_path, index=False)
    contributions.to_csv(contributions_path, index=False)

    print(f"Created {baseline_path} ({len(baseline)} households)")
    print(f"Created {contributions_path} ({len(contributions)} rows)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
