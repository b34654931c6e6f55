from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from ..csvfeed.identifiers import parse_number
from ..models.mis import MISComponent
from ..models.raw_record import RawRecord

"""Targets vs achievements.

Achievements are a log (one row per reported value, appended through the
``addAchievement`` write action). They are summed per component ID and joined
onto the targets sheet by exact ID.
"""

__all__ = [
    "sum_achievements",
    "load_components",
    "summarize_components",
]


def sum_achievements(records: Iterable[RawRecord]) -> dict[str, float]:
    sums: dict[str, float] = {}
    for r in records:
        comp_id = r.get("ID")
        if comp_id:
            sums[comp_id] = sums.get(comp_id, 0.0) + parse_number(r.get("VALUE"))
    return sums


def load_components(targets: Iterable[RawRecord], achievements: dict[str, float]) -> list[MISComponent]:
    out = []
    for r in targets:
        comp_id = r.get("ID")
        if not comp_id:
            continue
        out.append(MISComponent(
            id=comp_id,
            name=r.get("NAME") or "Unknown Component",
            category=r.get("CATEGORY") or "General",
            uom=r.get("UOM") or "Units",
            outcome=r.get("OUTCOME") or "N/A",
            csr_goal=r.get("CSRGOAL") or r.get("CSR_GOAL") or "N/A",
            target=parse_number(r.get("TARGET")),
            achieved=achievements.get(comp_id, 0.0),
        ))
    return out


def summarize_components(components: Sequence[MISComponent]) -> dict[str, Any]:
    n = len(components)
    return {
        "components": n,
        "completed": sum(1 for c in components if c.target > 0 and c.achieved >= c.target),
        "average_progress": sum(c.progress_percent for c in components) / n if n else 0.0,
    }
