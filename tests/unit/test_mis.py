from __future__ import annotations

import pytest

from fieldmis.csvfeed.parser import parse_records
from fieldmis.services.mis import load_components, sum_achievements, summarize_components

TARGETS = """ID,Name,Category,UOM,Outcome,CSR_Goal,Target
C1,Goat sheds,Livestock,Nos,Income,SDG1,100
C2,Farm ponds,Water,Nos,Irrigation,SDG6,200
C3,Trainings,,,,,0
,Orphan,,,,,10
"""

ACHIEVEMENTS = """ID,Value,GP
C1,30,GP1
C1,40,GP2
C2,500,GP1
,5,GP3
"""


def _components():
    sums = sum_achievements(parse_records(ACHIEVEMENTS).records)
    return load_components(parse_records(TARGETS).records, sums)


def test_sum_achievements_by_id():
    assert sum_achievements(parse_records(ACHIEVEMENTS).records) == {"C1": 70.0, "C2": 500.0}


def test_components_joined_and_defaulted():
    c1, c2, c3 = _components()
    assert c1.achieved == 70.0
    assert c1.csr_goal == "SDG1"
    assert c3.category == "General"
    assert c3.uom == "Units"
    assert c3.achieved == 0.0


def test_progress_capped_at_hundred():
    c1, c2, c3 = _components()
    assert c1.progress_percent == pytest.approx(70.0)
    assert c2.progress_percent == 100.0
    assert c3.progress_percent == 0.0


def test_summary():
    summary = summarize_components(_components())
    assert summary["components"] == 3
    assert summary["completed"] == 1
    assert summary["average_progress"] == pytest.approx(170.0 / 3)
