from __future__ import annotations

from dataclasses import dataclass

"""Baseline household and contribution transaction models.

The baseline registry is the source of truth for beneficiary identity and
location. Contribution transactions are derived on every run by exploding the
wide contribution sheet (one column per activity) and joining each row to the
registry by normalized farmer id.
"""

__all__ = [
    "BaselineHousehold",
    "ContributionTransaction",
]


@dataclass(frozen=True)
class BaselineHousehold:
    farmer_id: str  # raw id as written in the registry (not normalized)
    hh_head_name: str
    cluster: str
    gp: str
    village: str
    category: str
    district: str = ""
    block: str = ""
    spouse_name: str = ""  # father / husband name
    age: str = ""
    gender: str = ""
    tribe_name: str = ""
    phone_number: str = ""
    submission_date: str = ""


@dataclass(frozen=True)
class ContributionTransaction:
    """One (beneficiary, activity, amount, date) row after the join."""
    id: str  # {normalized id}-{activity}-{contribution row index}
    farmer_id: str  # baseline raw id
    name: str
    cluster: str
    gp: str
    village: str
    category: str
    activity: str
    amount: float
    date: str  # as written in the sheet, "N/A" when absent
    date_ts: float = 0.0  # parsed sort key, 0.0 when unparseable
