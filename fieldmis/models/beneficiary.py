from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "Beneficiary",
]


@dataclass(frozen=True)
class Beneficiary:
    """Activity-level beneficiary registered against a household."""
    hh_id: str
    hh_head_name: str
    activity: str
    beneficiary_name: str
    beneficiary_id: str
    age: int
    gender: str
    phone_number: str
    cluster: str
    gp: str
    village: str
