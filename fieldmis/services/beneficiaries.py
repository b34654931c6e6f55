from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from ..csvfeed.identifiers import parse_number
from ..models.beneficiary import Beneficiary
from ..models.raw_record import RawRecord
from .kpi import count_by, percent_distribution, unique_count

"""Beneficiary registry (activity-level beneficiaries of each household).

The registry is exported from a mobile data-collection form, so each field may
appear either under its friendly header or under the form's group-prefixed
name (``bnf_section-bnf_name``, ``bnf_section_-bnf_name_`` ...).
"""

__all__ = [
    "MIN_FIELDS",
    "beneficiary_from_record",
    "load_beneficiaries",
    "gender_label",
    "summarize_beneficiaries",
    "BENEFICIARY_SEARCH_FIELDS",
]

# rows with fewer parsed fields are treated as noise
MIN_FIELDS = 5

BENEFICIARY_SEARCH_FIELDS = ("beneficiary_name", "beneficiary_id", "hh_head_name")


def beneficiary_from_record(record: RawRecord) -> Beneficiary | None:
    if len(record.values) < MIN_FIELDS:
        return None
    age_raw = record.resolve(("Age", "bnf_section-age", "bnf_section_-age_"), skip_empty=True)
    return Beneficiary(
        hh_id=record.resolve(("HH Id", "HHID", "House Hold ID"), skip_empty=True),
        hh_head_name=record.resolve(("HH Head Name", "HHHEADNAME"), skip_empty=True),
        activity=record.resolve(("Activity", "activity_registration-activity"), skip_empty=True),
        beneficiary_name=record.resolve((
            "Beneficiary Name",
            "bnf_section-bnf_name",
            "bnf_section_-bnf_name_",
            "location-show_farmer_name",
        ), skip_empty=True),
        beneficiary_id=record.resolve((
            "Beneficiary ID",
            "bnf_section-adhaar_number",
            "bnf_section_-adhaar_number_",
            "location-show_farmer_id",
        ), skip_empty=True),
        age=int(parse_number(age_raw)),
        gender=record.resolve(("Gender", "bnf_section-gender", "bnf_section_-gender_"), skip_empty=True),
        phone_number=record.resolve(("phone number", "bnf_section-phone_number", "bnf_section_-phone_number_"), skip_empty=True),
        cluster=record.resolve(("cluster",), skip_empty=True),
        gp=record.resolve(("GP",), skip_empty=True),
        village=record.resolve(("village",), skip_empty=True),
    )


def load_beneficiaries(records: Iterable[RawRecord]) -> list[Beneficiary]:
    """Beneficiaries with a name; short and nameless rows are dropped."""
    out = []
    for record in records:
        b = beneficiary_from_record(record)
        if b is not None and b.beneficiary_name:
            out.append(b)
    return out


def gender_label(raw: str) -> str:
    g = (raw or "").strip().lower()
    if g.startswith("m"):
        return "Male"
    if g.startswith("f"):
        return "Female"
    return "Other"


def summarize_beneficiaries(items: Sequence[Beneficiary]) -> dict[str, Any]:
    n = len(items)
    return {
        "total": n,
        "activity_counts": count_by(items, lambda b: b.activity or "Unassigned"),
        "gender_split": percent_distribution(count_by(items, lambda b: gender_label(b.gender)), n),
        "average_age": sum(b.age for b in items) / n if n else 0.0,
        "unique_villages": unique_count(items, lambda b: b.village),
    }
