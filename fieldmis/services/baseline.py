from __future__ import annotations

from collections.abc import Iterable

from ..models.household import BaselineHousehold
from ..models.raw_record import RawRecord

"""Baseline household registry.

Column aliases are listed in preference order; the first alias found in the
sheet wins (see RawRecord.resolve).
"""

__all__ = [
    "FARMER_ID_ALIASES",
    "household_from_record",
    "load_baseline",
    "BASELINE_SEARCH_FIELDS",
]

FARMER_ID_ALIASES = ("FARMERID", "FID", "ID")
HH_HEAD_NAME_ALIASES = ("HHHEADNAME", "FARMERNAME", "NAME", "BENEFICIARYNAME")
CLUSTER_ALIASES = ("CLUSTER",)
GP_ALIASES = ("GP", "GRAMPANCHAYAT")
VILLAGE_ALIASES = ("VILLAGE",)
CATEGORY_ALIASES = ("CATEGORY", "CASTE")

BASELINE_SEARCH_FIELDS = ("hh_head_name", "farmer_id")


def household_from_record(record: RawRecord) -> BaselineHousehold:
    return BaselineHousehold(
        farmer_id=record.resolve(FARMER_ID_ALIASES),
        hh_head_name=record.resolve(HH_HEAD_NAME_ALIASES),
        cluster=record.resolve(CLUSTER_ALIASES),
        gp=record.resolve(GP_ALIASES),
        village=record.resolve(VILLAGE_ALIASES),
        category=record.resolve(CATEGORY_ALIASES),
        district=record.resolve(("DISTRICT",)),
        block=record.resolve(("BLOCK",)),
        spouse_name=record.resolve(("FATHER/HUSBANDNAME", "SPOUSENAME", "HUSBANDNAME")),
        age=record.resolve(("AGE",)),
        gender=record.resolve(("GENDER",)),
        tribe_name=record.resolve(("TRIBE_NAME", "TRIBE")),
        phone_number=record.resolve(("PHONENUMBER", "PHONE", "MOBILE")),
        submission_date=record.resolve(("SUBMISSIONDATE",)),
    )


def load_baseline(records: Iterable[RawRecord]) -> list[BaselineHousehold]:
    return [household_from_record(r) for r in records]
