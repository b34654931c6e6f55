from __future__ import annotations

from collections.abc import Iterable

from ..csvfeed.identifiers import parse_number
from ..models.raw_record import RawRecord
from ..models.registry import DEFAULT_BILL_STATUS, MaintenanceBill, MediaEntry

"""Admin registries read back from the sheets the write actions append to.

Both lists are returned newest first (the sheets are append-only, so this is
simply reverse row order). Blank matched cells fall through to the next alias.
"""

__all__ = [
    "load_media",
    "load_bills",
]


def load_media(records: Iterable[RawRecord]) -> list[MediaEntry]:
    out = []
    for r in records:
        url = r.resolve(("URL", "LINK", "IMAGE", "PHOTO"), skip_empty=True)
        if not url:
            continue
        out.append(MediaEntry(
            url=url,
            type=(r.resolve(("TYPE", "CAT", "PLACEMENT"), skip_empty=True) or "gallery").lower(),
            description=r.resolve(("DESC", "CAPTION"), skip_empty=True),
            activity=r.resolve(("ACTIVITY", "ACT", "WORK"), skip_empty=True) or "Uncategorized",
            timestamp=r.resolve(("TIMESTAMP",), skip_empty=True),
        ))
    out.reverse()
    return out


def load_bills(records: Iterable[RawRecord]) -> list[MaintenanceBill]:
    out = []
    for r in records:
        bill_id = r.resolve(("ID",), skip_empty=True)
        if not bill_id:
            continue
        out.append(MaintenanceBill(
            id=bill_id,
            date=r.resolve(("DATE",), skip_empty=True),
            category=r.resolve(("CATEGORY",), skip_empty=True),
            description=r.resolve(("DESCRIPTION",), skip_empty=True),
            amount=parse_number(r.resolve(("AMOUNT",), skip_empty=True)),
            status=r.resolve(("STATUS",), skip_empty=True) or DEFAULT_BILL_STATUS,
            bill_url=r.resolve(("BILLURL", "URL", "BILL"), skip_empty=True),
            timestamp=r.resolve(("TIMESTAMP",), skip_empty=True),
        ))
    out.reverse()
    return out
