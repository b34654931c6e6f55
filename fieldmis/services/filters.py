from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

"""Location / activity filtering shared by the registry reports.

"All" means no constraint. Option lists cascade: GPs are limited to the chosen
cluster, villages to the chosen cluster and GP.
"""

__all__ = [
    "ALL",
    "RecordFilter",
    "FilterOptions",
    "apply_filter",
    "filter_options",
]

ALL = "All"

T = TypeVar("T")


def _attr(item: Any, name: str) -> str | None:
    value = getattr(item, name, None)
    return None if value is None else str(value)


@dataclass(frozen=True)
class RecordFilter:
    cluster: str = ALL
    gp: str = ALL
    village: str = ALL
    activity: str = ALL
    search: str = ""

    def _field_ok(self, item: Any, name: str, wanted: str) -> bool:
        if wanted == ALL:
            return True
        value = _attr(item, name)
        # entities without the field (e.g. households have no activity) are not constrained
        return value is None or value == wanted

    def matches(self, item: Any, search_fields: Sequence[str] = ()) -> bool:
        if not (
            self._field_ok(item, "cluster", self.cluster)
            and self._field_ok(item, "gp", self.gp)
            and self._field_ok(item, "village", self.village)
            and self._field_ok(item, "activity", self.activity)
        ):
            return False
        query = self.search.strip().lower()
        if not query:
            return True
        return any(query in (_attr(item, f) or "").lower() for f in search_fields)


@dataclass(frozen=True)
class FilterOptions:
    clusters: list[str]
    gps: list[str]
    villages: list[str]
    activities: list[str]


def apply_filter(items: Iterable[T], flt: RecordFilter, search_fields: Sequence[str] = ()) -> list[T]:
    return [item for item in items if flt.matches(item, search_fields)]


def _options(items: Iterable[Any], name: str) -> list[str]:
    values = {v for v in (_attr(item, name) for item in items) if v}
    return [ALL, *sorted(values)]


def filter_options(items: Sequence[Any], flt: RecordFilter | None = None) -> FilterOptions:
    flt = flt or RecordFilter()
    in_cluster = [i for i in items if flt.cluster == ALL or _attr(i, "cluster") == flt.cluster]
    in_gp = [i for i in in_cluster if flt.gp == ALL or _attr(i, "gp") == flt.gp]
    return FilterOptions(
        clusters=_options(items, "cluster"),
        gps=_options(in_cluster, "gp"),
        villages=_options(in_gp, "village"),
        activities=_options(items, "activity"),
    )
