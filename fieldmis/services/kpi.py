from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

"""KPI aggregation primitives.

Every helper makes a single pass and accumulates into a plain dict keyed by a
categorical field. Dicts keep first-seen order, and all rankings use Python's
stable sort, so ties come out in original record order.

Percentages divide by ``total or 1`` so an empty record set yields zeros
rather than a ZeroDivisionError.
"""

__all__ = [
    "Share",
    "sum_by",
    "count_by",
    "unique_count",
    "total",
    "percent_distribution",
    "ranked_shares",
    "top_n",
]

T = TypeVar("T")


@dataclass(frozen=True)
class Share:
    label: str
    value: float
    percent: float


def total(items: Iterable[T], value: Callable[[T], float]) -> float:
    return sum(value(item) for item in items)


def sum_by(items: Iterable[T], key: Callable[[T], str], value: Callable[[T], float]) -> dict[str, float]:
    acc: dict[str, float] = {}
    for item in items:
        k = key(item)
        acc[k] = acc.get(k, 0.0) + value(item)
    return acc


def count_by(items: Iterable[T], key: Callable[[T], str]) -> dict[str, int]:
    acc: dict[str, int] = {}
    for item in items:
        k = key(item)
        acc[k] = acc.get(k, 0) + 1
    return acc


def unique_count(items: Iterable[T], key: Callable[[T], Any]) -> int:
    return len({key(item) for item in items})


def percent_distribution(values: Mapping[str, float], denominator: float | None = None) -> list[Share]:
    """Shares in insertion order; denominator defaults to the sum of values."""
    base = sum(values.values()) if denominator is None else denominator
    base = base or 1
    return [Share(label=k, value=v, percent=v / base * 100) for k, v in values.items()]


def ranked_shares(values: Mapping[str, float], denominator: float | None = None) -> list[Share]:
    """``percent_distribution`` sorted by descending percent (stable)."""
    return sorted(percent_distribution(values, denominator), key=lambda s: -s.percent)


def top_n(values: Mapping[str, float], n: int) -> list[tuple[str, float]]:
    return sorted(values.items(), key=lambda kv: -kv[1])[:n]
