from __future__ import annotations

from dataclasses import dataclass

"""Admin registries: media (photo) entries and maintenance bills."""

__all__ = [
    "MediaEntry",
    "MaintenanceBill",
    "DEFAULT_BILL_STATUS",
]

DEFAULT_BILL_STATUS = "Pending with me"


@dataclass(frozen=True)
class MediaEntry:
    url: str
    type: str  # "slider" | "gallery"
    description: str
    activity: str
    timestamp: str


@dataclass(frozen=True)
class MaintenanceBill:
    id: str
    date: str
    category: str
    description: str
    amount: float
    status: str
    bill_url: str
    timestamp: str
