from __future__ import annotations

from dataclasses import dataclass

"""MIS component model (targets sheet joined with summed achievements)."""

__all__ = [
    "MISComponent",
]


@dataclass(frozen=True)
class MISComponent:
    id: str
    name: str
    category: str
    uom: str  # unit of measure
    outcome: str
    csr_goal: str
    target: float
    achieved: float

    @property
    def progress_percent(self) -> float:
        """Achieved / target as a percentage, capped at 100 (0 when no target)."""
        if self.target == 0:
            return 0.0
        return min(self.achieved / self.target * 100, 100.0)
