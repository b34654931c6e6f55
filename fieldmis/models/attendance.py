from __future__ import annotations

from dataclasses import dataclass

"""AttendanceRecord model.

The attendance sheet is both the write log (rows appended through the Apps
Script endpoint / the Google Form) and the read model (its published CSV).
"""

__all__ = [
    "AttendanceRecord",
]


@dataclass(frozen=True)
class AttendanceRecord:
    timestamp: str
    name: str
    date: str  # D/M/YYYY as entered, normalized to DD/MM/YYYY on load
    working_status: str  # Working / Leave / Holiday
    reason_not_working: str
    place_of_visit: str
    purpose_of_visit: str
    working_hours: str
    outcome: str

    def to_payload(self) -> dict[str, str]:
        """Form payload understood by the Apps Script attendance handler."""
        return {
            "name": self.name,
            "date": self.date,
            "workingStatus": self.working_status,
            "reasonNotWorking": "" if self.working_status == "Working" else self.reason_not_working,
            "placeOfVisit": self.place_of_visit,
            "purposeOfVisit": self.purpose_of_visit,
            "workingHours": self.working_hours,
            "outcome": self.outcome,
        }
