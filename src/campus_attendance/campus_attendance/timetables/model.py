from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..common.validators import require_year

DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# Teaching periods in day order; "01:00 - 02:00" is afternoon, so plain string
# sorting would misplace it.
TIME_SLOTS = [
    "09:00 - 10:00",
    "10:00 - 11:00",
    "11:00 - 12:00",
    "12:00 - 01:00",
    "01:00 - 02:00",
    "02:00 - 03:00",
    "03:00 - 04:00",
]
PERIOD_ORDER = {t: i + 1 for i, t in enumerate(TIME_SLOTS)}


def period_of(time: str) -> int:
    return PERIOD_ORDER.get(time, 99)


def timetable_key(branch: str, year, section: str) -> str:
    return f"{branch}_{require_year(year)}_{section}"


@dataclass(frozen=True)
class Slot:
    time: str
    subject_code: str
    subject_name: str
    faculty_id: str = ""
    faculty_name: str = ""
    unmapped: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "subject_code": self.subject_code,
            "subject_name": self.subject_name,
            "faculty_id": self.faculty_id,
            "faculty_name": self.faculty_name,
            "unmapped": self.unmapped,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Slot":
        return cls(
            time=str(d.get("time", "")),
            subject_code=str(d.get("subject_code", "")),
            subject_name=str(d.get("subject_name", "")),
            faculty_id=str(d.get("faculty_id") or ""),
            faculty_name=str(d.get("faculty_name") or ""),
            unmapped=bool(d.get("unmapped", False)),
        )


Schedule = Dict[str, List[Slot]]


def sort_slots(slots: List[Slot]) -> List[Slot]:
    return sorted(slots, key=lambda s: period_of(s.time))


def schedule_to_dict(schedule: Schedule) -> Dict[str, List[Dict[str, Any]]]:
    return {day: [s.to_dict() for s in slots] for day, slots in schedule.items()}


def schedule_from_dict(doc: Dict[str, Any]) -> Schedule:
    return {str(day): sort_slots([Slot.from_dict(s) for s in slots or []]) for day, slots in (doc or {}).items()}


@dataclass(frozen=True)
class Timetable:
    """One class's weekly timetable (``timetables/<branch>_<year>_<section>``)."""

    branch: str
    year: int
    section: str
    schedule: Schedule = field(default_factory=dict)
    version: int = 0
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> str:
        return timetable_key(self.branch, self.year, self.section)

    def slots_for(self, day: str) -> List[Slot]:
        return list(self.schedule.get(day, []))


@dataclass(frozen=True)
class TeachingSlot:
    """A slot from some class timetable, seen from the teaching faculty's side."""

    day: str
    slot: Slot
    context: str
