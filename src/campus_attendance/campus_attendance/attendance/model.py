from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import LogType, Role


@dataclass(frozen=True)
class AttendanceLog:
    """One gate scan. Append-only; person metadata is copied in for filtering."""

    person_id: str
    role: Role
    type: LogType
    gate_id: str
    timestamp: datetime
    log_date: str
    name: str
    dept: str
    roll_number: str
    year: Optional[str] = None
    log_id: Optional[int] = None


@dataclass(frozen=True)
class SecurityAlert:
    person_id: str
    name: str
    type: str
    reason: str
    timestamp: datetime
    alert_date: str
    gate_id: Optional[str] = None
    alert_id: Optional[int] = None


@dataclass(frozen=True)
class DailySummary:
    log_date: str
    entries: int
    exits: int
    inside_now: int
    alerts: int
