from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account roles used for access control and profile collection selection."""

    STUDENT = "student"
    FACULTY = "faculty"
    HOD = "hod"
    COORDINATOR = "coordinator"
    SECURITY = "security"


class LogType(str, Enum):
    """Attendance event types stored on each log."""

    ENTRY = "ENTRY"
    EXIT = "EXIT"


class PresenceStatus(str, Enum):
    """Derived, per-day presence of a person (never stored)."""

    INSIDE = "INSIDE"
    LEFT = "LEFT"
    ABSENT = "ABSENT"


class TargetRole(str, Enum):
    STUDENT = "student"
    FACULTY = "faculty"
    ALL = "all"


class ImportKind(str, Enum):
    STUDENTS = "students"
    FACULTY = "faculty"
