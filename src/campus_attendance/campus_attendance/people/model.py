from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Dict, Optional, Tuple, Type

from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    """Domain entity: a person profile keyed by its domain ID.

    Each role has its own variant below; raw import keys never reach these objects.
    """

    role: ClassVar[Role]

    profile_id: str
    name: str = "Unknown"
    email: Optional[str] = None
    dept: str = "N/A"
    mobile: Optional[str] = None
    barcode_id: Optional[str] = None
    uid: Optional[str] = None
    is_claimed: bool = False
    is_blocked: bool = False
    activated_at: Optional[datetime] = None

    @property
    def person_id(self) -> str:
        """ID used on attendance logs: linked account once claimed, else the domain ID."""
        return self.uid or self.profile_id


@dataclass(frozen=True)
class StudentProfile(Profile):
    role: ClassVar[Role] = Role.STUDENT

    year: Optional[str] = None
    section: str = "A"
    department_group: Optional[str] = None
    parent_mobile: Optional[str] = None
    mentor_id: Optional[str] = None

    @property
    def roll_number(self) -> str:
        return self.profile_id


@dataclass(frozen=True)
class FacultyProfile(Profile):
    role: ClassVar[Role] = Role.FACULTY

    designation: str = "Staff"

    @property
    def faculty_id(self) -> str:
        return self.profile_id


@dataclass(frozen=True)
class HodProfile(Profile):
    role: ClassVar[Role] = Role.HOD


@dataclass(frozen=True)
class CoordinatorProfile(Profile):
    role: ClassVar[Role] = Role.COORDINATOR


@dataclass(frozen=True)
class SecurityProfile(Profile):
    role: ClassVar[Role] = Role.SECURITY


PROFILE_TYPES: Dict[Role, Type[Profile]] = {
    Role.STUDENT: StudentProfile,
    Role.FACULTY: FacultyProfile,
    Role.HOD: HodProfile,
    Role.COORDINATOR: CoordinatorProfile,
    Role.SECURITY: SecurityProfile,
}

# Collection (table) holding each role's profiles.
COLLECTIONS: Dict[Role, str] = {
    Role.STUDENT: "students",
    Role.FACULTY: "faculty",
    Role.HOD: "hods",
    Role.COORDINATOR: "coordinators",
    Role.SECURITY: "security",
}


@dataclass(frozen=True)
class ResolvedPerson:
    """Result of resolving a scanned code: canonical person + role tag."""

    person_id: str
    role: Role
    name: str
    dept: str
    roll_number: str
    source: str
    profile: Optional[Profile] = None

    @property
    def stable_id(self) -> str:
        """Domain ID when a profile is known; unlike ``person_id`` it survives activation."""
        return self.profile.profile_id if self.profile else self.person_id

    @property
    def log_ids(self) -> Tuple[str, ...]:
        """Every person ID this person's logs may carry (before and after activation)."""
        if self.stable_id == self.person_id:
            return (self.person_id,)
        return (self.person_id, self.stable_id)

    @property
    def year(self) -> Optional[str]:
        return getattr(self.profile, "year", None)

    @property
    def parent_mobile(self) -> Optional[str]:
        return getattr(self.profile, "parent_mobile", None)

    @property
    def is_blocked(self) -> bool:
        return bool(self.profile and self.profile.is_blocked)
