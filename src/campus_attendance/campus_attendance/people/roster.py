from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..common.departments import broad_group, strict_branch
from ..common.validators import loose_int
from .model import StudentProfile

_ANY_DEPT = {"", "ALL", "ALLDEPTS"}


@dataclass(frozen=True)
class RosterFilter:
    dept: Optional[str] = None
    branch: Optional[str] = None
    year: Optional[str] = None
    section: Optional[str] = None
    search: str = ""


def year_matches(stored, wanted) -> bool:
    """Imported years may be 1, "1" or "1st"; compare on the number."""

    if wanted in (None, ""):
        return True
    return loose_int(stored) is not None and loose_int(stored) == loose_int(wanted)


def filter_roster(students: Iterable[StudentProfile], flt: RosterFilter) -> List[StudentProfile]:
    dept = broad_group(flt.dept)
    branch = strict_branch(flt.branch) if flt.branch else ""
    needle = (flt.search or "").strip().lower()

    out: List[StudentProfile] = []
    for s in students:
        # Broad group: HOD scope (AIDS sees AID and CSM students).
        if dept not in _ANY_DEPT and broad_group(s.dept) != dept:
            continue
        # Strict branch: AID never matches CSM.
        if branch and strict_branch(s.dept) != branch:
            continue
        if flt.section and str(s.section) != str(flt.section):
            continue
        if not year_matches(s.year, flt.year):
            continue
        if needle and needle not in (s.name or "").lower() and needle not in s.profile_id.lower():
            continue
        out.append(s)
    return out
