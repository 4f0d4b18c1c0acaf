from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Subject:
    code: str
    name: str
    branch: str
    year: int


@dataclass(frozen=True)
class AcademicStructure:
    """The singleton structure document (``academic_structure/main``)."""

    branches: List[str] = field(default_factory=list)
    years: List[int] = field(default_factory=list)
    sections: List[str] = field(default_factory=list)
    subjects: List[Subject] = field(default_factory=list)
    department_map: Dict[str, List[str]] = field(default_factory=dict)
    version: int = 0
    updated_at: Optional[datetime] = None

    def subject_by_code(self, code: str) -> Optional[Subject]:
        for s in self.subjects:
            if s.code == code:
                return s
        return None

    def class_subjects(self, branch: str, year: int) -> List[Subject]:
        return [s for s in self.subjects if s.branch == branch and int(s.year) == int(year)]

    def to_document(self) -> Dict[str, Any]:
        return {
            "branches": list(self.branches),
            "years": list(self.years),
            "sections": list(self.sections),
            "subjects": [
                {"code": s.code, "name": s.name, "branch": s.branch, "year": int(s.year)} for s in self.subjects
            ],
            "departmentMap": {k: list(v) for k, v in self.department_map.items()},
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any], *, version: int = 0, updated_at: Optional[datetime] = None):
        return cls(
            branches=[str(b) for b in doc.get("branches") or []],
            years=[int(y) for y in doc.get("years") or []],
            sections=[str(s) for s in doc.get("sections") or []],
            subjects=[
                Subject(code=str(s["code"]), name=str(s.get("name", "")), branch=str(s.get("branch", "")), year=int(s.get("year", 0)))
                for s in doc.get("subjects") or []
            ],
            department_map={str(k): [str(b) for b in v] for k, v in (doc.get("departmentMap") or {}).items()},
            version=int(version),
            updated_at=updated_at,
        )


DEFAULT_STRUCTURE = AcademicStructure(
    branches=["CSE", "ECE", "EEE", "MECH", "CIVIL", "IT", "AIDS"],
    years=[1, 2, 3, 4],
    sections=["A", "B", "C", "D"],
    subjects=[
        Subject(code="CS201", name="Data Structures", branch="CSE", year=2),
        Subject(code="CS202", name="DBMS", branch="CSE", year=2),
        Subject(code="EC301", name="VLSI Design", branch="ECE", year=3),
    ],
)


@dataclass(frozen=True)
class FacultyAssignment:
    """A faculty-to-class-subject binding."""

    assignment_id: int
    faculty_id: str
    faculty_name: str
    branch: str
    year: str
    section: str
    subject_code: str
    subject_name: str
    academic_year: Optional[str] = None
    is_active: bool = True
    assigned_by: Optional[str] = None
    assigned_at: Optional[datetime] = None

    @property
    def class_key(self) -> str:
        return f"{self.branch}_{self.year}_{self.section}"
