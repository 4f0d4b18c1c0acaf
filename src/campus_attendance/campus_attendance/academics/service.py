from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import loose_int, require_non_empty, require_year
from ..core.enums import Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..users.model import Account
from ..users.repository import AccountRepository
from .model import DEFAULT_STRUCTURE, AcademicStructure, FacultyAssignment, Subject
from .repository import AssignmentRepository, StructureRepository

logger = logging.getLogger(__name__)


def _upper_unique(values: Iterable[str]) -> List[str]:
    out: List[str] = []
    for v in values:
        v = str(v).strip().upper()
        if v and v not in out:
            out.append(v)
    return out


def normalize_structure(structure: AcademicStructure) -> AcademicStructure:
    """Upper-case and de-duplicate branches/sections; drop department-map
    references to branches that no longer exist."""

    branches = _upper_unique(structure.branches)
    sections = _upper_unique(structure.sections)
    years = sorted({int(y) for y in structure.years})

    dept_map = {}
    for dept, mapped in structure.department_map.items():
        dept = str(dept).strip().upper()
        if not dept:
            continue
        dept_map[dept] = [b for b in _upper_unique(mapped) if b in branches]

    subjects = []
    seen = set()
    for s in structure.subjects:
        code = str(s.code).strip().upper()
        if not code or code in seen:
            continue
        seen.add(code)
        subjects.append(Subject(code=code, name=s.name.strip(), branch=s.branch.strip().upper(), year=int(s.year)))

    return replace(
        structure,
        branches=branches,
        years=years,
        sections=sections,
        subjects=subjects,
        department_map=dept_map,
    )


def available_branches(structure: AcademicStructure, coordinator_dept: Optional[str]) -> List[str]:
    """Branches a coordinator of ``coordinator_dept`` may manage."""

    dept = (coordinator_dept or "").strip().upper()
    mapped = structure.department_map.get(dept) or []
    if mapped:
        return list(mapped)
    if dept and dept in structure.branches:
        return [dept]
    return list(structure.branches)


class AcademicService:
    def __init__(
        self,
        structure: StructureRepository,
        assignments: AssignmentRepository,
        accounts: AccountRepository,
    ):
        self._structure = structure
        self._assignments = assignments
        self._accounts = accounts

    # ---- structure document ----
    def get_structure(self) -> AcademicStructure:
        current = self._structure.get()
        if current:
            return current

        version = self._structure.save(DEFAULT_STRUCTURE, expected_version=0)
        if version < 0:
            # Someone else initialized it first.
            current = self._structure.get()
            if current:
                return current
            raise ConflictError("Academic structure changed while initializing")

        logger.info("Initialized default academic structure")
        return replace(DEFAULT_STRUCTURE, version=version)

    def update_structure(self, structure: AcademicStructure, *, expected_version: int) -> AcademicStructure:
        structure = normalize_structure(structure)
        if not structure.branches:
            raise ValidationError("At least one branch is required")

        version = self._structure.save(structure, expected_version=int(expected_version))
        if version < 0:
            logger.warning("Academic structure conflict: expected version %s", expected_version)
            raise ConflictError("Academic structure was modified by someone else. Reload and try again.")
        return replace(structure, version=version)

    def available_branches(self, coordinator_dept: Optional[str]) -> List[str]:
        return available_branches(self.get_structure(), coordinator_dept)

    # ---- faculty assignments ----
    def assign_faculty(
        self,
        *,
        faculty_id: str,
        faculty_name: str,
        branch: str,
        year,
        section: str,
        subject_code: str,
        assigned_by: str,
        academic_year: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> int:
        faculty_id = require_non_empty(faculty_id, "Faculty")
        branch = require_non_empty(branch, "Branch").upper()
        section = require_non_empty(section, "Section").upper()
        subject_code = require_non_empty(subject_code, "Subject").upper()
        year_num = require_year(year)

        structure = self.get_structure()
        if branch not in structure.branches:
            raise ValidationError(f"Invalid Branch '{branch}'")
        if section not in structure.sections:
            raise ValidationError(f"Invalid Section '{section}'")
        subject = structure.subject_by_code(subject_code)
        if not subject:
            raise ValidationError(f"Unknown subject '{subject_code}'")

        assignment_id = self._assignments.create(
            faculty_id=faculty_id,
            faculty_name=(faculty_name or "").strip() or faculty_id,
            branch=branch,
            year=str(year_num),
            section=section,
            subject_code=subject.code,
            subject_name=subject.name,
            academic_year=academic_year,
            assigned_by=assigned_by,
            assigned_at=now or now_local(),
        )
        logger.info(
            "Assigned %s to %s for %s_%s_%s by %s", faculty_id, subject.code, branch, year_num, section, assigned_by
        )
        return assignment_id

    def delete_assignment(self, assignment_id: int) -> None:
        if not self._assignments.delete(int(assignment_id)):
            raise NotFoundError("Assignment not found")

    def my_assignments(self, faculty_id: str) -> Sequence[FacultyAssignment]:
        return self._assignments.list_active_for_faculty(faculty_id)

    def department_assignments(self, branch: str) -> Sequence[FacultyAssignment]:
        return self._assignments.list_active_for_branch(branch)

    def class_assignments(self, branch: str, year, section: str) -> List[FacultyAssignment]:
        """Active assignments of one class.

        The store is filtered by branch only; year may be stored as text or a
        number depending on the import source, so it is compared numerically here.
        """

        wanted_year = loose_int(year)
        section = (section or "").strip().upper()
        return [
            a
            for a in self._assignments.list_active_for_branch((branch or "").strip().upper())
            if loose_int(a.year) == wanted_year and a.section == section
        ]

    def list_faculty(self) -> Sequence[Account]:
        return self._accounts.list_by_role(Role.FACULTY)
