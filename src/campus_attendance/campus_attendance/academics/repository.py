from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AcademicStructure, FacultyAssignment


class StructureRepository(Protocol):
    def get(self) -> Optional[AcademicStructure]:
        raise NotImplementedError

    def save(self, structure: AcademicStructure, *, expected_version: Optional[int]) -> int:
        """Write the structure document.

        When ``expected_version`` is given the write only succeeds if the stored
        version still equals it. Returns the new version, or -1 on mismatch.
        """

        raise NotImplementedError


class AssignmentRepository(Protocol):
    def create(
        self,
        *,
        faculty_id: str,
        faculty_name: str,
        branch: str,
        year: str,
        section: str,
        subject_code: str,
        subject_name: str,
        academic_year: Optional[str],
        assigned_by: str,
        assigned_at: datetime,
    ) -> int:
        raise NotImplementedError

    def delete(self, assignment_id: int) -> bool:
        raise NotImplementedError

    def list_active_for_faculty(self, faculty_id: str) -> Sequence[FacultyAssignment]:
        raise NotImplementedError

    def list_active_for_branch(self, branch: str) -> Sequence[FacultyAssignment]:
        raise NotImplementedError
