from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.constants import STRUCTURE_DOC_ID
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, to_json
from .model import AcademicStructure, FacultyAssignment
from .repository import AssignmentRepository, StructureRepository


class MySQLStructureRepository(StructureRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[AcademicStructure]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT body, version, updated_at FROM academic_structure WHERE doc_id=%s",
                (STRUCTURE_DOC_ID,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AcademicStructure.from_document(
                from_json(r["body"], {}), version=int(r["version"]), updated_at=r.get("updated_at")
            )

    def save(self, structure: AcademicStructure, *, expected_version: Optional[int]) -> int:
        body = to_json(structure.to_document())
        now = datetime.now()
        with db_cursor(self._conn_factory) as (_, cur):
            if expected_version is None:
                cur.execute(
                    """
                    INSERT INTO academic_structure(doc_id, body, version, updated_at)
                    VALUES(%s,%s,1,%s)
                    ON DUPLICATE KEY UPDATE body=VALUES(body), version=version+1, updated_at=VALUES(updated_at)
                    """,
                    (STRUCTURE_DOC_ID, body, now),
                )
            elif int(expected_version) == 0:
                # First write: only if nobody created the document meanwhile.
                cur.execute(
                    "INSERT IGNORE INTO academic_structure(doc_id, body, version, updated_at) VALUES(%s,%s,1,%s)",
                    (STRUCTURE_DOC_ID, body, now),
                )
                if cur.rowcount == 0:
                    return -1
            else:
                cur.execute(
                    """
                    UPDATE academic_structure
                    SET body=%s, version=version+1, updated_at=%s
                    WHERE doc_id=%s AND version=%s
                    """,
                    (body, now, STRUCTURE_DOC_ID, int(expected_version)),
                )
                if cur.rowcount == 0:
                    return -1

            cur.execute("SELECT version FROM academic_structure WHERE doc_id=%s", (STRUCTURE_DOC_ID,))
            r = fetchone(cur)
            return int(r["version"]) if r else 0


def _to_assignment(r: dict) -> FacultyAssignment:
    return FacultyAssignment(
        assignment_id=int(r["assignment_id"]),
        faculty_id=r["faculty_id"],
        faculty_name=r.get("faculty_name") or "",
        branch=r["branch"],
        year=str(r["year"]),
        section=r["section"],
        subject_code=r["subject_code"],
        subject_name=r.get("subject_name") or "",
        academic_year=r.get("academic_year"),
        is_active=bool(r.get("is_active", 1)),
        assigned_by=r.get("assigned_by"),
        assigned_at=r.get("assigned_at"),
    )


_ASSIGNMENT_COLUMNS = """
    assignment_id, faculty_id, faculty_name, branch, year, section,
    subject_code, subject_name, academic_year, is_active, assigned_by, assigned_at
"""


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO faculty_assignments(
                    faculty_id, faculty_name, branch, year, section,
                    subject_code, subject_name, academic_year, is_active, assigned_by, assigned_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,1,%s,%s)
                """,
                (
                    faculty_id,
                    faculty_name,
                    branch,
                    str(year),
                    section,
                    subject_code,
                    subject_name,
                    academic_year,
                    assigned_by,
                    assigned_at,
                ),
            )
            return int(cur.lastrowid)

    def delete(self, assignment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM faculty_assignments WHERE assignment_id=%s", (int(assignment_id),))
            return cur.rowcount > 0

    def list_active_for_faculty(self, faculty_id: str) -> Sequence[FacultyAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ASSIGNMENT_COLUMNS} FROM faculty_assignments WHERE faculty_id=%s AND is_active=1",
                (faculty_id,),
            )
            return [_to_assignment(r) for r in fetchall(cur)]

    def list_active_for_branch(self, branch: str) -> Sequence[FacultyAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_ASSIGNMENT_COLUMNS} FROM faculty_assignments WHERE branch=%s AND is_active=1",
                (branch,),
            )
            return [_to_assignment(r) for r in fetchall(cur)]
