from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..academics.model import AcademicStructure
from ..common.validators import loose_int
from ..core.constants import DEFAULT_IMPORT_CHUNK_SIZE, NOT_AVAILABLE
from ..core.enums import ImportKind, Role
from ..core.exceptions import ValidationError
from .model import FacultyProfile, Profile, StudentProfile
from .repository import PersonRepository

logger = logging.getLogger(__name__)

# Header names seen across the source spreadsheets, most specific first.
_ROLL_KEYS = ("RollNO", "rollNumber", "Roll Number", "id")
_STUDENT_DEPT_KEYS = ("Branch", "dept", "Department")
_YEAR_KEYS = ("year", "Year")
_SECTION_KEYS = ("Section", "section", "Sec")
_FACULTY_ID_KEYS = ("Faculty Id", "facultyId", "ID")
_FACULTY_DEPT_KEYS = ("Department", "dept")
_NAME_KEYS = ("Name", "name")
_EMAIL_KEYS = ("Email", "email")
_MOBILE_KEYS = ("Mobile No", "mobile")
_BARCODE_KEYS = ("Bio Metric Code", "barcodeId")


def _pick(row: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    """First non-blank value among ``keys``, as a stripped string."""

    for k in keys:
        v = row.get(k)
        if v is None:
            continue
        v = str(v).strip()
        if v:
            return v
    return None


@dataclass(frozen=True)
class PreviewRow:
    raw: Dict[str, Any]
    profile: Optional[Profile]
    errors: List[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        return "invalid" if self.errors else "valid"

    @property
    def is_valid(self) -> bool:
        return not self.errors and self.profile is not None


@dataclass(frozen=True)
class ImportStats:
    total: int
    success: int
    fail: int


def _validate_student(row: Mapping[str, Any], structure: Optional[AcademicStructure]) -> PreviewRow:
    errors: List[str] = []

    roll = _pick(row, _ROLL_KEYS)
    if not roll:
        errors.append("Missing Roll Number")

    dept = _pick(row, _STUDENT_DEPT_KEYS) or NOT_AVAILABLE
    year = _pick(row, _YEAR_KEYS)
    section = _pick(row, _SECTION_KEYS) or "A"

    if structure:
        if dept != NOT_AVAILABLE and dept not in structure.branches:
            errors.append(f"Invalid Branch '{dept}'")
        year_num = loose_int(year)
        if year_num is not None and year_num not in structure.years:
            errors.append(f"Invalid Year '{year}'")
        if structure.sections and section not in structure.sections:
            errors.append(f"Invalid Section '{section}'")

    profile = None
    if roll:
        profile = StudentProfile(
            profile_id=roll,
            name=_pick(row, _NAME_KEYS) or "Unknown",
            email=_pick(row, _EMAIL_KEYS),
            dept=dept,
            mobile=_pick(row, _MOBILE_KEYS),
            barcode_id=_pick(row, _BARCODE_KEYS) or roll,
            year=year,
            section=section,
            department_group=_pick(row, ("Department",)),
            parent_mobile=_pick(row, ("Parent No", "parentMobile")),
            mentor_id=_pick(row, ("Mentor No", "mentorId")),
        )
    return PreviewRow(raw=dict(row), profile=profile, errors=errors)


def _validate_faculty(row: Mapping[str, Any], structure: Optional[AcademicStructure]) -> PreviewRow:
    errors: List[str] = []

    fid = _pick(row, _FACULTY_ID_KEYS)
    if not fid:
        errors.append("Missing Faculty ID")

    dept = _pick(row, _FACULTY_DEPT_KEYS) or NOT_AVAILABLE
    if structure and dept != NOT_AVAILABLE and dept not in structure.branches:
        errors.append(f"Invalid Dept '{dept}'")

    profile = None
    if fid:
        profile = FacultyProfile(
            profile_id=fid,
            name=_pick(row, _NAME_KEYS) or "Unknown",
            email=_pick(row, _EMAIL_KEYS),
            dept=dept,
            mobile=_pick(row, _MOBILE_KEYS),
            barcode_id=_pick(row, _BARCODE_KEYS) or fid,
            designation=_pick(row, ("Designation",)) or "Staff",
        )
    return PreviewRow(raw=dict(row), profile=profile, errors=errors)


def validate_rows(
    rows: Sequence[Mapping[str, Any]],
    kind: ImportKind,
    structure: Optional[AcademicStructure] = None,
) -> List[PreviewRow]:
    """Normalize loosely keyed spreadsheet rows into typed profiles.

    Nothing is written; every row comes back with its own error list so the
    caller can show a preview before importing.
    """

    validate = _validate_student if kind == ImportKind.STUDENTS else _validate_faculty
    out = []
    for row in rows:
        if not isinstance(row, Mapping):
            out.append(PreviewRow(raw={"value": row}, profile=None, errors=["Row must be an object"]))
            continue
        out.append(validate(row, structure))
    return out


class ImportService:
    def __init__(self, people: PersonRepository, *, chunk_size: int = DEFAULT_IMPORT_CHUNK_SIZE):
        if int(chunk_size) <= 0:
            raise ValueError("chunk_size must be positive")
        self._people = people
        self._chunk_size = int(chunk_size)

    def preview(
        self,
        rows: Any,
        kind: ImportKind,
        structure: Optional[AcademicStructure] = None,
    ) -> List[PreviewRow]:
        if not isinstance(rows, list):
            raise ValidationError("Input must be a JSON Array.")
        return validate_rows(rows, kind, structure)

    def execute_import(self, preview: Sequence[PreviewRow], kind: ImportKind) -> ImportStats:
        """Write the valid rows of a preview in fixed-size batches.

        A failed batch is logged and counted as failed; later batches still run.
        """

        role = Role.STUDENT if kind == ImportKind.STUDENTS else Role.FACULTY
        valid = [r.profile for r in preview if r.is_valid]

        success = 0
        for start in range(0, len(valid), self._chunk_size):
            chunk = valid[start : start + self._chunk_size]
            try:
                success += self._people.upsert_many(role, chunk)
            except Exception:
                logger.exception("Import batch %s-%s into %s failed", start, start + len(chunk), role.value)

        stats = ImportStats(total=len(preview), success=success, fail=len(preview) - success)
        logger.info("Imported %s: total=%s success=%s fail=%s", kind.value, stats.total, stats.success, stats.fail)
        return stats
