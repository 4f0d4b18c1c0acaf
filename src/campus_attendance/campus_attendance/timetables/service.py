from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from ..academics.model import AcademicStructure, FacultyAssignment
from ..academics.service import AcademicService
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty, require_year
from ..core.constants import BREAK_CODE, BREAK_NAME, TBA_FACULTY
from ..core.exceptions import ConflictError, ValidationError
from .model import DAYS, PERIOD_ORDER, Schedule, Slot, TeachingSlot, Timetable, period_of, sort_slots, timetable_key
from .repository import TimetableRepository

logger = logging.getLogger(__name__)


def suggest_faculty(assignments: Sequence[FacultyAssignment], subject_code: str) -> Optional[FacultyAssignment]:
    """Assignment of the class that teaches ``subject_code``, if any."""

    for a in assignments:
        if a.subject_code == subject_code:
            return a
    return None


def edit_slot(
    schedule: Schedule,
    *,
    day: str,
    time: str,
    subject_code: Optional[str],
    structure: AcademicStructure,
    assignments: Sequence[FacultyAssignment] = (),
    faculty_id: Optional[str] = None,
    faculty_name: Optional[str] = None,
) -> Schedule:
    """Return a copy of ``schedule`` with one (day, time) cell changed.

    ``BREAK`` puts a recess slot with no faculty; a subject code that is not in
    the catalog (including empty) clears the cell. For a real subject the faculty
    is the explicit choice, else the class assignment for that subject, else TBA.
    """

    if day not in DAYS:
        raise ValidationError(f"Invalid day '{day}'")
    if time not in PERIOD_ORDER:
        raise ValidationError(f"Invalid time slot '{time}'")

    code = (subject_code or "").strip().upper()
    others = [s for s in schedule.get(day, []) if s.time != time]

    new_slot = None
    if code == BREAK_CODE:
        new_slot = Slot(time=time, subject_code=BREAK_CODE, subject_name=BREAK_NAME)
    else:
        subject = structure.subject_by_code(code) if code else None
        if subject:
            if faculty_id:
                new_slot = Slot(
                    time=time,
                    subject_code=subject.code,
                    subject_name=subject.name,
                    faculty_id=faculty_id,
                    faculty_name=faculty_name or faculty_id,
                )
            else:
                suggested = suggest_faculty(assignments, subject.code)
                if suggested:
                    new_slot = Slot(
                        time=time,
                        subject_code=subject.code,
                        subject_name=subject.name,
                        faculty_id=suggested.faculty_id,
                        faculty_name=suggested.faculty_name,
                    )
                else:
                    new_slot = Slot(
                        time=time,
                        subject_code=subject.code,
                        subject_name=subject.name,
                        faculty_name=TBA_FACULTY,
                        unmapped=True,
                    )

    out = {d: list(slots) for d, slots in schedule.items()}
    if new_slot:
        others.append(new_slot)
    out[day] = sort_slots(others)
    return out


class TimetableService:
    def __init__(self, timetables: TimetableRepository, academics: AcademicService):
        self._timetables = timetables
        self._academics = academics

    def get_timetable(self, branch: str, year, section: str) -> Timetable:
        """Stored timetable of a class, or an empty unsaved one (version 0)."""

        branch = require_non_empty(branch, "Branch").upper()
        section = require_non_empty(section, "Section").upper()
        year_num = require_year(year)

        found = self._timetables.get(timetable_key(branch, year_num, section))
        if found:
            return found
        return Timetable(branch=branch, year=year_num, section=section)

    def save_timetable(
        self,
        *,
        branch: str,
        year,
        section: str,
        schedule: Schedule,
        updated_by: str,
        expected_version: Optional[int] = None,
    ) -> Timetable:
        """Replace the whole schedule of a class; nothing of the previous one is kept."""

        branch = require_non_empty(branch, "Branch").upper()
        section = require_non_empty(section, "Section").upper()
        year_num = require_year(year)

        unknown = [d for d in schedule if d not in DAYS]
        if unknown:
            raise ValidationError(f"Invalid day '{unknown[0]}'")

        timetable = Timetable(
            branch=branch,
            year=year_num,
            section=section,
            schedule={day: sort_slots(list(slots)) for day, slots in schedule.items()},
            updated_by=updated_by,
            updated_at=now_local(),
        )
        version = self._timetables.save(timetable, expected_version=expected_version)
        if version < 0:
            logger.warning("Timetable %s conflict: expected version %s", timetable.key, expected_version)
            raise ConflictError("Timetable was modified by someone else. Reload and try again.")

        logger.info("Saved timetable %s (version %s) by %s", timetable.key, version, updated_by)
        return replace(timetable, version=version)

    def edit_slot(
        self,
        *,
        branch: str,
        year,
        section: str,
        day: str,
        time: str,
        subject_code: Optional[str],
        updated_by: str,
        faculty_id: Optional[str] = None,
        expected_version: Optional[int] = None,
    ) -> Timetable:
        current = self.get_timetable(branch, year, section)
        structure = self._academics.get_structure()
        assignments = self._academics.class_assignments(current.branch, current.year, current.section)

        faculty_name = None
        if faculty_id:
            names = {a.account_id: a.name for a in self._academics.list_faculty()}
            faculty_name = names.get(faculty_id)

        schedule = edit_slot(
            current.schedule,
            day=day,
            time=time,
            subject_code=subject_code,
            structure=structure,
            assignments=assignments,
            faculty_id=faculty_id,
            faculty_name=faculty_name,
        )
        return self.save_timetable(
            branch=current.branch,
            year=current.year,
            section=current.section,
            schedule=schedule,
            updated_by=updated_by,
            expected_version=current.version if expected_version is None else expected_version,
        )

    def teaching_schedule(self, faculty_id: str) -> Dict[str, List[TeachingSlot]]:
        """Slots taught by ``faculty_id`` across every class they are assigned to."""

        contexts = []
        for a in self._academics.my_assignments(faculty_id):
            ctx = (a.branch, a.year, a.section)
            if ctx not in contexts:
                contexts.append(ctx)

        out: Dict[str, List[TeachingSlot]] = {}
        for branch, year, section in contexts:
            tt = self._timetables.get(timetable_key(branch, year, section))
            if not tt:
                continue
            label = f"{branch} Yr {year} ({section})"
            for day, slots in tt.schedule.items():
                for s in slots:
                    if s.faculty_id == faculty_id:
                        out.setdefault(day, []).append(TeachingSlot(day=day, slot=s, context=label))

        for day in out:
            out[day].sort(key=lambda t: period_of(t.slot.time))
        return out
