from dataclasses import replace
from datetime import datetime

import pytest

from src.campus_attendance.campus_attendance.academics.model import (
    DEFAULT_STRUCTURE,
    AcademicStructure,
    FacultyAssignment,
    Subject,
)
from src.campus_attendance.campus_attendance.academics.service import (
    AcademicService,
    available_branches,
    normalize_structure,
)
from src.campus_attendance.campus_attendance.core.enums import Role
from src.campus_attendance.campus_attendance.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.campus_attendance.campus_attendance.users.model import Account


@pytest.fixture()
def service(structure_repo, assignments, accounts):
    return AcademicService(structure_repo, assignments, accounts)


def _assignment(aid, *, year="2", section="A", subject="CS201", faculty="F001"):
    return FacultyAssignment(
        assignment_id=aid,
        faculty_id=faculty,
        faculty_name="Dr. X",
        branch="CSE",
        year=year,
        section=section,
        subject_code=subject,
        subject_name="Data Structures",
    )


def test_missing_structure_is_initialized_with_defaults(service, structure_repo):
    structure_repo.doc = None

    first = service.get_structure()
    second = service.get_structure()

    assert first.branches == DEFAULT_STRUCTURE.branches
    assert first.version == 1 and second.version == 1
    assert structure_repo.saves == 1


def test_update_with_stale_version_conflicts(service):
    current = service.get_structure()
    updated = service.update_structure(replace(current, sections=["A", "B"]), expected_version=current.version)
    assert updated.version == current.version + 1

    with pytest.raises(ConflictError):
        service.update_structure(replace(current, sections=["A"]), expected_version=current.version)
    assert service.get_structure().sections == ["A", "B"]


def test_update_requires_a_branch(service):
    with pytest.raises(ValidationError):
        service.update_structure(AcademicStructure(), expected_version=1)


def test_normalize_uppercases_dedupes_and_prunes_department_map():
    raw = AcademicStructure(
        branches=["cse", "CSE", " aid ", "CSM"],
        years=[2, 1, 2],
        sections=["a", "B", "b"],
        subjects=[
            Subject(code="cs201", name=" Data Structures ", branch="cse", year=2),
            Subject(code="CS201", name="Duplicate", branch="CSE", year=2),
        ],
        department_map={"aids": ["AID", "CSM", "ECE"], "": ["CSE"]},
    )

    s = normalize_structure(raw)

    assert s.branches == ["CSE", "AID", "CSM"]
    assert s.years == [1, 2]
    assert s.sections == ["A", "B"]
    assert s.subjects == [Subject(code="CS201", name="Data Structures", branch="CSE", year=2)]
    assert s.department_map == {"AIDS": ["AID", "CSM"]}


def test_available_branches():
    s = AcademicStructure(branches=["CSE", "AID", "CSM"], department_map={"AIDS": ["AID", "CSM"]})

    assert available_branches(s, "aids") == ["AID", "CSM"]
    assert available_branches(s, "CSE") == ["CSE"]
    assert available_branches(s, None) == ["CSE", "AID", "CSM"]


def test_assign_faculty_validates_against_structure(service, assignments):
    kwargs = dict(faculty_id="F001", faculty_name="Dr. X", year="2nd", section="a", assigned_by="CO001")

    aid = service.assign_faculty(branch="cse", subject_code="cs201", now=datetime(2026, 2, 2), **kwargs)
    stored = assignments.rows[aid]
    assert (stored.branch, stored.year, stored.section, stored.subject_name) == ("CSE", "2", "A", "Data Structures")
    assert stored.class_key == "CSE_2_A"

    with pytest.raises(ValidationError, match="Invalid Branch"):
        service.assign_faculty(branch="XYZ", subject_code="CS201", **kwargs)
    with pytest.raises(ValidationError, match="Unknown subject"):
        service.assign_faculty(branch="CSE", subject_code="NOPE", **kwargs)
    with pytest.raises(ValidationError, match="Invalid Section"):
        service.assign_faculty(**{**kwargs, "section": "Z"}, branch="CSE", subject_code="CS201")
    with pytest.raises(ValidationError):
        service.assign_faculty(**{**kwargs, "year": "first"}, branch="CSE", subject_code="CS201")


def test_delete_assignment(service, assignments):
    assignments.add(_assignment(7))

    service.delete_assignment(7)

    assert assignments.rows == {}
    with pytest.raises(NotFoundError):
        service.delete_assignment(7)


def test_class_assignments_compare_year_numerically(service, assignments):
    assignments.add(_assignment(1, year="2"))
    assignments.add(_assignment(2, year="2nd", subject="CS202"))
    assignments.add(_assignment(3, year="3"))
    assignments.add(_assignment(4, year="2", section="B"))

    ids = [a.assignment_id for a in service.class_assignments("CSE", 2, "A")]

    assert ids == [1, 2]
    assert [a.assignment_id for a in service.my_assignments("F001")] == [1, 2, 3, 4]


def test_list_faculty(service, accounts):
    accounts.save(Account(account_id="u1", role=Role.FACULTY, name="Dr. X"))
    accounts.save(Account(account_id="u2", role=Role.STUDENT, name="Asha"))

    assert [a.account_id for a in service.list_faculty()] == ["u1"]
