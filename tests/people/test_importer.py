from dataclasses import replace

import pytest

from src.campus_attendance.campus_attendance.academics.model import DEFAULT_STRUCTURE
from src.campus_attendance.campus_attendance.core.enums import ImportKind, Role
from src.campus_attendance.campus_attendance.core.exceptions import ValidationError
from src.campus_attendance.campus_attendance.people.importer import ImportService, validate_rows
from src.campus_attendance.campus_attendance.people.model import StudentProfile

STRUCTURE = replace(DEFAULT_STRUCTURE, branches=["CSE", "AID"])


def test_student_row_with_known_branch_is_valid():
    [row] = validate_rows([{"RollNO": "23CS002", "Branch": "AID"}], ImportKind.STUDENTS, STRUCTURE)

    assert row.errors == []
    assert row.status == "valid"
    assert row.profile.roll_number == "23CS002"
    assert row.profile.dept == "AID"
    assert row.profile.section == "A"
    assert row.profile.barcode_id == "23CS002"
    assert row.profile.name == "Unknown"


def test_student_row_with_unknown_branch_has_one_error():
    [row] = validate_rows([{"RollNO": "23CS003", "Branch": "XYZ"}], ImportKind.STUDENTS, STRUCTURE)

    assert len(row.errors) == 1
    assert row.errors[0].startswith("Invalid Branch")
    assert row.status == "invalid"


def test_student_header_aliases_are_normalized():
    [row] = validate_rows(
        [
            {
                "Roll Number": "23CS004",
                "Name": "Meera",
                "Department": "CSE",
                "Year": "2nd",
                "Sec": "B",
                "Mobile No": 9000000004,
                "Bio Metric Code": "BIO-4",
                "Parent No": "9100000004",
                "Mentor No": "F001",
            }
        ],
        ImportKind.STUDENTS,
        STRUCTURE,
    )

    p = row.profile
    assert row.errors == []
    assert (p.profile_id, p.name, p.dept, p.year, p.section) == ("23CS004", "Meera", "CSE", "2nd", "B")
    assert p.department_group == "CSE"
    assert p.mobile == "9000000004"
    assert p.barcode_id == "BIO-4"
    assert p.parent_mobile == "9100000004"
    assert p.mentor_id == "F001"


def test_student_year_and_section_checked_against_structure():
    [row] = validate_rows([{"RollNO": "1", "Branch": "CSE", "year": "7", "Section": "Z"}], ImportKind.STUDENTS, STRUCTURE)

    assert row.errors == ["Invalid Year '7'", "Invalid Section 'Z'"]


def test_non_numeric_year_is_not_an_error():
    [row] = validate_rows([{"RollNO": "1", "year": "N/A"}], ImportKind.STUDENTS, STRUCTURE)

    assert row.errors == []


def test_missing_roll_number():
    [row] = validate_rows([{"Name": "Nobody"}], ImportKind.STUDENTS, STRUCTURE)

    assert row.errors == ["Missing Roll Number"]
    assert row.profile is None


def test_faculty_rows():
    rows = validate_rows(
        [{"Faculty Id": "F010", "Department": "CSE"}, {"ID": "F011", "dept": "BIO"}, {"Name": "x"}],
        ImportKind.FACULTY,
        STRUCTURE,
    )

    assert rows[0].errors == [] and rows[0].profile.designation == "Staff"
    assert rows[1].errors == ["Invalid Dept 'BIO'"]
    assert rows[2].errors == ["Missing Faculty ID"]


def test_execute_import_writes_valid_rows_in_chunks(people):
    rows = [{"RollNO": f"R{i:03d}", "Branch": "CSE"} for i in range(5)] + [{"RollNO": "BAD", "Branch": "XYZ"}]
    svc = ImportService(people, chunk_size=2)

    stats = svc.execute_import(svc.preview(rows, ImportKind.STUDENTS, STRUCTURE), ImportKind.STUDENTS)

    assert people.upsert_calls == [2, 2, 1]
    assert (stats.total, stats.success, stats.fail) == (6, 5, 1)
    assert people.get(Role.STUDENT, "BAD") is None


def test_failed_chunk_counts_as_failed(people):
    people.fail_on_upsert_call = 2
    rows = [{"RollNO": f"R{i}"} for i in range(4)]
    svc = ImportService(people, chunk_size=2)

    stats = svc.execute_import(svc.preview(rows, ImportKind.STUDENTS), ImportKind.STUDENTS)

    assert (stats.total, stats.success, stats.fail) == (4, 2, 2)


def test_reimport_keeps_activation(people):
    people.add(StudentProfile(profile_id="23CS001", name="Old", uid="acc-1", is_claimed=True))
    svc = ImportService(people)

    svc.execute_import(svc.preview([{"RollNO": "23CS001", "Name": "New"}], ImportKind.STUDENTS), ImportKind.STUDENTS)

    p = people.get(Role.STUDENT, "23CS001")
    assert p.name == "New"
    assert p.uid == "acc-1" and p.is_claimed


def test_preview_requires_array(people):
    with pytest.raises(ValidationError):
        ImportService(people).preview({"RollNO": "x"}, ImportKind.STUDENTS)
