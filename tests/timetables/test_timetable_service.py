import pytest

from src.campus_attendance.campus_attendance.academics.model import DEFAULT_STRUCTURE, FacultyAssignment
from src.campus_attendance.campus_attendance.academics.service import AcademicService
from src.campus_attendance.campus_attendance.core.enums import Role
from src.campus_attendance.campus_attendance.core.exceptions import ConflictError, ValidationError
from src.campus_attendance.campus_attendance.timetables.model import Slot, timetable_key
from src.campus_attendance.campus_attendance.timetables.service import TimetableService, edit_slot
from src.campus_attendance.campus_attendance.users.model import Account

MON = "Monday"


@pytest.fixture()
def service(timetables, structure_repo, assignments, accounts):
    return TimetableService(timetables, AcademicService(structure_repo, assignments, accounts))


def _ds_assignment(faculty_id="F001", section="A"):
    return FacultyAssignment(
        assignment_id=1 if section == "A" else 2,
        faculty_id=faculty_id,
        faculty_name="Dr. X",
        branch="CSE",
        year="2",
        section=section,
        subject_code="CS201",
        subject_name="Data Structures",
    )


def test_missing_timetable_is_empty_version_zero(service):
    tt = service.get_timetable("CSE", "2", "A")

    assert tt.schedule == {} and tt.version == 0
    assert tt.key == "CSE_2_A"


def test_save_replaces_the_whole_schedule(service):
    s1 = {MON: [Slot("10:00 - 11:00", "CS202", "DBMS"), Slot("09:00 - 10:00", "CS201", "Data Structures")]}
    s2 = {"Tuesday": [Slot("11:00 - 12:00", "CS202", "DBMS")]}

    service.save_timetable(branch="CSE", year=2, section="A", schedule=s1, updated_by="CO001")
    saved = service.save_timetable(branch="CSE", year="2", section="A", schedule=s2, updated_by="CO001")

    assert saved.version == 2
    assert service.get_timetable("CSE", 2, "A").schedule == s2


def test_slots_are_kept_in_period_order(service):
    afternoon = Slot("01:00 - 02:00", "CS202", "DBMS")
    morning = Slot("12:00 - 01:00", "CS201", "Data Structures")

    saved = service.save_timetable(
        branch="CSE", year=2, section="A", schedule={MON: [afternoon, morning]}, updated_by="CO001"
    )

    assert [s.time for s in saved.slots_for(MON)] == ["12:00 - 01:00", "01:00 - 02:00"]


def test_stale_version_conflicts(service):
    service.save_timetable(branch="CSE", year=2, section="A", schedule={}, updated_by="a")
    service.save_timetable(branch="CSE", year=2, section="A", schedule={}, updated_by="b", expected_version=1)

    with pytest.raises(ConflictError):
        service.save_timetable(branch="CSE", year=2, section="A", schedule={}, updated_by="c", expected_version=1)


def test_unknown_day_is_rejected(service):
    with pytest.raises(ValidationError):
        service.save_timetable(branch="CSE", year=2, section="A", schedule={"Sunday": []}, updated_by="a")


def test_edit_slot_break_and_clear():
    schedule = edit_slot({}, day=MON, time="11:00 - 12:00", subject_code="break", structure=DEFAULT_STRUCTURE)
    assert schedule[MON] == [Slot("11:00 - 12:00", "BREAK", "Break / Recess")]

    cleared = edit_slot(schedule, day=MON, time="11:00 - 12:00", subject_code="", structure=DEFAULT_STRUCTURE)
    assert cleared[MON] == []
    assert schedule[MON], "input schedule is not modified"

    unknown = edit_slot(schedule, day=MON, time="11:00 - 12:00", subject_code="XX999", structure=DEFAULT_STRUCTURE)
    assert unknown[MON] == []


def test_edit_slot_faculty_resolution():
    explicit = edit_slot(
        {},
        day=MON,
        time="09:00 - 10:00",
        subject_code="CS201",
        structure=DEFAULT_STRUCTURE,
        assignments=[_ds_assignment()],
        faculty_id="F009",
        faculty_name="Dr. Y",
    )
    assert (explicit[MON][0].faculty_id, explicit[MON][0].faculty_name) == ("F009", "Dr. Y")

    suggested = edit_slot(
        {}, day=MON, time="09:00 - 10:00", subject_code="cs201", structure=DEFAULT_STRUCTURE, assignments=[_ds_assignment()]
    )
    assert suggested[MON][0] == Slot("09:00 - 10:00", "CS201", "Data Structures", "F001", "Dr. X")

    tba = edit_slot({}, day=MON, time="09:00 - 10:00", subject_code="CS202", structure=DEFAULT_STRUCTURE)
    assert tba[MON][0].faculty_name == "TBA"
    assert tba[MON][0].unmapped


def test_edit_slot_rejects_unknown_day_or_time():
    with pytest.raises(ValidationError):
        edit_slot({}, day="Sunday", time="09:00 - 10:00", subject_code="CS201", structure=DEFAULT_STRUCTURE)
    with pytest.raises(ValidationError):
        edit_slot({}, day=MON, time="08:00 - 09:00", subject_code="CS201", structure=DEFAULT_STRUCTURE)


def test_service_edit_slot_uses_class_assignments_and_faculty_names(service, assignments, accounts, timetables):
    assignments.add(_ds_assignment())
    accounts.save(Account(account_id="F009", role=Role.FACULTY, name="Dr. Y"))

    tt = service.edit_slot(
        branch="CSE", year=2, section="A", day=MON, time="09:00 - 10:00", subject_code="CS201", updated_by="CO001"
    )
    assert tt.version == 1
    assert tt.slots_for(MON)[0].faculty_id == "F001"

    tt = service.edit_slot(
        branch="CSE",
        year=2,
        section="A",
        day=MON,
        time="10:00 - 11:00",
        subject_code="CS202",
        updated_by="CO001",
        faculty_id="F009",
    )
    assert [s.faculty_name for s in tt.slots_for(MON)] == ["Dr. X", "Dr. Y"]
    assert timetables.get(timetable_key("CSE", 2, "A")).version == 2


def test_teaching_schedule_collects_across_classes(service, assignments):
    assignments.add(_ds_assignment(section="A"))
    assignments.add(_ds_assignment(section="B"))
    for section, time in (("A", "10:00 - 11:00"), ("B", "09:00 - 10:00")):
        service.save_timetable(
            branch="CSE",
            year=2,
            section=section,
            schedule={
                MON: [
                    Slot(time, "CS201", "Data Structures", "F001", "Dr. X"),
                    Slot("02:00 - 03:00", "CS202", "DBMS", "F002", "Dr. Z"),
                ]
            },
            updated_by="CO001",
        )

    teaching = service.teaching_schedule("F001")

    assert list(teaching) == [MON]
    assert [(t.slot.time, t.context) for t in teaching[MON]] == [
        ("09:00 - 10:00", "CSE Yr 2 (B)"),
        ("10:00 - 11:00", "CSE Yr 2 (A)"),
    ]


def test_lowercase_class_path_matches_assignments(service, assignments):
    assignments.add(_ds_assignment())

    tt = service.edit_slot(
        branch="cse", year="2", section="a", day=MON, time="09:00 - 10:00", subject_code="CS201", updated_by="CO001"
    )

    assert tt.key == "CSE_2_A"
    assert tt.slots_for(MON)[0].faculty_id == "F001"
    assert not tt.slots_for(MON)[0].unmapped
    assert service.get_timetable("Cse", 2, "A").version == 1
