from datetime import datetime

import pytest

from src.campus_attendance.campus_attendance.core.enums import Role
from src.campus_attendance.campus_attendance.core.exceptions import NotFoundError, ValidationError
from src.campus_attendance.campus_attendance.people.model import HodProfile, StudentProfile
from src.campus_attendance.campus_attendance.people.service import ActivationService, ProfileService


def test_activation_claims_profile_and_writes_account(accounts, people):
    people.add(StudentProfile(profile_id="23CS001", name="Asha", email="Asha@College.edu"))

    ActivationService(people, accounts).activate(
        role=Role.STUDENT, unique_id="23CS001", email="asha@college.edu", account_id="acc-1"
    )

    claimed = people.get(Role.STUDENT, "23CS001")
    assert claimed.uid == "acc-1"
    assert claimed.is_claimed
    assert claimed.person_id == "acc-1"
    assert accounts.get_by_id("acc-1").role == Role.STUDENT
    assert accounts.get_by_id("acc-1").name == "Asha"


def test_activation_uses_role_collection(accounts, people):
    people.add(HodProfile(profile_id="HOD1", email="hod@x.test"))

    with pytest.raises(NotFoundError):
        ActivationService(people, accounts).activate(
            role=Role.STUDENT, unique_id="HOD1", email="hod@x.test", account_id="acc-9"
        )


def test_activation_rejects_email_mismatch(accounts, people):
    people.add(StudentProfile(profile_id="23CS001", email="asha@college.edu"))

    with pytest.raises(ValidationError, match="Email does not match"):
        ActivationService(people, accounts).activate(
            role=Role.STUDENT, unique_id="23CS001", email="other@college.edu", account_id="acc-1"
        )
    assert accounts.rows == {}


def test_activation_rejects_already_claimed(accounts, people):
    people.add(
        StudentProfile(
            profile_id="23CS001",
            email="asha@college.edu",
            uid="acc-0",
            is_claimed=True,
            activated_at=datetime(2026, 1, 1),
        )
    )

    with pytest.raises(ValidationError, match="already activated"):
        ActivationService(people, accounts).activate(
            role=Role.STUDENT, unique_id="23CS001", email="asha@college.edu", account_id="acc-1"
        )


def test_toggle_block_flips_flag(people):
    people.add(StudentProfile(profile_id="23CS001"))
    svc = ProfileService(people)

    assert svc.toggle_block("23CS001") is True
    assert people.get(Role.STUDENT, "23CS001").is_blocked
    assert svc.toggle_block("23CS001") is False


def test_access_control_lookup_unknown(people):
    with pytest.raises(NotFoundError):
        ProfileService(people).find_for_access_control("NOPE")
