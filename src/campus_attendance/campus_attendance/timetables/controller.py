from __future__ import annotations

from flask import Flask, session

from ..common.web import account_required, current_account, json_body, ok, roles_required, to_jsonable
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..container import Container
from .model import Slot, Timetable, schedule_to_dict


def _timetable_json(tt: Timetable) -> dict:
    return {
        "key": tt.key,
        "branch": tt.branch,
        "year": tt.year,
        "section": tt.section,
        "schedule": schedule_to_dict(tt.schedule),
        "version": tt.version,
        "updated_by": tt.updated_by,
        "updated_at": to_jsonable(tt.updated_at),
    }


def register(app: Flask, container: Container) -> None:
    def _version(data: dict):
        v = data.get("version")
        return None if v is None else int(v)

    @app.route("/api/timetables/<branch>/<year>/<section>", methods=["GET"], endpoint="api_timetable")
    @account_required
    def api_timetable(branch: str, year: str, section: str):
        return ok(timetable=_timetable_json(container.timetable_service.get_timetable(branch, year, section)))

    @app.route("/api/timetables/<branch>/<year>/<section>", methods=["PUT"], endpoint="api_timetable_save")
    @roles_required(Role.COORDINATOR)
    def api_timetable_save(branch: str, year: str, section: str):
        data = json_body()
        raw = data.get("schedule")
        if not isinstance(raw, dict):
            raise ValidationError("schedule must be an object of day -> slots")
        try:
            schedule = {day: [Slot.from_dict(s) for s in slots or []] for day, slots in raw.items()}
        except (AttributeError, TypeError):
            raise ValidationError("Malformed slot")

        tt = container.timetable_service.save_timetable(
            branch=branch,
            year=year,
            section=section,
            schedule=schedule,
            updated_by=str(session["account_id"]),
            expected_version=_version(data),
        )
        return ok("Timetable saved", timetable=_timetable_json(tt))

    @app.route("/api/timetables/<branch>/<year>/<section>/slot", methods=["POST"], endpoint="api_timetable_slot")
    @roles_required(Role.COORDINATOR)
    def api_timetable_slot(branch: str, year: str, section: str):
        data = json_body()
        tt = container.timetable_service.edit_slot(
            branch=branch,
            year=year,
            section=section,
            day=str(data.get("day") or ""),
            time=str(data.get("time") or ""),
            subject_code=data.get("subject_code"),
            faculty_id=data.get("faculty_id") or None,
            updated_by=str(session["account_id"]),
            expected_version=_version(data),
        )
        return ok("Slot saved", timetable=_timetable_json(tt))

    @app.route("/api/me/timetable", methods=["GET"], endpoint="api_me_timetable")
    @roles_required(Role.STUDENT)
    def api_me_timetable():
        me = current_account()
        profile = container.profile_service.get_for_account(
            role=Role.STUDENT, account_id=me["account_id"], email=me.get("email")
        )
        if not profile or not getattr(profile, "year", None):
            raise NotFoundError("Class details missing from your profile")
        tt = container.timetable_service.get_timetable(profile.dept, profile.year, profile.section)
        return ok(timetable=_timetable_json(tt))

    @app.route("/api/me/teaching", methods=["GET"], endpoint="api_me_teaching")
    @roles_required(Role.FACULTY)
    def api_me_teaching():
        schedule = container.timetable_service.teaching_schedule(str(session["account_id"]))
        return ok(
            schedule={
                day: [{**t.slot.to_dict(), "context": t.context} for t in slots] for day, slots in schedule.items()
            }
        )
