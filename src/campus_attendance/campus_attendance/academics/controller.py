from __future__ import annotations

from flask import Flask, request, session

from ..common.web import account_required, current_account, json_body, ok, roles_required, to_jsonable
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from .model import AcademicStructure


def register(app: Flask, container: Container) -> None:
    def _my_dept() -> str:
        me = current_account()
        profile = container.profile_service.get_for_account(
            role=me["role"], account_id=me["account_id"], email=me.get("email")
        )
        return profile.dept if profile else ""

    @app.route("/api/structure", methods=["GET"], endpoint="api_structure")
    @account_required
    def api_structure():
        structure = container.academic_service.get_structure()
        return ok(structure=structure.to_document(), version=structure.version)

    @app.route("/api/structure", methods=["PUT"], endpoint="api_structure_update")
    @roles_required(Role.COORDINATOR)
    def api_structure_update():
        data = json_body()
        if "version" not in data:
            raise ValidationError("version is required")
        try:
            structure = AcademicStructure.from_document(data.get("structure") or {})
        except (KeyError, TypeError, ValueError):
            raise ValidationError("Malformed structure document")

        saved = container.academic_service.update_structure(structure, expected_version=int(data["version"]))
        return ok("Structure saved", structure=saved.to_document(), version=saved.version)

    @app.route("/api/structure/branches", methods=["GET"], endpoint="api_structure_branches")
    @roles_required(Role.COORDINATOR, Role.HOD)
    def api_structure_branches():
        return ok(branches=container.academic_service.available_branches(_my_dept()))

    @app.route("/api/assignments", methods=["POST"], endpoint="api_assignments_create")
    @roles_required(Role.COORDINATOR)
    def api_assignments_create():
        data = json_body()
        faculty_id = str(data.get("faculty_id") or "")
        names = {a.account_id: a.name for a in container.academic_service.list_faculty()}
        if faculty_id and faculty_id not in names:
            raise ValidationError("Unknown faculty")

        assignment_id = container.academic_service.assign_faculty(
            faculty_id=faculty_id,
            faculty_name=names.get(faculty_id) or "",
            branch=str(data.get("branch") or ""),
            year=data.get("year"),
            section=str(data.get("section") or ""),
            subject_code=str(data.get("subject_code") or ""),
            academic_year=data.get("academic_year"),
            assigned_by=str(session["account_id"]),
        )
        return ok("Faculty assigned", status=201, assignment_id=assignment_id)

    @app.route("/api/assignments/<int:assignment_id>", methods=["DELETE"], endpoint="api_assignments_delete")
    @roles_required(Role.COORDINATOR)
    def api_assignments_delete(assignment_id: int):
        container.academic_service.delete_assignment(assignment_id)
        return ok("Assignment removed")

    @app.route("/api/assignments", methods=["GET"], endpoint="api_assignments")
    @roles_required(Role.COORDINATOR, Role.HOD)
    def api_assignments():
        branch = request.args.get("branch")
        if not branch:
            raise ValidationError("branch is required")
        year = request.args.get("year")
        section = request.args.get("section")
        if year and section:
            rows = container.academic_service.class_assignments(branch, year, section)
        else:
            rows = container.academic_service.department_assignments(branch)
        return ok(assignments=to_jsonable(list(rows)))

    @app.route("/api/me/assignments", methods=["GET"], endpoint="api_me_assignments")
    @roles_required(Role.FACULTY)
    def api_me_assignments():
        rows = container.academic_service.my_assignments(str(session["account_id"]))
        return ok(assignments=to_jsonable(list(rows)))

    @app.route("/api/faculty", methods=["GET"], endpoint="api_faculty")
    @roles_required(Role.COORDINATOR)
    def api_faculty():
        return ok(faculty=to_jsonable(list(container.academic_service.list_faculty())))
