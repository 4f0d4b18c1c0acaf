from __future__ import annotations

from flask import Flask

from ..common.web import json_body, ok, roles_required, to_jsonable
from ..core.enums import ImportKind, Role
from ..core.exceptions import ValidationError
from ..container import Container
from .importer import PreviewRow


def _preview_json(row: PreviewRow) -> dict:
    return {
        "raw": row.raw,
        "normalized": to_jsonable(row.profile) if row.profile else None,
        "errors": list(row.errors),
        "status": row.status,
    }


def register(app: Flask, container: Container) -> None:
    def _import_request():
        data = json_body()
        try:
            kind = ImportKind(str(data.get("kind", "")).lower())
        except ValueError:
            raise ValidationError("kind must be 'students' or 'faculty'")
        structure = container.academic_service.get_structure()
        return kind, container.import_service.preview(data.get("rows"), kind, structure)

    @app.route("/api/access/<query>", methods=["GET"], endpoint="api_access_lookup")
    @roles_required(Role.HOD)
    def api_access_lookup(query: str):
        role, profile = container.profile_service.find_for_access_control(query)
        return ok(role=role.value, profile=to_jsonable(profile))

    @app.route("/api/access/<query>/toggle-block", methods=["POST"], endpoint="api_access_toggle")
    @roles_required(Role.HOD)
    def api_access_toggle(query: str):
        blocked = container.profile_service.toggle_block(query)
        return ok("User blocked" if blocked else "User unblocked", is_blocked=blocked)

    @app.route("/api/import/preview", methods=["POST"], endpoint="api_import_preview")
    @roles_required(Role.HOD, Role.COORDINATOR)
    def api_import_preview():
        _, preview = _import_request()
        valid = sum(1 for r in preview if r.is_valid)
        return ok(
            total=len(preview),
            valid=valid,
            invalid=len(preview) - valid,
            rows=[_preview_json(r) for r in preview],
        )

    @app.route("/api/import/execute", methods=["POST"], endpoint="api_import_execute")
    @roles_required(Role.HOD, Role.COORDINATOR)
    def api_import_execute():
        kind, preview = _import_request()
        stats = container.import_service.execute_import(preview, kind)
        return ok("Import complete", stats=to_jsonable(stats))
