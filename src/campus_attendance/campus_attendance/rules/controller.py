from __future__ import annotations

from flask import Flask

from ..common.web import json_body, ok, roles_required
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/rules", methods=["GET"], endpoint="api_rules")
    @roles_required(Role.HOD, Role.SECURITY)
    def api_rules():
        return ok(rules=container.rules_service.get_rules().to_dict())

    @app.route("/api/rules", methods=["PUT"], endpoint="api_rules_update")
    @roles_required(Role.HOD)
    def api_rules_update():
        rules = container.rules_service.update_rules(json_body())
        return ok("Rules saved", rules=rules.to_dict())
