from __future__ import annotations

import logging

from flask import Flask, request, session

from ..common.web import account_required, current_account, json_body, ok, to_jsonable
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/session", methods=["POST"], endpoint="auth_session")
    def auth_session():
        # The identity-provider proxy has already verified these headers.
        account_id = request.headers.get(app.config["IDP_ACCOUNT_HEADER"], "")
        email = request.headers.get(app.config["IDP_EMAIL_HEADER"])

        s_account = container.auth_service.resolve_session(account_id, email)

        session.clear()
        session["account_id"] = s_account.account_id
        session["email"] = s_account.email
        session["role"] = s_account.role.value
        session["name"] = s_account.name

        logger.info("Session opened for %s (%s)", s_account.account_id, s_account.role.value)
        return ok("Signed in", account=to_jsonable(s_account))

    @app.route("/auth/logout", methods=["POST"], endpoint="auth_logout")
    def auth_logout():
        session.clear()
        return ok("Signed out")

    @app.route("/auth/activate", methods=["POST"], endpoint="auth_activate")
    def auth_activate():
        account_id = request.headers.get(app.config["IDP_ACCOUNT_HEADER"], "")
        data = json_body()
        try:
            role = Role(str(data.get("role", "")).lower())
        except ValueError:
            raise ValidationError("Invalid role")

        profile = container.activation_service.activate(
            role=role,
            unique_id=str(data.get("unique_id") or ""),
            email=str(data.get("email") or request.headers.get(app.config["IDP_EMAIL_HEADER"]) or ""),
            account_id=account_id,
        )
        return ok("Account activated", status=201, profile=to_jsonable(profile))

    @app.route("/api/me", methods=["GET"], endpoint="api_me")
    @account_required
    def api_me():
        me = current_account()
        profile = container.profile_service.get_for_account(
            role=me["role"], account_id=me["account_id"], email=me.get("email")
        )
        return ok(account=to_jsonable(me), profile=to_jsonable(profile) if profile else None)
