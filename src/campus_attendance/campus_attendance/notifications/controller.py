from __future__ import annotations

from datetime import datetime

from flask import Flask, request, session

from ..common.web import account_required, current_account, json_body, ok, roles_required, to_jsonable
from ..core.constants import NOT_AVAILABLE
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from .service import count_unread


def register(app: Flask, container: Container) -> None:
    def _my_profile():
        me = current_account()
        return container.profile_service.get_for_account(
            role=me["role"], account_id=me["account_id"], email=me.get("email")
        )

    @app.route("/api/notifications", methods=["POST"], endpoint="api_notifications_send")
    @roles_required(Role.HOD, Role.COORDINATOR)
    def api_notifications_send():
        data = json_body()
        profile = _my_profile()
        notification_id = container.notification_service.send(
            title=str(data.get("title") or ""),
            message=str(data.get("message") or ""),
            sender_id=session.get("account_id"),
            sender_name=(profile.name if profile else None) or session.get("name"),
            sender_role=str(session.get("role")),
            sender_dept=profile.dept if profile and profile.dept != NOT_AVAILABLE else None,
            target_role=str(data.get("target_role") or "all"),
        )
        return ok("Notification sent successfully!", status=201, notification_id=notification_id)

    @app.route("/api/notifications/feed", methods=["GET"], endpoint="api_notifications_feed")
    @account_required
    def api_notifications_feed():
        profile = _my_profile()
        since = request.args.get("since")
        last_read = None
        if since:
            try:
                last_read = datetime.fromisoformat(since)
            except ValueError:
                raise ValidationError("since must be an ISO timestamp")

        messages = container.notification_service.feed(
            role=str(session.get("role")), dept=profile.dept if profile else None
        )
        return ok(notifications=to_jsonable(messages), unread=count_unread(messages, last_read))

    @app.route("/api/notifications/sent", methods=["GET"], endpoint="api_notifications_sent")
    @roles_required(Role.HOD, Role.COORDINATOR)
    def api_notifications_sent():
        return ok(notifications=to_jsonable(container.notification_service.recent_sent(str(session["account_id"]))))

    @app.route("/api/notifications/<int:notification_id>", methods=["DELETE"], endpoint="api_notifications_delete")
    @roles_required(Role.HOD, Role.COORDINATOR)
    def api_notifications_delete(notification_id: int):
        container.notification_service.delete(notification_id, sender_id=str(session["account_id"]))
        return ok("Notification deleted successfully.")
