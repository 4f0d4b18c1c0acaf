from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import ALL_DEPARTMENTS, DEFAULT_FEED_LIMIT, DEFAULT_RECENT_SENT_LIMIT
from ..core.enums import TargetRole
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


def visible_to_dept(n: Notification, dept: Optional[str]) -> bool:
    return not n.target_dept or n.target_dept == ALL_DEPARTMENTS or n.target_dept == dept


def count_unread(messages: Iterable[Notification], last_read_at: Optional[datetime]) -> int:
    if last_read_at is None:
        return sum(1 for _ in messages)
    return sum(1 for m in messages if m.timestamp > last_read_at)


class NotificationService:
    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def send(
        self,
        *,
        title: str,
        message: str,
        sender_id: Optional[str],
        sender_name: Optional[str],
        sender_role: str,
        sender_dept: Optional[str],
        target_role: str,
        now: Optional[datetime] = None,
    ) -> int:
        title = require_non_empty(title, "Title")
        message = require_non_empty(message, "Message")
        if not sender_dept:
            raise ValidationError("Your profile does not have a department assigned.")
        if not sender_id:
            raise ValidationError("Could not determine your User ID.")
        try:
            target = TargetRole(target_role)
        except ValueError:
            raise ValidationError(f"Invalid target role '{target_role}'")

        notification_id = self._notifications.create(
            title=title,
            message=message,
            sender_id=sender_id,
            sender_name=sender_name or "Staff",
            sender_role=sender_role,
            target_role=target,
            # Senders only reach their own department.
            target_dept=sender_dept,
            timestamp=now or now_local(),
        )
        logger.info("Notification %s sent by %s to %s/%s", notification_id, sender_id, target.value, sender_dept)
        return notification_id

    def feed(self, *, role: str, dept: Optional[str], limit: int = DEFAULT_FEED_LIMIT) -> List[Notification]:
        roles = [TargetRole.ALL]
        try:
            roles.insert(0, TargetRole(role))
        except ValueError:
            pass
        messages = self._notifications.list_for_roles(roles, limit=limit)
        return [m for m in messages if visible_to_dept(m, dept)]

    def recent_sent(self, sender_id: str, *, limit: int = DEFAULT_RECENT_SENT_LIMIT) -> List[Notification]:
        return list(self._notifications.list_by_sender(sender_id, limit=limit))

    def delete(self, notification_id: int, *, sender_id: str) -> None:
        found = self._notifications.get(int(notification_id))
        if not found:
            raise NotFoundError("Notification not found")
        if found.sender_id != sender_id:
            raise AuthorizationError("You can only delete notifications you sent")
        self._notifications.delete(int(notification_id))
        logger.info("Notification %s deleted by %s", notification_id, sender_id)
