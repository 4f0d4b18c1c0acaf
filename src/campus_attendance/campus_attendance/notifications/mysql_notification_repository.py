from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import TargetRole
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository

_COLUMNS = """
    notification_id, title, message, sender_id, sender_name, sender_role,
    target_role, target_dept, ts
"""


def _to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=int(r["notification_id"]),
        title=r["title"],
        message=r["message"],
        sender_id=r["sender_id"],
        sender_name=r.get("sender_name") or "",
        sender_role=r.get("sender_role") or "",
        target_role=TargetRole(r["target_role"]),
        target_dept=r.get("target_dept") or "",
        timestamp=r["ts"],
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        title: str,
        message: str,
        sender_id: str,
        sender_name: str,
        sender_role: str,
        target_role: TargetRole,
        target_dept: str,
        timestamp: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(title, message, sender_id, sender_name, sender_role, target_role, target_dept, ts)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (title, message, sender_id, sender_name, sender_role, target_role.value, target_dept, timestamp),
            )
            return int(cur.lastrowid)

    def get(self, notification_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM notifications WHERE notification_id=%s", (int(notification_id),))
            r = fetchone(cur)
            return _to_notification(r) if r else None

    def list_for_roles(self, roles: Sequence[TargetRole], *, limit: int) -> Sequence[Notification]:
        if not roles:
            return []
        placeholders = ",".join(["%s"] * len(roles))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM notifications
                WHERE target_role IN ({placeholders})
                ORDER BY ts DESC, notification_id DESC
                LIMIT %s
                """,
                (*[r.value for r in roles], int(limit)),
            )
            return [_to_notification(r) for r in fetchall(cur)]

    def list_by_sender(self, sender_id: str, *, limit: int) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM notifications
                WHERE sender_id=%s
                ORDER BY ts DESC, notification_id DESC
                LIMIT %s
                """,
                (sender_id, int(limit)),
            )
            return [_to_notification(r) for r in fetchall(cur)]

    def delete(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM notifications WHERE notification_id=%s", (int(notification_id),))
            return cur.rowcount > 0
