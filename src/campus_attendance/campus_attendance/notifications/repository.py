from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TargetRole
from .model import Notification


class NotificationRepository(Protocol):
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
        raise NotImplementedError

    def get(self, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def list_for_roles(self, roles: Sequence[TargetRole], *, limit: int) -> Sequence[Notification]:
        """Newest first."""

        raise NotImplementedError

    def list_by_sender(self, sender_id: str, *, limit: int) -> Sequence[Notification]:
        """Newest first."""

        raise NotImplementedError

    def delete(self, notification_id: int) -> bool:
        raise NotImplementedError
