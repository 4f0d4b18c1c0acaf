from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import TargetRole


@dataclass(frozen=True)
class Notification:
    """A broadcast message; read state is kept by each client, not here."""

    notification_id: int
    title: str
    message: str
    sender_id: str
    sender_name: str
    sender_role: str
    target_role: TargetRole
    target_dept: str
    timestamp: datetime
