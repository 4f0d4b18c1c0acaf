from __future__ import annotations

from typing import Optional

from ...core.enums import LogType
from ..model import AttendanceLog
from .base import ScanDecision, ScanStrategy


class EntryStrategy(ScanStrategy):
    """First scan of the day."""

    def decide(self, *, last_log: Optional[AttendanceLog], today: str) -> ScanDecision:
        return ScanDecision(log_type=LogType.ENTRY)
