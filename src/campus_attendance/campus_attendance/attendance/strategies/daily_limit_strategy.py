from __future__ import annotations

from typing import Optional

from ...core.constants import DAILY_LIMIT_REASON
from ..model import AttendanceLog
from .base import ScanDecision, ScanStrategy


class DailyLimitStrategy(ScanStrategy):
    """Already checked out today: one entry/exit pair per day."""

    def decide(self, *, last_log: Optional[AttendanceLog], today: str) -> ScanDecision:
        return ScanDecision(log_type=None, reason=DAILY_LIMIT_REASON)
