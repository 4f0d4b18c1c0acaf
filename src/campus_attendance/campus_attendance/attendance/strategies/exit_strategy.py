from __future__ import annotations

from typing import Optional

from ...core.enums import LogType
from ..model import AttendanceLog
from .base import ScanDecision, ScanStrategy


class ExitStrategy(ScanStrategy):
    """Person is inside: the scan checks them out."""

    def decide(self, *, last_log: Optional[AttendanceLog], today: str) -> ScanDecision:
        return ScanDecision(log_type=LogType.EXIT)
