from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..core.enums import LogType
from .model import AttendanceLog
from .strategies.base import ScanDecision, ScanStrategy
from .strategies.daily_limit_strategy import DailyLimitStrategy
from .strategies.entry_strategy import EntryStrategy
from .strategies.exit_strategy import ExitStrategy


def latest_log(logs: Iterable[AttendanceLog]) -> Optional[AttendanceLog]:
    """Most recent log by timestamp; storage order is not trusted."""

    latest = None
    for log in logs:
        if latest is None or log.timestamp > latest.timestamp:
            latest = log
    return latest


@dataclass
class ScanStrategyFactory:
    """Factory Pattern: choose the strategy from the person's last log."""

    def for_scan(self, *, last_log: Optional[AttendanceLog], today: str) -> ScanStrategy:
        if last_log is None or last_log.log_date != today:
            return EntryStrategy()
        if last_log.type == LogType.ENTRY:
            return ExitStrategy()
        return DailyLimitStrategy()

    def classify(self, logs: Iterable[AttendanceLog], today: str) -> ScanDecision:
        last = latest_log(logs)
        return self.for_scan(last_log=last, today=today).decide(last_log=last, today=today)
