from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import LogType
from ..model import AttendanceLog


@dataclass(frozen=True)
class ScanDecision:
    log_type: Optional[LogType]
    reason: Optional[str] = None

    @property
    def rejected(self) -> bool:
        return self.log_type is None


class ScanStrategy(ABC):
    """Strategy Pattern: encapsulate what the next scan of a person means."""

    @abstractmethod
    def decide(self, *, last_log: Optional[AttendanceLog], today: str) -> ScanDecision:
        raise NotImplementedError
