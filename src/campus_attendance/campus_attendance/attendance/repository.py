from __future__ import annotations

from typing import ContextManager, Optional, Protocol, Sequence

from .model import AttendanceLog, SecurityAlert


class DayTransaction(Protocol):
    """Work done while a person's (person, date) lock is held."""

    def logs(self) -> Sequence[AttendanceLog]:
        """The day's logs under any of the person's IDs, in no particular order."""

        raise NotImplementedError

    def append_log(self, log: AttendanceLog) -> int:
        raise NotImplementedError

    def add_alert(self, alert: SecurityAlert) -> int:
        raise NotImplementedError


class AttendanceRepository(Protocol):
    def day_transaction(
        self, lock_id: str, log_date: str, *, person_ids: Optional[Sequence[str]] = None
    ) -> ContextManager[DayTransaction]:
        """Open one atomic unit for deciding a person's next log of ``log_date``.

        ``lock_id`` must not change over the person's lifetime (the domain ID);
        ``person_ids`` lists every ID their logs are stored under and defaults
        to ``[lock_id]``.

        Concurrent transactions for the same (person, date) run one after another;
        everything written inside commits together when the block exits normally.
        """

        raise NotImplementedError

    def list_for_person(self, person_id: str, *, limit: Optional[int] = None) -> Sequence[AttendanceLog]:
        """Most recent first."""

        raise NotImplementedError

    def list_for_date(self, log_date: str) -> Sequence[AttendanceLog]:
        """Oldest first."""

        raise NotImplementedError

    def alerts_for_date(self, alert_date: str) -> Sequence[SecurityAlert]:
        """Most recent first."""

        raise NotImplementedError

    def purge_all(self) -> int:
        raise NotImplementedError
