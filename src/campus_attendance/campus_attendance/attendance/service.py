from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from ..common.datetime_utils import local_date_string, now_local
from ..core.constants import ALERT_TYPE_BLOCKED, DEFAULT_HISTORY_LIMIT, NOT_AVAILABLE, SCANNABLE_ROLES
from ..core.enums import LogType, PresenceStatus, Role
from ..core.exceptions import AuthorizationError, DailyLimitReachedError, ValidationError
from ..people.identity import IdentityResolver
from ..people.model import ResolvedPerson, StudentProfile
from ..people.repository import PersonRepository
from ..people.roster import RosterFilter, filter_roster
from .debounce import ScanGate
from .factory import ScanStrategyFactory, latest_log
from .model import AttendanceLog, DailySummary, SecurityAlert
from .repository import AttendanceRepository
from .sms import SmsSender

logger = logging.getLogger(__name__)

_DIRECTIONS = {"IN": LogType.ENTRY, "OUT": LogType.EXIT}


@dataclass(frozen=True)
class ScanResult:
    person: ResolvedPerson
    log: AttendanceLog


@dataclass(frozen=True)
class RosterStatusRow:
    student: StudentProfile
    status: PresenceStatus
    last_log: Optional[AttendanceLog] = None


def presence_from(last_today: Optional[AttendanceLog]) -> PresenceStatus:
    if last_today is None:
        return PresenceStatus.ABSENT
    return PresenceStatus.INSIDE if last_today.type == LogType.ENTRY else PresenceStatus.LEFT


def person_key(log: AttendanceLog) -> str:
    """Roll number or faculty ID when known; the logged person ID changes at activation."""
    if log.roll_number and log.roll_number != NOT_AVAILABLE:
        return log.roll_number
    return log.person_id


def latest_by_person(logs: Sequence[AttendanceLog]) -> Dict[str, AttendanceLog]:
    out: Dict[str, AttendanceLog] = {}
    for log in logs:
        key = person_key(log)
        cur = out.get(key)
        if cur is None or log.timestamp >= cur.timestamp:
            out[key] = log
    return out


def _as_date_string(value) -> str:
    if isinstance(value, datetime):
        return local_date_string(value)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class AttendanceService:
    """Gate scanning and the attendance log read side."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        resolver: IdentityResolver,
        *,
        gate: ScanGate | None = None,
        sms: SmsSender | None = None,
        strategy_factory: ScanStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._resolver = resolver
        self._gate = gate
        self._sms = sms
        self._factory = strategy_factory or ScanStrategyFactory()

    def process_scan(self, code: str, *, recorder_id: str, now: datetime | None = None) -> ScanResult:
        code = (code or "").strip()
        if not code:
            raise ValidationError("Scanned code is empty")

        if self._gate is None:
            return self._process(code, recorder_id=recorder_id, now=now)
        with self._gate.admit(recorder_id, code):
            return self._process(code, recorder_id=recorder_id, now=now)

    def _process(self, code: str, *, recorder_id: str, now: datetime | None) -> ScanResult:
        person = self._resolver.resolve(code)
        if person.role.value not in SCANNABLE_ROLES:
            logger.warning("Scan of %s rejected: role %s is not scannable", person.person_id, person.role.value)
            raise AuthorizationError("Unauthorized Role")

        now = now or now_local()
        today = local_date_string(now)

        log = None
        with self._attendance.day_transaction(person.stable_id, today, person_ids=person.log_ids) as tx:
            decision = self._factory.classify(tx.logs(), today)
            if decision.rejected:
                tx.add_alert(
                    SecurityAlert(
                        person_id=person.person_id,
                        name=person.name,
                        type=ALERT_TYPE_BLOCKED,
                        reason=decision.reason or "",
                        timestamp=now,
                        alert_date=today,
                        gate_id=recorder_id,
                    )
                )
            else:
                log = AttendanceLog(
                    person_id=person.person_id,
                    role=person.role,
                    type=decision.log_type,
                    gate_id=recorder_id,
                    timestamp=now,
                    log_date=today,
                    name=person.name,
                    dept=person.dept,
                    roll_number=person.roll_number,
                    year=person.year,
                )
                log_id = tx.append_log(log)
                log = replace(log, log_id=log_id)

        if log is None:
            logger.warning("Scan of %s (%s) blocked: %s", person.person_id, person.name, decision.reason)
            raise DailyLimitReachedError(decision.reason or "Access denied")

        logger.info("%s %s (%s) at gate %s", log.type.value, person.name, person.person_id, recorder_id)
        if log.type == LogType.ENTRY:
            self._notify_parent(person)
        return ScanResult(person=person, log=log)

    def _notify_parent(self, person: ResolvedPerson) -> None:
        if not self._sms or not person.parent_mobile:
            return
        try:
            self._sms.send(person.parent_mobile, f"{person.name} entered campus.")
        except Exception:
            # The log is already committed; a failed notice must not undo it.
            logger.exception("SMS to parent of %s failed", person.person_id)

    # ---- read side ----
    def history(self, person_id: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> List[AttendanceLog]:
        return list(self._attendance.list_for_person(person_id, limit=limit))

    def today_status(self, person_id: str, *, now: datetime | None = None) -> PresenceStatus:
        today = local_date_string(now or now_local())
        logs = [log for log in self._attendance.list_for_person(person_id) if log.log_date == today]
        return presence_from(latest_log(logs))

    def gate_logs(self, log_date, *, direction: Optional[str] = None) -> List[AttendanceLog]:
        """Logs of one day, newest first; ``direction`` is ``IN`` or ``OUT``."""

        logs = list(self._attendance.list_for_date(_as_date_string(log_date)))
        if direction:
            wanted = _DIRECTIONS.get(direction.strip().upper())
            if wanted is None:
                raise ValidationError("Direction must be IN or OUT")
            logs = [log for log in logs if log.type == wanted]
        logs.sort(key=lambda log: log.timestamp, reverse=True)
        return logs

    def alerts_for(self, alert_date) -> List[SecurityAlert]:
        return list(self._attendance.alerts_for_date(_as_date_string(alert_date)))

    def daily_summary(self, log_date) -> DailySummary:
        day = _as_date_string(log_date)
        logs = self._attendance.list_for_date(day)
        inside = sum(1 for log in latest_by_person(logs).values() if log.type == LogType.ENTRY)
        return DailySummary(
            log_date=day,
            entries=sum(1 for log in logs if log.type == LogType.ENTRY),
            exits=sum(1 for log in logs if log.type == LogType.EXIT),
            inside_now=inside,
            alerts=len(self._attendance.alerts_for_date(day)),
        )

    def purge_all(self) -> int:
        deleted = self._attendance.purge_all()
        logger.warning("Purged %s attendance logs", deleted)
        return deleted


class AttendanceStatusService:
    """HOD roster view: who of a filtered class is inside, left or absent today."""

    def __init__(self, people: PersonRepository, attendance: AttendanceRepository):
        self._people = people
        self._attendance = attendance

    def roster_status(self, flt: RosterFilter, *, now: datetime | None = None) -> List[RosterStatusRow]:
        today = local_date_string(now or now_local())
        students = [p for p in self._people.list_all(Role.STUDENT) if isinstance(p, StudentProfile)]
        latest = latest_by_person(self._attendance.list_for_date(today))

        rows = []
        for s in filter_roster(students, flt):
            last = latest.get(s.roll_number)
            rows.append(RosterStatusRow(student=s, status=presence_from(last), last_log=last))
        return rows
