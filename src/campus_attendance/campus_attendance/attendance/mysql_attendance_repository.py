from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from ..core.enums import LogType, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, db_transaction, fetchall
from .model import AttendanceLog, SecurityAlert
from .repository import AttendanceRepository, DayTransaction

_LOG_COLUMNS = "log_id, person_id, role, type, gate_id, ts, log_date, name, dept, roll_number, year"


def _to_log(r: dict) -> AttendanceLog:
    return AttendanceLog(
        log_id=int(r["log_id"]),
        person_id=r["person_id"],
        role=Role(r["role"]),
        type=LogType(r["type"]),
        gate_id=r.get("gate_id") or "",
        timestamp=r["ts"],
        log_date=str(r["log_date"]),
        name=r.get("name") or "",
        dept=r.get("dept") or "",
        roll_number=r.get("roll_number") or "",
        year=r.get("year"),
    )


def _to_alert(r: dict) -> SecurityAlert:
    return SecurityAlert(
        alert_id=int(r["alert_id"]),
        person_id=r["person_id"],
        name=r.get("name") or "",
        type=r["type"],
        reason=r["reason"],
        timestamp=r["ts"],
        alert_date=str(r["alert_date"]),
        gate_id=r.get("gate_id"),
    )


class _MySQLDayTransaction(DayTransaction):
    def __init__(self, cur, person_ids: Sequence[str], log_date: str):
        self._cur = cur
        self._person_ids = list(person_ids)
        self._log_date = log_date

    def logs(self) -> Sequence[AttendanceLog]:
        marks = ",".join(["%s"] * len(self._person_ids))
        self._cur.execute(
            f"SELECT {_LOG_COLUMNS} FROM attendance_logs WHERE log_date=%s AND person_id IN ({marks})",
            (self._log_date, *self._person_ids),
        )
        return [_to_log(r) for r in fetchall(self._cur)]

    def append_log(self, log: AttendanceLog) -> int:
        self._cur.execute(
            """
            INSERT INTO attendance_logs(person_id, role, type, gate_id, ts, log_date, name, dept, roll_number, year)
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                log.person_id,
                log.role.value,
                log.type.value,
                log.gate_id,
                log.timestamp,
                log.log_date,
                log.name,
                log.dept,
                log.roll_number,
                log.year,
            ),
        )
        return int(self._cur.lastrowid)

    def add_alert(self, alert: SecurityAlert) -> int:
        self._cur.execute(
            """
            INSERT INTO security_alerts(person_id, name, type, reason, gate_id, ts, alert_date)
            VALUES(%s,%s,%s,%s,%s,%s,%s)
            """,
            (alert.person_id, alert.name, alert.type, alert.reason, alert.gate_id, alert.timestamp, alert.alert_date),
        )
        return int(self._cur.lastrowid)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def day_transaction(
        self, lock_id: str, log_date: str, *, person_ids: Optional[Sequence[str]] = None
    ) -> Iterator[DayTransaction]:
        with db_transaction(self._conn_factory) as (_, cur):
            # The lock row serializes deciders for one person and day, including
            # the very first scan when no log row exists yet to lock.
            cur.execute(
                "INSERT IGNORE INTO attendance_day_locks(person_id, log_date) VALUES(%s,%s)",
                (lock_id, log_date),
            )
            cur.execute(
                "SELECT person_id FROM attendance_day_locks WHERE person_id=%s AND log_date=%s FOR UPDATE",
                (lock_id, log_date),
            )
            fetchall(cur)
            yield _MySQLDayTransaction(cur, person_ids or [lock_id], log_date)

    def list_for_person(self, person_id: str, *, limit: Optional[int] = None) -> Sequence[AttendanceLog]:
        sql = f"SELECT {_LOG_COLUMNS} FROM attendance_logs WHERE person_id=%s ORDER BY ts DESC, log_id DESC"
        params: tuple = (person_id,)
        if limit is not None:
            sql += " LIMIT %s"
            params = (person_id, int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_log(r) for r in fetchall(cur)]

    def list_for_date(self, log_date: str) -> Sequence[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_LOG_COLUMNS} FROM attendance_logs WHERE log_date=%s ORDER BY ts ASC, log_id ASC",
                (log_date,),
            )
            return [_to_log(r) for r in fetchall(cur)]

    def alerts_for_date(self, alert_date: str) -> Sequence[SecurityAlert]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT alert_id, person_id, name, type, reason, gate_id, ts, alert_date
                FROM security_alerts
                WHERE alert_date=%s
                ORDER BY ts DESC, alert_id DESC
                """,
                (alert_date,),
            )
            return [_to_alert(r) for r in fetchall(cur)]

    def purge_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_logs")
            deleted = cur.rowcount
            cur.execute("DELETE FROM attendance_day_locks")
            return int(deleted)
