from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, from_json, to_json
from .model import Timetable, schedule_from_dict, schedule_to_dict
from .repository import TimetableRepository


class MySQLTimetableRepository(TimetableRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[Timetable]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT branch, year, section, schedule, version, updated_by, updated_at
                FROM timetables
                WHERE timetable_key=%s
                """,
                (key,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Timetable(
                branch=r["branch"],
                year=int(r["year"]),
                section=r["section"],
                schedule=schedule_from_dict(from_json(r["schedule"], {})),
                version=int(r["version"]),
                updated_by=r.get("updated_by"),
                updated_at=r.get("updated_at"),
            )

    def save(self, timetable: Timetable, *, expected_version: Optional[int] = None) -> int:
        body = to_json(schedule_to_dict(timetable.schedule))
        now = timetable.updated_at or datetime.now()
        key = timetable.key

        with db_cursor(self._conn_factory) as (_, cur):
            if expected_version is None:
                cur.execute(
                    """
                    INSERT INTO timetables(timetable_key, branch, year, section, schedule, version, updated_by, updated_at)
                    VALUES(%s,%s,%s,%s,%s,1,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        schedule=VALUES(schedule), version=version+1,
                        updated_by=VALUES(updated_by), updated_at=VALUES(updated_at)
                    """,
                    (key, timetable.branch, int(timetable.year), timetable.section, body, timetable.updated_by, now),
                )
            elif int(expected_version) == 0:
                cur.execute(
                    """
                    INSERT IGNORE INTO timetables(timetable_key, branch, year, section, schedule, version, updated_by, updated_at)
                    VALUES(%s,%s,%s,%s,%s,1,%s,%s)
                    """,
                    (key, timetable.branch, int(timetable.year), timetable.section, body, timetable.updated_by, now),
                )
                if cur.rowcount == 0:
                    return -1
            else:
                cur.execute(
                    """
                    UPDATE timetables
                    SET schedule=%s, version=version+1, updated_by=%s, updated_at=%s
                    WHERE timetable_key=%s AND version=%s
                    """,
                    (body, timetable.updated_by, now, key, int(expected_version)),
                )
                if cur.rowcount == 0:
                    return -1

            cur.execute("SELECT version FROM timetables WHERE timetable_key=%s", (key,))
            r = fetchone(cur)
            return int(r["version"]) if r else 0
