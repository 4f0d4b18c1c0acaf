from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import COLLECTIONS, PROFILE_TYPES, Profile
from .repository import PersonRepository

_COMMON_COLUMNS = (
    "profile_id",
    "name",
    "email",
    "dept",
    "mobile",
    "barcode_id",
    "uid",
    "is_claimed",
    "is_blocked",
    "activated_at",
)
_EXTRA_COLUMNS = {
    Role.STUDENT: ("year", "section", "department_group", "parent_mobile", "mentor_id"),
    Role.FACULTY: ("designation",),
}
_BOOL_COLUMNS = {"is_claimed", "is_blocked"}
# Activation state belongs to the person, not to the import sheet.
_CLAIM_COLUMNS = {"uid", "is_claimed", "activated_at"}


def _columns(role: Role) -> tuple[str, ...]:
    return _COMMON_COLUMNS + _EXTRA_COLUMNS.get(role, ())


def _to_profile(role: Role, r: dict) -> Profile:
    values = {}
    for col in _columns(role):
        v = r.get(col)
        if col in _BOOL_COLUMNS:
            v = bool(v)
        elif v is not None and col != "activated_at":
            v = str(v)
        values[col] = v
    return PROFILE_TYPES[role](**{k: v for k, v in values.items() if v is not None})


class MySQLPersonRepository(PersonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select_one(self, role: Role, where: str, value: str) -> Optional[Profile]:
        table = COLLECTIONS[role]
        cols = ", ".join(_columns(role))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {cols} FROM {table} WHERE {where}=%s LIMIT 1", (value,))
            r = fetchone(cur)
            return _to_profile(role, r) if r else None

    def get(self, role: Role, profile_id: str) -> Optional[Profile]:
        return self._select_one(role, "profile_id", profile_id)

    def find_by_uid(self, role: Role, uid: str) -> Optional[Profile]:
        return self._select_one(role, "uid", uid)

    def find_by_email(self, role: Role, email: str) -> Optional[Profile]:
        return self._select_one(role, "email", email)

    def find_by_barcode(self, role: Role, barcode_id: str) -> Optional[Profile]:
        return self._select_one(role, "barcode_id", barcode_id)

    def list_all(self, role: Role) -> Sequence[Profile]:
        table = COLLECTIONS[role]
        cols = ", ".join(_columns(role))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {cols} FROM {table} ORDER BY profile_id ASC")
            return [_to_profile(role, r) for r in fetchall(cur)]

    def claim(self, role: Role, profile_id: str, *, uid: str, activated_at: datetime) -> bool:
        table = COLLECTIONS[role]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {table} SET uid=%s, is_claimed=1, activated_at=%s WHERE profile_id=%s",
                (uid, activated_at, profile_id),
            )
            return cur.rowcount > 0

    def set_blocked(self, role: Role, profile_id: str, *, blocked: bool) -> bool:
        table = COLLECTIONS[role]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE {table} SET is_blocked=%s WHERE profile_id=%s",
                (1 if blocked else 0, profile_id),
            )
            return cur.rowcount > 0

    def upsert_many(self, role: Role, profiles: Sequence[Profile]) -> int:
        if not profiles:
            return 0

        table = COLLECTIONS[role]
        cols = _columns(role)
        placeholders = ",".join(["%s"] * len(cols))
        updates = ", ".join(f"{c}=VALUES({c})" for c in cols if c != "profile_id" and c not in _CLAIM_COLUMNS)

        params = []
        for p in profiles:
            row = dataclasses.asdict(p)
            params.append(tuple(row.get(c) for c in cols))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                f"INSERT INTO {table}({', '.join(cols)}) VALUES({placeholders}) ON DUPLICATE KEY UPDATE {updates}",
                params,
            )
        return len(profiles)
