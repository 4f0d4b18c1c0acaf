from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Account
from .repository import AccountRepository


def _to_account(r: dict) -> Account:
    try:
        role = Role(r.get("role") or Role.STUDENT.value)
    except ValueError:
        role = Role.STUDENT
    return Account(account_id=r["account_id"], role=role, email=r.get("email"), name=r.get("name"))


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, account_id: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT account_id, role, email, name FROM users WHERE account_id=%s", (account_id,))
            r = fetchone(cur)
            return _to_account(r) if r else None

    def save(self, account: Account) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(account_id, role, email, name)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE role=VALUES(role), email=VALUES(email), name=VALUES(name)
                """,
                (account.account_id, account.role.value, account.email, account.name),
            )

    def list_by_role(self, role: Role) -> Sequence[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT account_id, role, email, name FROM users WHERE role=%s ORDER BY name ASC",
                (role.value,),
            )
            return [_to_account(r) for r in fetchall(cur)]
