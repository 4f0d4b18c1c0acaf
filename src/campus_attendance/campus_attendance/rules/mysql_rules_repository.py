from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.constants import GLOBAL_RULES_DOC_ID
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, from_json, to_json
from .model import GlobalRules
from .repository import RulesRepository


class MySQLRulesRepository(RulesRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[GlobalRules]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT body FROM settings WHERE doc_id=%s", (GLOBAL_RULES_DOC_ID,))
            r = fetchone(cur)
            return GlobalRules.from_dict(from_json(r["body"], {})) if r else None

    def save(self, rules: GlobalRules) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO settings(doc_id, body, updated_at) VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE body=VALUES(body), updated_at=VALUES(updated_at)
                """,
                (GLOBAL_RULES_DOC_ID, to_json(rules.to_dict()), datetime.now()),
            )
