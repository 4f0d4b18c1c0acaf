from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Iterable

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql may name a database; the configured one wins.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def _iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ``;`` outside of quoted strings."""

    buf: list[str] = []
    quote = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
            continue
        if ch == "\\":
            escape = True
            continue
        if quote:
            if ch == quote:
                quote = None
            continue
        if ch in ("'", '"'):
            quote = ch
            continue
        if ch == ";":
            buf.pop()
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: Path) -> int:
    target = DBConfig.from_settings(db_config)
    sql = _strip_line_comments(_strip_create_db_and_use(path.read_text(encoding="utf-8")))

    conn = _connect(target)
    count = 0
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_settings(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    n = _run_script(db_config, Path(schema_path))
    logger.info("Applied %s (%s statements)", schema_path, n)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    n = _run_script(db_config, Path(seed_path))
    logger.info("Applied %s (%s statements)", seed_path, n)


# Demo identity-provider accounts: (account_id, role, email, name, profile table, profile_id)
DEMO_ACCOUNTS = [
    ("demo-coordinator", "coordinator", "coordinator@campus.test", "Demo Coordinator", "coordinators", "CO001"),
    ("demo-hod", "hod", "hod.cse@campus.test", "Demo HOD", "hods", "HOD001"),
    ("demo-security", "security", "gate1@campus.test", "Gate 1", "security", "SEC001"),
    ("demo-faculty", "faculty", "f001@campus.test", "Dr. Demo Faculty", "faculty", "F001"),
]


def ensure_demo_accounts(db_config: dict) -> None:
    """Activate the seeded staff profiles for the demo accounts above."""

    conn = _connect(DBConfig.from_settings(db_config))
    try:
        cur = conn.cursor()
        now = datetime.now()
        for account_id, role, email, name, table, profile_id in DEMO_ACCOUNTS:
            cur.execute(
                """
                INSERT INTO users(account_id, role, email, name) VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE role=VALUES(role), email=VALUES(email), name=VALUES(name)
                """,
                (account_id, role, email, name),
            )
            cur.execute(
                f"UPDATE {table} SET uid=%s, is_claimed=1, activated_at=COALESCE(activated_at, %s) WHERE profile_id=%s",
                (account_id, now, profile_id),
            )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_settings(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
