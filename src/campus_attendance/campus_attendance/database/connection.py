from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "DBConfig":
        """Build from a settings module's ``DB_CONFIG`` dict."""
        return cls(
            host=str(settings["host"]),
            port=int(settings.get("port", 3306)),
            user=str(settings["user"]),
            password=str(settings.get("password") or ""),
            database=str(settings["database"]),
        )

    @property
    def target(self) -> str:
        # Logged at startup; never includes the password.
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Process-wide factory of short-lived MySQL connections.

    Every repository call opens its own connection and closes it when done;
    transactions never outlive one ``db_cursor``/``db_transaction`` block.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self.config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        c = self.config
        return mysql.connector.connect(host=c.host, port=c.port, user=c.user, password=c.password, database=c.database)
