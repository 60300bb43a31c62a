from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = 10

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any], *, default_database: str = "payroll_db") -> "DBConfig":
        """Build from the ``DB_CONFIG`` dict of a settings module."""
        return cls(
            host=str(values.get("host", "localhost")),
            port=int(values.get("port", 3306)),
            user=str(values.get("user", "root")),
            password=str(values.get("password", "")),
            database=str(values.get("database") or default_database),
            connect_timeout=int(values.get("connect_timeout", 10)),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "connection_timeout": self.connect_timeout,
        }
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class DatabaseConnection:
    """Process-wide connection factory.

    Every repository call opens a short-lived connection and runs one transaction
    on it (see ``db_cursor``); nothing is pooled or shared between threads.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            **self._config.connect_kwargs(),
            autocommit=False,
            # rowcount reports matched rows, so re-saving identical values still counts
            client_flags=[ClientFlag.FOUND_ROWS],
        )
