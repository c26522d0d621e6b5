from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import mysql.connector

_DEFAULTS = {"host": "localhost", "port": 3306, "user": "root", "password": "", "database": "timesheet_db"}


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: Mapping[str, Any]) -> "DBConfig":
        merged = {**_DEFAULTS, **{k: v for k, v in db_config.items() if v not in (None, "")}}
        return cls(
            host=str(merged["host"]),
            port=int(merged["port"]),
            user=str(merged["user"]),
            password=str(merged["password"]),
            database=str(merged["database"]),
        )

    def describe(self) -> str:
        # Safe to log: no password.
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Process-wide connection factory.

    Each repository call opens its own short-lived connection, so there is no
    pool to share; the singleton only pins the configuration.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = cls(config)
        return cls._instance

    def connect(self, *, with_database: bool = True):
        params: dict[str, Any] = {
            "host": self._config.host,
            "port": self._config.port,
            "user": self._config.user,
            "password": self._config.password,
            "use_pure": True,
        }
        if with_database:
            params["database"] = self._config.database
        return mysql.connector.connect(**params)
