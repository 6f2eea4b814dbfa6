from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping

import mysql.connector
from mysql.connector.constants import ClientFlag

from ..core.exceptions import ValidationError

DEFAULT_PORT = 3306


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "DBConfig":
        """Build from a settings module's ``DB_CONFIG`` dict."""
        missing = [k for k in ("host", "user", "database") if not values.get(k)]
        if missing:
            raise ValidationError(f"DB_CONFIG is missing {', '.join(missing)}")
        try:
            port = int(values.get("port") or DEFAULT_PORT)
        except (TypeError, ValueError):
            raise ValidationError("DB_CONFIG port must be an integer")
        return cls(
            host=str(values["host"]),
            port=port,
            user=str(values["user"]),
            password=str(values.get("password") or ""),
            database=str(values["database"]),
        )

    def connect_kwargs(self) -> Dict[str, Any]:
        # FOUND_ROWS: rowcount reports matched rows, so a no-op UPDATE still counts as success.
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
            "charset": "utf8mb4",
            "autocommit": False,
            "client_flags": [ClientFlag.FOUND_ROWS],
        }


class DatabaseConnection:
    """Hands out a fresh connection per repository call; one factory per DBConfig."""

    _instances: ClassVar[Dict[DBConfig, "DatabaseConnection"]] = {}

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if config not in cls._instances:
            cls._instances[config] = cls(config)
        return cls._instances[config]

    def connect(self):
        return mysql.connector.connect(**self._config.connect_kwargs())
