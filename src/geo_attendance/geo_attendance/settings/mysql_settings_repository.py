from __future__ import annotations

from typing import Mapping, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_all(self) -> dict[str, str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT setting_key, setting_value FROM company_settings")
            return {r["setting_key"]: r["setting_value"] for r in fetchall(cur)}

    def upsert_many(self, values: Mapping[str, str]) -> bool:
        if not values:
            return True
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO company_settings(setting_key, setting_value)
                VALUES(%s,%s)
                ON DUPLICATE KEY UPDATE setting_value=VALUES(setting_value)
                """,
                [(k, v) for k, v in values.items()],
            )
            return True

    def list_approved_ssids(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT ssid FROM approved_wifi_networks WHERE is_active=1")
            return [r["ssid"] for r in fetchall(cur)]

    def add_approved_ssid(self, *, ssid: str, bssid: str | None = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO approved_wifi_networks(ssid, bssid, is_active)
                VALUES(%s,%s,1)
                ON DUPLICATE KEY UPDATE bssid=VALUES(bssid), is_active=1, wifi_id=LAST_INSERT_ID(wifi_id)
                """,
                (ssid, bssid),
            )
            return int(cur.lastrowid)

    def deactivate_ssid(self, *, ssid: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE approved_wifi_networks SET is_active=0 WHERE ssid=%s", (ssid,))
            return cur.rowcount > 0
