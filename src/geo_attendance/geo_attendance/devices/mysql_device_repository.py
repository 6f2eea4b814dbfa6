from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Device
from .repository import DeviceRepository

_COLUMNS = "device_id, user_id, device_fingerprint, device_name, is_active, first_seen, last_seen"


def _to_device(r: dict) -> Device:
    return Device(
        device_id=int(r["device_id"]),
        user_id=int(r["user_id"]),
        fingerprint=r["device_fingerprint"],
        device_name=r["device_name"],
        is_active=bool(r["is_active"]),
        first_seen=r["first_seen"],
        last_seen=r["last_seen"],
    )


class MySQLDeviceRepository(DeviceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, device_id: int) -> Optional[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM approved_devices WHERE device_id=%s", (int(device_id),))
            r = fetchone(cur)
            return _to_device(r) if r else None

    def get_by_fingerprint(self, *, user_id: int, fingerprint: str) -> Optional[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM approved_devices WHERE user_id=%s AND device_fingerprint=%s",
                (int(user_id), fingerprint),
            )
            r = fetchone(cur)
            return _to_device(r) if r else None

    def list_for_user(self, user_id: int, *, active_only: bool = False) -> Sequence[Device]:
        sql = f"SELECT {_COLUMNS} FROM approved_devices WHERE user_id=%s"
        if active_only:
            sql += " AND is_active=1"
        sql += " ORDER BY last_seen DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, (int(user_id),))
            return [_to_device(r) for r in fetchall(cur)]

    def list_inactive(self, *, limit: int = 200) -> Sequence[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM approved_devices WHERE is_active=0 ORDER BY first_seen ASC LIMIT %s",
                (int(limit),),
            )
            return [_to_device(r) for r in fetchall(cur)]

    def create(self, *, user_id: int, fingerprint: str, device_name: str, seen_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO approved_devices(user_id, device_fingerprint, device_name, is_active, first_seen, last_seen)
                VALUES(%s,%s,%s,0,%s,%s)
                """,
                (int(user_id), fingerprint, device_name, seen_at, seen_at),
            )
            return int(cur.lastrowid)

    def set_active(self, *, device_id: int, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE approved_devices SET is_active=%s WHERE device_id=%s",
                (1 if is_active else 0, int(device_id)),
            )
            return cur.rowcount > 0

    def touch(self, *, device_id: int, seen_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE approved_devices SET last_seen=%s WHERE device_id=%s", (seen_at, int(device_id)))
            return cur.rowcount > 0
