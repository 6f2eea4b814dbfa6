from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import ApprovalStatus, AttendanceStatus
from ..core.exceptions import AlreadyCheckedIn
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_entry, json_column, point_to_json
from ..geo.model import GeoPoint
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, work_date,
    check_in_time, check_in_location, check_in_photo,
    check_out_time, check_out_location, check_out_photo,
    total_minutes, status, approval_status, validation_score
"""


def _to_point(value) -> Optional[GeoPoint]:
    data = json_column(value)
    if not data:
        return None
    return GeoPoint(data["latitude"], data["longitude"])


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_in_location=_to_point(r.get("check_in_location")),
        check_in_photo=r.get("check_in_photo"),
        check_out_time=r.get("check_out_time"),
        check_out_location=_to_point(r.get("check_out_location")),
        check_out_photo=r.get("check_out_photo"),
        total_minutes=int(r.get("total_minutes") or 0),
        status=AttendanceStatus(r["status"]),
        approval_status=ApprovalStatus(r["approval_status"]),
        validation_score=int(r["validation_score"]) if r.get("validation_score") is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s
                ORDER BY work_date DESC
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        location: Optional[GeoPoint],
        photo: Optional[str],
        approval_status: ApprovalStatus,
        validation_score: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        user_id, work_date, check_in_time, check_in_location, check_in_photo,
                        status, approval_status, validation_score
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(user_id),
                        work_date,
                        check_in_time,
                        point_to_json(location),
                        photo,
                        AttendanceStatus.INCOMPLETE.value,
                        approval_status.value,
                        validation_score,
                    ),
                )
            except mysql.connector.Error as e:
                if is_duplicate_entry(e):
                    raise AlreadyCheckedIn(f"user {user_id} already checked in on {work_date}") from e
                raise
            return int(cur.lastrowid)

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        location: Optional[GeoPoint],
        photo: Optional[str],
        total_minutes: int,
        approval_status: ApprovalStatus,
        validation_score: Optional[int] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            # The check_out_time IS NULL guard keeps two concurrent check-outs from both landing.
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_location=%s, check_out_photo=%s,
                    total_minutes=%s, status=%s, approval_status=%s, validation_score=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (
                    check_out_time,
                    point_to_json(location),
                    photo,
                    int(total_minutes),
                    AttendanceStatus.COMPLETED.value,
                    approval_status.value,
                    validation_score,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def set_approval_status(self, *, attendance_id: int, approval_status: ApprovalStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET approval_status=%s WHERE attendance_id=%s",
                (approval_status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def sum_completed_minutes(self, *, user_id: int, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(total_minutes), 0) AS total
                FROM attendance_records
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                  AND status=%s AND approval_status<>%s
                """,
                (int(user_id), start_date, end_date, AttendanceStatus.COMPLETED.value, ApprovalStatus.REJECTED.value),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_for_date(self, work_date: date, *, status: Optional[AttendanceStatus] = None) -> Sequence[AttendanceRecord]:
        sql = f"SELECT {_COLUMNS} FROM attendance_records WHERE work_date=%s"
        params: list = [work_date]
        if status is not None:
            sql += " AND status=%s"
            params.append(status.value)
        sql += " ORDER BY check_in_time DESC, attendance_id DESC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def delete(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def reset_checkout(
        self,
        *,
        attendance_id: int,
        approval_status: ApprovalStatus,
        validation_score: Optional[int] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=NULL, check_out_location=NULL, check_out_photo=NULL,
                    total_minutes=0, status=%s, approval_status=%s, validation_score=%s
                WHERE attendance_id=%s
                """,
                (
                    AttendanceStatus.INCOMPLETE.value,
                    approval_status.value,
                    validation_score,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0
