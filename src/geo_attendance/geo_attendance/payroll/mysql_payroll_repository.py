from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import ApprovalStatus, SlipStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import BonusRequest, SalarySlip
from .repository import BonusRepository, SalarySlipRepository

_BONUS_COLUMNS = """
    bonus_id, from_user_id, to_user_id, work_date, late_minutes, reason,
    status, admin_note, decided_by, decided_at, created_at
"""

_SLIP_COLUMNS = """
    slip_id, user_id, month, year, total_work_minutes, total_bonus_minutes,
    base_salary, rate_per_minute, status, finalized_by, finalized_at
"""


def _to_bonus(r: dict) -> BonusRequest:
    return BonusRequest(
        bonus_id=int(r["bonus_id"]),
        from_user_id=int(r["from_user_id"]),
        to_user_id=int(r["to_user_id"]),
        work_date=r["work_date"],
        late_minutes=int(r["late_minutes"]),
        reason=r["reason"],
        status=ApprovalStatus(r["status"]),
        created_at=r["created_at"],
        admin_note=r.get("admin_note"),
        decided_by=int(r["decided_by"]) if r.get("decided_by") is not None else None,
        decided_at=r.get("decided_at"),
    )


def _to_slip(r: dict) -> SalarySlip:
    return SalarySlip(
        slip_id=int(r["slip_id"]),
        user_id=int(r["user_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        total_work_minutes=int(r["total_work_minutes"]),
        total_bonus_minutes=int(r["total_bonus_minutes"]),
        base_salary=Decimal(str(r["base_salary"])),
        rate_per_minute=Decimal(str(r["rate_per_minute"])),
        status=SlipStatus(r["status"]),
        finalized_by=int(r["finalized_by"]) if r.get("finalized_by") is not None else None,
        finalized_at=r.get("finalized_at"),
    )


class MySQLBonusRepository(BonusRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, from_user_id: int, to_user_id: int, work_date: date, late_minutes: int, reason: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO bonus_requests(from_user_id, to_user_id, work_date, late_minutes, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(from_user_id), int(to_user_id), work_date, int(late_minutes), reason, ApprovalStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, bonus_id: int) -> Optional[BonusRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_BONUS_COLUMNS} FROM bonus_requests WHERE bonus_id=%s", (int(bonus_id),))
            r = fetchone(cur)
            return _to_bonus(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[ApprovalStatus] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[BonusRequest]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if user_id is not None:
            clauses.append("(to_user_id=%s OR from_user_id=%s)")
            params.extend([int(user_id), int(user_id)])
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_BONUS_COLUMNS}
                FROM bonus_requests
                WHERE {" AND ".join(clauses)}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_to_bonus(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        bonus_id: int,
        status: ApprovalStatus,
        decided_by: int,
        decided_at: datetime,
        admin_note: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE bonus_requests
                SET status=%s, decided_by=%s, decided_at=%s, admin_note=%s
                WHERE bonus_id=%s AND status=%s
                """,
                (status.value, int(decided_by), decided_at, admin_note, int(bonus_id), ApprovalStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def create_approved(self, *, user_id: int, bonus_minutes: int, work_date: date, source_bonus_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO approved_bonuses(user_id, bonus_minutes, work_date, source_bonus_id)
                VALUES(%s,%s,%s,%s)
                """,
                (int(user_id), int(bonus_minutes), work_date, int(source_bonus_id)),
            )
            return int(cur.lastrowid)

    def sum_approved_minutes(self, *, user_id: int, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COALESCE(SUM(bonus_minutes), 0) AS total
                FROM approved_bonuses
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                """,
                (int(user_id), start_date, end_date),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0


class MySQLSalarySlipRepository(SalarySlipRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, slip_id: int) -> Optional[SalarySlip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SLIP_COLUMNS} FROM salary_slips WHERE slip_id=%s", (int(slip_id),))
            r = fetchone(cur)
            return _to_slip(r) if r else None

    def get_for_period(self, *, user_id: int, month: int, year: int) -> Optional[SalarySlip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SLIP_COLUMNS} FROM salary_slips WHERE user_id=%s AND month=%s AND year=%s",
                (int(user_id), int(month), int(year)),
            )
            r = fetchone(cur)
            return _to_slip(r) if r else None

    def list_slips(
        self,
        *,
        user_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[SalarySlip]:
        clauses = ["1=1"]
        params: list[object] = []
        for column, value in (("user_id", user_id), ("month", month), ("year", year)):
            if value is not None:
                clauses.append(f"{column}=%s")
                params.append(int(value))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SLIP_COLUMNS}
                FROM salary_slips
                WHERE {" AND ".join(clauses)}
                ORDER BY year DESC, month DESC, user_id ASC
                """,
                tuple(params),
            )
            return [_to_slip(r) for r in fetchall(cur)]

    def upsert_draft(
        self,
        *,
        user_id: int,
        month: int,
        year: int,
        total_work_minutes: int,
        total_bonus_minutes: int,
        base_salary: Decimal,
        rate_per_minute: Decimal,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salary_slips(
                    user_id, month, year, total_work_minutes, total_bonus_minutes,
                    base_salary, rate_per_minute, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    total_work_minutes=VALUES(total_work_minutes),
                    total_bonus_minutes=VALUES(total_bonus_minutes),
                    base_salary=VALUES(base_salary),
                    rate_per_minute=VALUES(rate_per_minute),
                    slip_id=LAST_INSERT_ID(slip_id)
                """,
                (
                    int(user_id),
                    int(month),
                    int(year),
                    int(total_work_minutes),
                    int(total_bonus_minutes),
                    base_salary,
                    rate_per_minute,
                    SlipStatus.DRAFT.value,
                ),
            )
            return int(cur.lastrowid)

    def set_status(
        self,
        *,
        slip_id: int,
        status: SlipStatus,
        expected: SlipStatus,
        finalized_by: Optional[int] = None,
        finalized_at: Optional[datetime] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salary_slips
                SET status=%s,
                    finalized_by=COALESCE(%s, finalized_by),
                    finalized_at=COALESCE(%s, finalized_at)
                WHERE slip_id=%s AND status=%s
                """,
                (status.value, finalized_by, finalized_at, int(slip_id), expected.value),
            )
            return cur.rowcount > 0
