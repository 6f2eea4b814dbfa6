from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_entry
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "user_id, employee_code, full_name, email, role, base_salary, rate_per_minute, is_active"


def _to_employee(r: dict) -> Employee:
    return Employee(
        user_id=int(r["user_id"]),
        employee_code=r["employee_code"],
        full_name=r["full_name"],
        email=r["email"],
        role=Role(r["role"]),
        base_salary=Decimal(str(r["base_salary"])),
        rate_per_minute=Decimal(str(r["rate_per_minute"])),
        is_active=bool(r["is_active"]),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_all(self, *, active_only: bool = False) -> Sequence[Employee]:
        sql = f"SELECT {_COLUMNS} FROM employees"
        if active_only:
            sql += " WHERE is_active=1"
        sql += " ORDER BY full_name ASC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql)
            return [_to_employee(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        employee_code: str,
        full_name: str,
        email: str,
        role: Role,
        base_salary: Decimal,
        rate_per_minute: Decimal,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO employees(employee_code, full_name, email, role, base_salary, rate_per_minute)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    """,
                    (employee_code, full_name, email, role.value, base_salary, rate_per_minute),
                )
            except mysql.connector.Error as e:
                if is_duplicate_entry(e):
                    raise ValidationError("employee code or email already in use") from e
                raise
            return int(cur.lastrowid)

    def update(
        self,
        *,
        user_id: int,
        full_name: str,
        email: str,
        role: Role,
        base_salary: Decimal,
        rate_per_minute: Decimal,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET full_name=%s, email=%s, role=%s, base_salary=%s, rate_per_minute=%s
                WHERE user_id=%s
                """,
                (full_name, email, role.value, base_salary, rate_per_minute, int(user_id)),
            )
            return cur.rowcount > 0

    def set_active(self, *, user_id: int, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET is_active=%s WHERE user_id=%s", (1 if is_active else 0, int(user_id)))
            return cur.rowcount > 0
