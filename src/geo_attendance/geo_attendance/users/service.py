from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from ..common.validators import require_email, require_non_empty, require_non_negative_decimal
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, PersistenceFailure, ValidationError
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmployeeForm:
    full_name: str
    email: str
    role: str = Role.EMPLOYEE.value
    base_salary: object = 0
    rate_per_minute: object = 0
    employee_code: str = ""


class EmployeeService:
    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")

    @staticmethod
    def _parse_role(value: str) -> Role:
        try:
            return Role((value or "").strip().lower())
        except ValueError:
            raise ValidationError(f"unknown role: {value!r}")

    def get_active(self, user_id: int) -> Employee:
        emp = self._employees.get_by_id(int(user_id))
        if not emp:
            raise ValidationError("employee not found")
        if not emp.is_active:
            raise ValidationError("employee is deactivated")
        return emp

    def list_employees(self, *, current_role: Role, active_only: bool = False) -> Sequence[Employee]:
        self._require_admin(current_role)
        return self._employees.list_all(active_only=active_only)

    def create(self, *, current_role: Role, form: EmployeeForm) -> int:
        self._require_admin(current_role)
        user_id = self._employees.create(
            employee_code=require_non_empty(form.employee_code, "employee_code"),
            full_name=require_non_empty(form.full_name, "full_name"),
            email=require_email(form.email),
            role=self._parse_role(form.role),
            base_salary=require_non_negative_decimal(form.base_salary, "base_salary"),
            rate_per_minute=require_non_negative_decimal(form.rate_per_minute, "rate_per_minute"),
        )
        logger.info("employee created: user_id=%s", user_id)
        return user_id

    def update(self, *, current_role: Role, user_id: int, form: EmployeeForm) -> None:
        self._require_admin(current_role)
        if not self._employees.get_by_id(int(user_id)):
            raise ValidationError("employee not found")

        ok = self._employees.update(
            user_id=int(user_id),
            full_name=require_non_empty(form.full_name, "full_name"),
            email=require_email(form.email),
            role=self._parse_role(form.role),
            base_salary=require_non_negative_decimal(form.base_salary, "base_salary"),
            rate_per_minute=require_non_negative_decimal(form.rate_per_minute, "rate_per_minute"),
        )
        if not ok:
            raise PersistenceFailure("employee update failed")

    def deactivate(self, *, current_role: Role, admin_user_id: int, user_id: int) -> None:
        self._require_admin(current_role)
        if int(admin_user_id) == int(user_id):
            raise ValidationError("admins cannot deactivate themselves")
        if not self._employees.set_active(user_id=int(user_id), is_active=False):
            raise ValidationError("employee not found")
        logger.info("employee deactivated: user_id=%s by=%s", user_id, admin_user_id)
