from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = False) -> Sequence[Employee]:
        raise NotImplementedError

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
        raise NotImplementedError

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
        raise NotImplementedError

    def set_active(self, *, user_id: int, is_active: bool) -> bool:
        raise NotImplementedError
