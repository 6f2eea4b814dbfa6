from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee.

    Note: plain data object; credentials live with the external auth provider.
    """

    user_id: int
    employee_code: str
    full_name: str
    email: str
    role: Role
    base_salary: Decimal = Decimal("0")
    rate_per_minute: Decimal = Decimal("0")
    is_active: bool = True
