from __future__ import annotations

from decimal import Decimal

import pytest

from src.geo_attendance.geo_attendance.core.enums import Role
from src.geo_attendance.geo_attendance.core.exceptions import AuthorizationError, ValidationError
from src.geo_attendance.geo_attendance.users.service import EmployeeForm

from ..fakes import ADMIN_ID, EMPLOYEE_ID


def _form(**kw) -> EmployeeForm:
    data = {
        "employee_code": "E100",
        "full_name": "Nguyen Van A",
        "email": "a@example.com",
        "role": "employee",
        "base_salary": "1500.00",
        "rate_per_minute": "0.25",
    }
    data.update(kw)
    return EmployeeForm(**data)


def test_admin_creates_employee(container):
    user_id = container.employee_service.create(current_role=Role.ADMIN, form=_form())

    emp = container.employees_repo.get_by_id(user_id)
    assert emp.full_name == "Nguyen Van A"
    assert emp.base_salary == Decimal("1500.00")
    assert emp.role == Role.EMPLOYEE


@pytest.mark.parametrize(
    "override",
    [
        {"full_name": "  "},
        {"email": "not-an-email"},
        {"base_salary": "-1"},
        {"rate_per_minute": "abc"},
        {"role": "superuser"},
        {"employee_code": ""},
    ],
)
def test_create_validates_input(container, override):
    with pytest.raises(ValidationError):
        container.employee_service.create(current_role=Role.ADMIN, form=_form(**override))


def test_employee_cannot_manage_employees(container):
    with pytest.raises(AuthorizationError):
        container.employee_service.create(current_role=Role.EMPLOYEE, form=_form())
    with pytest.raises(AuthorizationError):
        container.employee_service.list_employees(current_role=Role.EMPLOYEE)


def test_update_changes_fields(container):
    container.employee_service.update(
        current_role=Role.ADMIN,
        user_id=EMPLOYEE_ID,
        form=_form(full_name="Renamed", email="r@example.com"),
    )
    assert container.employees_repo.get_by_id(EMPLOYEE_ID).full_name == "Renamed"


def test_update_unknown_employee_fails(container):
    with pytest.raises(ValidationError):
        container.employee_service.update(current_role=Role.ADMIN, user_id=4040, form=_form())


def test_deactivate(container):
    container.employee_service.deactivate(current_role=Role.ADMIN, admin_user_id=ADMIN_ID, user_id=EMPLOYEE_ID)

    active = container.employee_service.list_employees(current_role=Role.ADMIN, active_only=True)
    assert EMPLOYEE_ID not in [e.user_id for e in active]
    with pytest.raises(ValidationError):
        container.employee_service.get_active(EMPLOYEE_ID)


def test_admin_cannot_deactivate_self(container):
    with pytest.raises(ValidationError):
        container.employee_service.deactivate(current_role=Role.ADMIN, admin_user_id=ADMIN_ID, user_id=ADMIN_ID)
