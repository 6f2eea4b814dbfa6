from __future__ import annotations

from flask import Flask, request

from ..common.http import admin_required, current_role, current_user_id, json_body, ok
from ..container import Container
from .model import Employee
from .service import EmployeeForm


def _employee_json(e: Employee) -> dict:
    return {
        "user_id": e.user_id,
        "employee_code": e.employee_code,
        "full_name": e.full_name,
        "email": e.email,
        "role": e.role.value,
        "base_salary": str(e.base_salary),
        "rate_per_minute": str(e.rate_per_minute),
        "is_active": e.is_active,
    }


def _form() -> EmployeeForm:
    data = json_body()
    return EmployeeForm(
        employee_code=str(data.get("employee_code") or ""),
        full_name=str(data.get("full_name") or ""),
        email=str(data.get("email") or ""),
        role=str(data.get("role") or "employee"),
        base_salary=data.get("base_salary", 0),
        rate_per_minute=data.get("rate_per_minute", 0),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/employees", methods=["GET"], endpoint="api_admin_employees")
    @admin_required
    def list_employees():
        active_only = request.args.get("active") in {"1", "true", "yes"}
        employees = container.employee_service.list_employees(current_role=current_role(), active_only=active_only)
        return ok([_employee_json(e) for e in employees])

    @app.route("/api/admin/employees", methods=["POST"], endpoint="api_admin_employees_create")
    @admin_required
    def create_employee():
        user_id = container.employee_service.create(current_role=current_role(), form=_form())
        return ok({"user_id": user_id}, 201)

    @app.route("/api/admin/employees/<int:user_id>", methods=["PUT"], endpoint="api_admin_employees_update")
    @admin_required
    def update_employee(user_id: int):
        container.employee_service.update(current_role=current_role(), user_id=user_id, form=_form())
        return ok({"user_id": user_id})

    @app.route("/api/admin/employees/<int:user_id>/deactivate", methods=["POST"], endpoint="api_admin_employees_deactivate")
    @admin_required
    def deactivate_employee(user_id: int):
        container.employee_service.deactivate(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            user_id=user_id,
        )
        return ok({"user_id": user_id, "is_active": False})
