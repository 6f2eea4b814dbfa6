from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import admin_required, current_role, current_user_id, json_body, login_required, ok
from ..core.exceptions import ValidationError
from ..container import Container
from .model import BonusRequest


def _bonus_json(b: BonusRequest) -> dict:
    return {
        "bonus_id": b.bonus_id,
        "from_user_id": b.from_user_id,
        "to_user_id": b.to_user_id,
        "work_date": b.work_date.isoformat(),
        "late_minutes": b.late_minutes,
        "reason": b.reason,
        "status": b.status.value,
        "admin_note": b.admin_note,
        "created_at": b.created_at.isoformat() if b.created_at else None,
    }


def _int_arg(name: str):
    raw = request.args.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def _period(data: dict) -> tuple[int, int]:
    try:
        return int(data["month"]), int(data["year"])
    except (KeyError, TypeError, ValueError):
        raise ValidationError("month and year are required integers")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/bonuses", methods=["POST"], endpoint="api_bonus_create")
    @login_required
    def create_bonus():
        data = json_body()
        try:
            work_date = parse_iso_date(str(data.get("work_date") or ""))
        except ValueError:
            raise ValidationError("work_date must be YYYY-MM-DD")
        bonus_id = container.bonus_service.create(
            from_user_id=current_user_id(),
            to_user_id=data.get("to_user_id") or 0,
            work_date=work_date,
            late_minutes=data.get("late_minutes"),
            reason=str(data.get("reason") or ""),
        )
        return ok({"bonus_id": bonus_id}, 201)

    @app.route("/api/bonuses", methods=["GET"], endpoint="api_bonus_mine")
    @login_required
    def my_bonuses():
        return ok([_bonus_json(b) for b in container.bonus_service.list_for_user(user_id=current_user_id())])

    @app.route("/api/admin/bonuses", methods=["GET"], endpoint="api_admin_bonuses")
    @admin_required
    def pending_bonuses():
        return ok([_bonus_json(b) for b in container.bonus_service.list_pending(current_role=current_role())])

    @app.route("/api/admin/bonuses/<int:bonus_id>/approve", methods=["POST"], endpoint="api_admin_bonus_approve")
    @admin_required
    def approve_bonus(bonus_id: int):
        approved_id = container.bonus_service.approve(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            bonus_id=bonus_id,
            admin_note=json_body().get("admin_note"),
        )
        return ok({"bonus_id": bonus_id, "approved_bonus_id": approved_id})

    @app.route("/api/admin/bonuses/<int:bonus_id>/reject", methods=["POST"], endpoint="api_admin_bonus_reject")
    @admin_required
    def reject_bonus(bonus_id: int):
        container.bonus_service.reject(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            bonus_id=bonus_id,
            admin_note=str(json_body().get("admin_note") or ""),
        )
        return ok({"bonus_id": bonus_id, "status": "rejected"})

    @app.route("/api/admin/salary-slips/generate", methods=["POST"], endpoint="api_admin_slips_generate")
    @admin_required
    def generate_slips():
        month, year = _period(json_body())
        report = container.salary_slip_service.generate(current_role=current_role(), month=month, year=year)
        return ok({"generated": report.generated, "skipped": report.skipped})

    @app.route("/api/admin/salary-slips/<int:slip_id>/finalize", methods=["POST"], endpoint="api_admin_slip_finalize")
    @admin_required
    def finalize_slip(slip_id: int):
        container.salary_slip_service.finalize(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            slip_id=slip_id,
        )
        return ok({"slip_id": slip_id, "status": "finalized"})

    @app.route("/api/admin/salary-slips/<int:slip_id>/send", methods=["POST"], endpoint="api_admin_slip_send")
    @admin_required
    def send_slip(slip_id: int):
        container.salary_slip_service.mark_sent(current_role=current_role(), slip_id=slip_id)
        return ok({"slip_id": slip_id, "status": "sent"})

    @app.route("/api/salary-slips", methods=["GET"], endpoint="api_salary_slips")
    @login_required
    def list_slips():
        slips = container.salary_slip_service.list_slips(
            current_role=current_role(),
            current_user_id=current_user_id(),
            month=_int_arg("month"),
            year=_int_arg("year"),
        )
        return ok(container.salary_slip_service.to_rows(slips))
