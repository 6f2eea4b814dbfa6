from __future__ import annotations

from flask import Flask, request

from ..common.http import admin_required, current_role, current_user_id, json_body, login_required, ok
from ..core.constants import DEFAULT_QUEUE_LIMIT
from ..core.enums import ReviewPriority
from ..core.exceptions import ValidationError
from ..container import Container


def _priority_arg():
    raw = (request.args.get("priority") or "").strip()
    if not raw:
        return None
    try:
        if raw.isdigit():
            return ReviewPriority(int(raw))
        return ReviewPriority[raw.upper()]
    except (KeyError, ValueError):
        raise ValidationError(f"unknown priority: {raw!r}")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/reviews", methods=["GET"], endpoint="api_admin_reviews")
    @admin_required
    def list_reviews():
        items = container.approval_service.list_pending(
            current_role=current_role(),
            priority=_priority_arg(),
            limit=DEFAULT_QUEUE_LIMIT,
        )
        return ok([i.to_dict() for i in items])

    @app.route("/api/admin/reviews/<int:review_id>/approve", methods=["POST"], endpoint="api_admin_review_approve")
    @admin_required
    def approve_review(review_id: int):
        container.approval_service.approve(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            review_id=review_id,
        )
        return ok({"review_id": review_id, "status": "approved"})

    @app.route("/api/admin/reviews/<int:review_id>/reject", methods=["POST"], endpoint="api_admin_review_reject")
    @admin_required
    def reject_review(review_id: int):
        container.approval_service.reject(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            review_id=review_id,
            reason=str(json_body().get("reason") or ""),
        )
        return ok({"review_id": review_id, "status": "rejected"})

    @app.route("/api/reviews/mine", methods=["GET"], endpoint="api_my_reviews")
    @login_required
    def my_reviews():
        items = container.approval_service.list_for_user(user_id=current_user_id())
        return ok([i.to_dict() for i in items])
