"""Shared pieces for the JSON controllers.

Authentication happens elsewhere: an upstream component stores ``user_id``
and ``role`` in the Flask session before these endpoints are reached.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AlreadyCheckedIn,
    AuthorizationError,
    DomainError,
    LocationUnavailable,
    NotCheckedIn,
    OutsideGeofence,
    PersistenceFailure,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins.
_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (AuthorizationError, 403),
    (AlreadyCheckedIn, 409),
    (NotCheckedIn, 409),
    (OutsideGeofence, 422),
    (LocationUnavailable, 422),
    (PersistenceFailure, 503),
    (ValidationError, 400),
]


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def error_response(code: str, message: str, status: int):
    return jsonify({"success": False, "code": code, "message": message}), status


def ok(payload: Any = None, status: int = 200):
    body: dict[str, Any] = {"success": True}
    if payload is not None:
        body["data"] = payload
    return jsonify(body), status


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    try:
        return Role(session.get("role"))
    except ValueError:
        return Role.EMPLOYEE


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("request body must be a JSON object")
    return data


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("UNAUTHENTICATED", "login required", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("UNAUTHENTICATED", "login required", 401)
        if session.get("role") != Role.ADMIN.value:
            return error_response(AuthorizationError.code, "admin role required", 403)
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = status_for(e)
        if status >= 500:
            logger.error("request failed: %s %s: %s", request.method, request.path, e)
        return error_response(e.code, str(e), status)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            code = (e.name or "error").upper().replace(" ", "_")
            return error_response(code, e.description or code, e.code or 500)
        logger.exception("unhandled error on %s %s", request.method, request.path)
        return error_response("INTERNAL_ERROR", "internal server error", 500)
