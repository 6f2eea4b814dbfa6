from __future__ import annotations

import base64
import binascii
from typing import Any, Mapping, Optional

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import admin_required, current_role, current_user_id, json_body, login_required, ok
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..container import Container
from ..geo.model import LocationFix
from ..geo.provider import parse_location_payload

_DATA_URL_PREFIX = "data:"


def _decode_photo(value: Any) -> Optional[bytes]:
    """JSON clients send the selfie as a base64 data URL."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if not isinstance(value, str) or not value.strip().startswith(_DATA_URL_PREFIX):
        raise ValidationError("photo must be a base64 data URL or an uploaded file")
    _, _, encoded = value.strip().partition(",")
    try:
        return base64.b64decode(encoded, validate=True) or None
    except (binascii.Error, ValueError):
        raise ValidationError("photo is not valid base64")


def _submission() -> tuple[LocationFix, Optional[bytes], Optional[str], Optional[str]]:
    """Read location, photo, ssid and device fingerprint from JSON or multipart."""
    if request.files or request.form:
        form: Mapping[str, Any] = request.form
        upload = request.files.get("photo")
        photo = upload.read() if upload else _decode_photo(form.get("photo"))
        location: Mapping[str, Any] = {
            k: form.get(k) for k in ("latitude", "longitude", "accuracy", "timestamp") if form.get(k) not in (None, "")
        }
    else:
        form = json_body()
        photo = _decode_photo(form.get("photo"))
        location = form.get("location") or {}
        if not isinstance(location, dict):
            raise ValidationError("location must be an object")

    fix = parse_location_payload(location, error_code=form.get("location_error"))
    wifi_ssid = (form.get("wifi_ssid") or "").strip() or None
    fingerprint = (form.get("device_fingerprint") or "").strip() or None
    return fix, photo, wifi_ssid, fingerprint


def _date_arg():
    raw = (request.args.get("date") or "").strip()
    if not raw:
        return now_local().date()
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError("date must be YYYY-MM-DD")


def _status_arg() -> Optional[AttendanceStatus]:
    raw = (request.args.get("status") or "").strip().lower()
    if not raw or raw == "all":
        return None
    try:
        return AttendanceStatus(raw)
    except ValueError:
        raise ValidationError(f"unknown status: {raw!r}")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="api_check_in")
    @login_required
    def check_in():
        fix, photo, wifi_ssid, fingerprint = _submission()
        outcome = container.attendance_service.check_in(
            current_user_id(),
            location=fix,
            photo=photo,
            wifi_ssid=wifi_ssid,
            device_fingerprint=fingerprint,
        )
        return ok(outcome.to_dict(), 201)

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="api_check_out")
    @login_required
    def check_out():
        fix, photo, wifi_ssid, fingerprint = _submission()
        outcome = container.attendance_service.check_out(
            current_user_id(),
            location=fix,
            photo=photo,
            wifi_ssid=wifi_ssid,
            device_fingerprint=fingerprint,
        )
        return ok(outcome.to_dict())

    @app.route("/api/attendance/today", methods=["GET"], endpoint="api_attendance_today")
    @login_required
    def today_view():
        today = now_local().date()
        record = container.attendance_service.get_today_record(current_user_id(), today)
        state = container.attendance_service.get_today_state(current_user_id(), today)
        return ok({"state": state.name, "record": record.to_dict() if record else None})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    @login_required
    def history():
        try:
            limit = int(request.args.get("limit", DEFAULT_HISTORY_LIMIT))
        except ValueError:
            raise ValidationError("limit must be an integer")
        limit = max(1, min(limit, 366))
        records = container.attendance_service.get_history(current_user_id(), limit=limit)
        return ok([r.to_dict() for r in records])

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="api_admin_attendance")
    @admin_required
    def daily_attendance():
        rows = container.attendance_service.list_for_date(
            current_role=current_role(),
            work_date=_date_arg(),
            status=_status_arg(),
        )
        return ok([r.to_dict() for r in rows])
