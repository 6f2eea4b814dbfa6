from __future__ import annotations

from flask import Flask

from ..common.http import admin_required, current_role, current_user_id, json_body, login_required, ok
from ..container import Container
from .model import Device


def _device_json(d: Device) -> dict:
    return {
        "device_id": d.device_id,
        "user_id": d.user_id,
        "fingerprint": d.fingerprint,
        "device_name": d.device_name,
        "is_active": d.is_active,
        "first_seen": d.first_seen.isoformat() if d.first_seen else None,
        "last_seen": d.last_seen.isoformat() if d.last_seen else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/devices", methods=["GET"], endpoint="api_devices")
    @login_required
    def my_devices():
        return ok([_device_json(d) for d in container.device_service.list_for_user(current_user_id())])

    @app.route("/api/devices", methods=["POST"], endpoint="api_devices_register")
    @login_required
    def register_device():
        data = json_body()
        device = container.device_service.register(
            user_id=current_user_id(),
            fingerprint=str(data.get("device_fingerprint") or ""),
            device_name=str(data.get("device_name") or ""),
            max_devices=container.settings_service.get().max_devices_per_user,
        )
        return ok(_device_json(device), 201)

    @app.route("/api/admin/devices/pending", methods=["GET"], endpoint="api_admin_devices_pending")
    @admin_required
    def pending_devices():
        return ok([_device_json(d) for d in container.device_service.list_pending(current_role=current_role())])

    @app.route("/api/admin/devices/<int:device_id>/approve", methods=["POST"], endpoint="api_admin_device_approve")
    @admin_required
    def approve_device(device_id: int):
        container.device_service.approve(
            current_role=current_role(),
            device_id=device_id,
            max_devices=container.settings_service.get().max_devices_per_user,
        )
        return ok({"device_id": device_id, "is_active": True})

    @app.route("/api/admin/devices/<int:device_id>/deactivate", methods=["POST"], endpoint="api_admin_device_deactivate")
    @admin_required
    def deactivate_device(device_id: int):
        container.device_service.deactivate(current_role=current_role(), device_id=device_id)
        return ok({"device_id": device_id, "is_active": False})
