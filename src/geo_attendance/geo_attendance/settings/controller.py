from __future__ import annotations

from flask import Flask

from ..common.http import admin_required, current_role, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/settings", methods=["GET"], endpoint="api_admin_settings")
    @admin_required
    def get_settings():
        return ok(container.settings_service.get().to_mapping())

    @app.route("/api/admin/settings", methods=["PUT"], endpoint="api_admin_settings_update")
    @admin_required
    def update_settings():
        updated = container.settings_service.update(current_role=current_role(), values=json_body())
        return ok(updated.to_mapping())

    @app.route("/api/admin/wifi", methods=["GET"], endpoint="api_admin_wifi")
    @admin_required
    def list_wifi():
        return ok(sorted(container.settings_service.approved_ssids()))

    @app.route("/api/admin/wifi", methods=["POST"], endpoint="api_admin_wifi_add")
    @admin_required
    def add_wifi():
        data = json_body()
        wifi_id = container.settings_service.add_wifi(
            current_role=current_role(),
            ssid=str(data.get("ssid") or ""),
            bssid=data.get("bssid"),
        )
        return ok({"wifi_id": wifi_id}, 201)

    @app.route("/api/admin/wifi/<path:ssid>", methods=["DELETE"], endpoint="api_admin_wifi_remove")
    @admin_required
    def remove_wifi(ssid: str):
        container.settings_service.remove_wifi(current_role=current_role(), ssid=ssid)
        return ok({"ssid": ssid})
