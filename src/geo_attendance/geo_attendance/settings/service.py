from __future__ import annotations

import logging
from typing import Mapping

from ..common.validators import require_non_empty
from ..core.enums import GeofenceMode, Role
from ..core.exceptions import AuthorizationError, PersistenceFailure, ValidationError
from .model import SETTING_KEYS, CompanySettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, settings: SettingsRepository, *, default_mode: GeofenceMode = GeofenceMode.REVIEW):
        self._settings = settings
        self._default_mode = default_mode

    def get(self) -> CompanySettings:
        return CompanySettings.from_mapping(self._settings.get_all(), default_mode=self._default_mode)

    def approved_ssids(self) -> frozenset[str]:
        return frozenset(s.strip() for s in self._settings.list_approved_ssids() if s and s.strip())

    def update(self, *, current_role: Role, values: Mapping[str, object]) -> CompanySettings:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")

        unknown = set(values) - set(SETTING_KEYS)
        if unknown:
            raise ValidationError(f"unknown setting(s): {', '.join(sorted(unknown))}")

        merged = dict(self._settings.get_all())
        merged.update({k: "" if v is None else str(v).strip() for k, v in values.items()})
        # Parsing the merged view rejects bad coordinates, radius <= 0 and bad HH:MM.
        parsed = CompanySettings.from_mapping(merged, default_mode=self._default_mode)

        if not self._settings.upsert_many({k: merged[k] for k in values}):
            raise PersistenceFailure("could not save company settings")
        logger.info("company settings updated: %s", sorted(values))
        return parsed

    def add_wifi(self, *, current_role: Role, ssid: str, bssid: str | None = None) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")
        ssid = require_non_empty(ssid, "ssid")
        return self._settings.add_approved_ssid(ssid=ssid, bssid=(bssid or "").strip() or None)

    def remove_wifi(self, *, current_role: Role, ssid: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")
        if not self._settings.deactivate_ssid(ssid=require_non_empty(ssid, "ssid")):
            raise ValidationError("ssid not found")
