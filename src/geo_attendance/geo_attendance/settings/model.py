from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Mapping, Optional

from ..common.datetime_utils import format_hhmm, parse_hhmm
from ..core import constants
from ..core.enums import GeofenceMode
from ..core.exceptions import ValidationError
from ..geo.model import OfficeLocation

SETTING_KEYS = (
    "office_latitude",
    "office_longitude",
    "office_radius_meters",
    "work_start_time",
    "work_end_time",
    "auto_approve_threshold",
    "max_devices_per_user",
    "geofence_mode",
)


@dataclass(frozen=True)
class CompanySettings:
    """Explicit configuration context for the validation engine.

    Built from the ``company_settings`` key/value table; missing keys fall
    back to the defaults in ``core.constants``.
    """

    office: Optional[OfficeLocation]
    work_start: time
    work_end: time
    auto_approve_threshold: int = constants.DEFAULT_AUTO_APPROVE_THRESHOLD
    max_devices_per_user: int = constants.DEFAULT_MAX_DEVICES_PER_USER
    geofence_mode: GeofenceMode = GeofenceMode.REVIEW

    @classmethod
    def from_mapping(cls, values: Mapping[str, str], *, default_mode: GeofenceMode = GeofenceMode.REVIEW) -> "CompanySettings":
        def get(key: str) -> str:
            return str(values.get(key) or "").strip()

        office = None
        if get("office_latitude") and get("office_longitude"):
            office = OfficeLocation(
                latitude=get("office_latitude"),
                longitude=get("office_longitude"),
                radius_meters=_to_float(get("office_radius_meters") or constants.DEFAULT_OFFICE_RADIUS_METERS, "office_radius_meters"),
            )

        mode = default_mode
        if get("geofence_mode"):
            try:
                mode = GeofenceMode(get("geofence_mode").lower())
            except ValueError:
                raise ValidationError(f"unknown geofence_mode: {get('geofence_mode')!r}")

        threshold = _to_int(get("auto_approve_threshold") or constants.DEFAULT_AUTO_APPROVE_THRESHOLD, "auto_approve_threshold")
        if not 0 <= threshold <= 100:
            raise ValidationError("auto_approve_threshold must be within 0..100")

        max_devices = _to_int(get("max_devices_per_user") or constants.DEFAULT_MAX_DEVICES_PER_USER, "max_devices_per_user")
        if max_devices <= 0:
            raise ValidationError("max_devices_per_user must be > 0")

        return cls(
            office=office,
            work_start=parse_hhmm(get("work_start_time") or constants.DEFAULT_WORK_START, "work_start_time"),
            work_end=parse_hhmm(get("work_end_time") or constants.DEFAULT_WORK_END, "work_end_time"),
            auto_approve_threshold=threshold,
            max_devices_per_user=max_devices,
            geofence_mode=mode,
        )

    def to_mapping(self) -> dict[str, str]:
        out = {
            "work_start_time": format_hhmm(self.work_start),
            "work_end_time": format_hhmm(self.work_end),
            "auto_approve_threshold": str(self.auto_approve_threshold),
            "max_devices_per_user": str(self.max_devices_per_user),
            "geofence_mode": self.geofence_mode.value,
        }
        if self.office:
            out["office_latitude"] = str(self.office.latitude)
            out["office_longitude"] = str(self.office.longitude)
            out["office_radius_meters"] = str(self.office.radius_meters)
        return out


def _to_float(value, field_name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def _to_int(value, field_name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
