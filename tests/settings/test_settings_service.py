from __future__ import annotations

from datetime import time

import pytest

from src.geo_attendance.geo_attendance.core.enums import GeofenceMode, Role
from src.geo_attendance.geo_attendance.core.exceptions import AuthorizationError, InvalidCoordinate, ValidationError
from src.geo_attendance.geo_attendance.settings.model import CompanySettings

from ..fakes import OFFICE_SSID


def test_defaults_when_nothing_is_stored():
    settings = CompanySettings.from_mapping({})

    assert settings.office is None
    assert settings.work_start == time(9, 0)
    assert settings.work_end == time(17, 0)
    assert settings.auto_approve_threshold == 80
    assert settings.max_devices_per_user == 2
    assert settings.geofence_mode == GeofenceMode.REVIEW


def test_default_radius_is_100_meters():
    settings = CompanySettings.from_mapping({"office_latitude": "10", "office_longitude": "20"})
    assert settings.office.radius_meters == 100.0


def test_stored_settings_are_parsed(container):
    settings = container.settings_service.get()

    assert (settings.office.latitude, settings.office.longitude) == (0.0, 0.0)
    assert settings.office.radius_meters == 100.0
    assert container.settings_service.approved_ssids() == frozenset({OFFICE_SSID})


def test_update_validates_and_persists(container):
    updated = container.settings_service.update(
        current_role=Role.ADMIN,
        values={"office_radius_meters": 250, "work_start_time": "08:30", "geofence_mode": "strict"},
    )

    assert updated.office.radius_meters == 250.0
    assert updated.work_start == time(8, 30)
    assert container.settings_service.get().geofence_mode == GeofenceMode.STRICT


@pytest.mark.parametrize(
    "values, error",
    [
        ({"office_latitude": "95"}, InvalidCoordinate),
        ({"office_radius_meters": "0"}, ValidationError),
        ({"office_radius_meters": "-5"}, ValidationError),
        ({"work_end_time": "25:00"}, ValidationError),
        ({"work_start_time": "9am"}, ValidationError),
        ({"auto_approve_threshold": "150"}, ValidationError),
        ({"geofence_mode": "lenient"}, ValidationError),
        ({"office_colour": "blue"}, ValidationError),
    ],
)
def test_update_rejects_bad_values(container, values, error):
    with pytest.raises(error):
        container.settings_service.update(current_role=Role.ADMIN, values=values)

    assert container.settings_service.get().office.radius_meters == 100.0


def test_update_requires_admin(container):
    with pytest.raises(AuthorizationError):
        container.settings_service.update(current_role=Role.EMPLOYEE, values={"work_start_time": "08:00"})


def test_wifi_management(container):
    container.settings_service.add_wifi(current_role=Role.ADMIN, ssid=" Branch-2 ")
    assert "Branch-2" in container.settings_service.approved_ssids()

    container.settings_service.remove_wifi(current_role=Role.ADMIN, ssid=OFFICE_SSID)
    assert OFFICE_SSID not in container.settings_service.approved_ssids()

    with pytest.raises(ValidationError):
        container.settings_service.remove_wifi(current_role=Role.ADMIN, ssid="nope")
