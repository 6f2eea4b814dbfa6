from __future__ import annotations

from datetime import datetime

import pytest

from src.geo_attendance.geo_attendance.container import build_services
from src.geo_attendance.geo_attendance.core.enums import Role

from .fakes import (
    ADMIN_ID,
    DEVICE_FP,
    EMPLOYEE_ID,
    OFFICE_SETTINGS,
    OFFICE_SSID,
    InMemoryAttendance,
    InMemoryBonuses,
    InMemoryDevices,
    InMemoryEmployees,
    InMemoryReviews,
    InMemorySettings,
    InMemorySlips,
    MemoryPhotoStore,
    make_employee,
)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0)


@pytest.fixture
def container():
    employees = InMemoryEmployees(
        make_employee(EMPLOYEE_ID, base_salary="1000.00", rate_per_minute="0.50"),
        make_employee(2),
        make_employee(ADMIN_ID, role=Role.ADMIN),
    )
    devices = InMemoryDevices()
    devices.add(user_id=EMPLOYEE_ID, fingerprint=DEVICE_FP)

    return build_services(
        employees_repo=employees,
        attendance_repo=InMemoryAttendance(),
        reviews_repo=InMemoryReviews(),
        devices_repo=devices,
        settings_repo=InMemorySettings(OFFICE_SETTINGS, ssids=(OFFICE_SSID,)),
        bonuses_repo=InMemoryBonuses(),
        slips_repo=InMemorySlips(),
        photos=MemoryPhotoStore(),
    )
