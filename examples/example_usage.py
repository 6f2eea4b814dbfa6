"""Example: run the validation engine directly (no Flask, no database).

Controllers are thin; the business rules live in the validator and services.
"""

from datetime import datetime, time

from src.geo_attendance.geo_attendance.geo.model import GeoPoint, OfficeLocation
from src.geo_attendance.geo_attendance.validation.validator import (
    AttendanceAttempt,
    AttendanceValidator,
    ValidationContext,
)


def main():
    context = ValidationContext(
        office=OfficeLocation(latitude=10.7769, longitude=106.7009, radius_meters=100),
        work_start=time(9, 0),
        work_end=time(17, 0),
        approved_ssids=frozenset({"Office-5G"}),
        registered_devices=frozenset({"fp-laptop-01"}),
    )
    attempt = AttendanceAttempt(
        moment=datetime(2026, 3, 2, 8, 55),
        location=GeoPoint(10.7770, 106.7010),
        wifi_ssid="Office-5G",
        device_fingerprint="fp-laptop-01",
    )
    result = AttendanceValidator().validate(attempt, context)
    print(result.to_dict())


if __name__ == "__main__":
    main()
