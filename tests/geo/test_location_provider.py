from datetime import datetime

import pytest

from src.geo_attendance.geo_attendance.core.enums import LocationErrorReason
from src.geo_attendance.geo_attendance.core.exceptions import InvalidCoordinate, LocationUnavailable
from src.geo_attendance.geo_attendance.geo.provider import parse_location_payload


def test_parses_fix_with_iso_timestamp():
    fix = parse_location_payload(
        {"latitude": 10.1, "longitude": 106.2, "accuracy": 12, "timestamp": "2026-03-02T09:00:00"}
    )

    assert (fix.latitude, fix.longitude) == (10.1, 106.2)
    assert fix.accuracy == 12.0
    assert fix.timestamp == datetime(2026, 3, 2, 9, 0, 0)


@pytest.mark.parametrize("code", ["PERMISSION_DENIED", "timeout", "POSITION_UNAVAILABLE"])
def test_error_code_becomes_location_unavailable(code):
    with pytest.raises(LocationUnavailable) as exc:
        parse_location_payload(None, error_code=code)

    assert exc.value.reason == LocationErrorReason(code.upper())


def test_unknown_error_code_maps_to_position_unavailable():
    with pytest.raises(LocationUnavailable) as exc:
        parse_location_payload({}, error_code="SOMETHING_ELSE")

    assert exc.value.reason == LocationErrorReason.POSITION_UNAVAILABLE


def test_missing_coordinates_is_unavailable():
    with pytest.raises(LocationUnavailable):
        parse_location_payload({"latitude": 10.0})


def test_out_of_range_coordinates_are_invalid():
    with pytest.raises(InvalidCoordinate):
        parse_location_payload({"latitude": 100.0, "longitude": 0.0})
