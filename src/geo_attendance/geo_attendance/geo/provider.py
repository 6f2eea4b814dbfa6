"""Parsing of location-provider payloads.

The browser (or any other provider) posts either a fix
``{"latitude", "longitude", "accuracy", "timestamp"}`` or an error code when
it could not produce one.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from ..core.enums import LocationErrorReason
from ..core.exceptions import LocationUnavailable, ValidationError
from .model import GeoPoint, LocationFix


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        # Geolocation API timestamps are epoch milliseconds.
        return datetime.fromtimestamp(float(value) / 1000.0)
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"invalid location timestamp: {value!r}")


def parse_location_error(code: Any) -> LocationUnavailable:
    try:
        reason = LocationErrorReason(str(code).strip().upper())
    except ValueError:
        reason = LocationErrorReason.POSITION_UNAVAILABLE
    return LocationUnavailable(reason)


def parse_location_payload(payload: Optional[Mapping[str, Any]], *, error_code: Any = None) -> LocationFix:
    """Build a LocationFix or raise LocationUnavailable / InvalidCoordinate."""
    if error_code:
        raise parse_location_error(error_code)
    if not payload:
        raise LocationUnavailable(LocationErrorReason.POSITION_UNAVAILABLE)

    lat = payload.get("latitude")
    lon = payload.get("longitude")
    if lat is None or lon is None:
        raise LocationUnavailable(LocationErrorReason.POSITION_UNAVAILABLE)

    accuracy = payload.get("accuracy")
    return LocationFix(
        point=GeoPoint(lat, lon),
        accuracy=float(accuracy) if accuracy is not None else None,
        timestamp=_parse_timestamp(payload.get("timestamp")),
    )
