from __future__ import annotations

import math
from typing import TYPE_CHECKING

from ..core.constants import EARTH_RADIUS_METERS
from ..core.exceptions import InvalidCoordinate

if TYPE_CHECKING:
    from .model import GeoPoint


def validate_coordinates(latitude, longitude) -> tuple[float, float]:
    """Coerce a lat/long pair to floats, raising InvalidCoordinate when out of range."""
    try:
        lat = float(latitude)
        lon = float(longitude)
    except (TypeError, ValueError):
        raise InvalidCoordinate(f"coordinates must be numeric, got ({latitude!r}, {longitude!r})")

    if math.isnan(lat) or not -90.0 <= lat <= 90.0:
        raise InvalidCoordinate(f"latitude out of range: {latitude!r}")
    if math.isnan(lon) or not -180.0 <= lon <= 180.0:
        raise InvalidCoordinate(f"longitude out of range: {longitude!r}")
    return lat, lon


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two points given in degrees."""
    lat1, lon1 = validate_coordinates(lat1, lon1)
    lat2, lon2 = validate_coordinates(lat2, lon2)

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def distance_meters(a: "GeoPoint", b: "GeoPoint") -> float:
    return haversine_meters(a.latitude, a.longitude, b.latitude, b.longitude)
