from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.exceptions import ValidationError
from .distance import validate_coordinates


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in degrees, range-checked on construction."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        lat, lon = validate_coordinates(self.latitude, self.longitude)
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class LocationFix:
    """One reading from the location provider."""

    point: GeoPoint
    accuracy: Optional[float] = None
    timestamp: Optional[datetime] = None

    @property
    def latitude(self) -> float:
        return self.point.latitude

    @property
    def longitude(self) -> float:
        return self.point.longitude


@dataclass(frozen=True)
class OfficeLocation:
    latitude: float
    longitude: float
    radius_meters: float
    is_active: bool = True
    name: Optional[str] = None

    def __post_init__(self) -> None:
        lat, lon = validate_coordinates(self.latitude, self.longitude)
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)
        if self.radius_meters is None or float(self.radius_meters) <= 0:
            raise ValidationError(f"office radius must be > 0, got {self.radius_meters!r}")
        object.__setattr__(self, "radius_meters", float(self.radius_meters))

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)
