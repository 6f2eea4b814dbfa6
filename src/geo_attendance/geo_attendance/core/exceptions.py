from __future__ import annotations

from typing import Optional

from .enums import LocationErrorReason


class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is stable and machine-checkable; callers build user-facing text.
    """

    code = "DOMAIN_ERROR"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "FORBIDDEN"


class InvalidCoordinate(ValidationError):
    code = "INVALID_COORDINATE"


class LocationUnavailable(DomainError):
    code = "LOCATION_UNAVAILABLE"

    def __init__(self, reason: LocationErrorReason = LocationErrorReason.POSITION_UNAVAILABLE, message: Optional[str] = None):
        super().__init__(message or f"location unavailable: {reason.value}")
        self.reason = reason


class OutsideGeofence(DomainError):
    code = "OUTSIDE_GEOFENCE"

    def __init__(self, distance_meters: Optional[float], radius_meters: Optional[float]):
        if distance_meters is None:
            message = "location could not be matched against an active office"
        else:
            message = f"{distance_meters:.0f} m from office (radius {radius_meters:.0f} m)"
        super().__init__(message)
        self.distance_meters = distance_meters
        self.radius_meters = radius_meters


class AlreadyCheckedIn(DomainError):
    code = "ALREADY_CHECKED_IN"


class NotCheckedIn(DomainError):
    code = "NOT_CHECKED_IN"


class PersistenceFailure(DomainError):
    """A repository call failed. Never retried by the services."""

    code = "PERSISTENCE_FAILURE"


class DeviceLimitReached(ValidationError):
    code = "DEVICE_LIMIT_REACHED"
