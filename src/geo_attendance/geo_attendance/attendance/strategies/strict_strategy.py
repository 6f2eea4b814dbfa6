from __future__ import annotations

from ...core.exceptions import OutsideGeofence
from ...validation.validator import ValidationResult
from .base import AdmissionDecision
from .review_strategy import ReviewStrategy


class StrictGeofenceStrategy(ReviewStrategy):
    """Hard-fail attempts outside the office radius; otherwise behave like ReviewStrategy."""

    def decide(self, result: ValidationResult) -> AdmissionDecision:
        if not result.flags.location:
            raise OutsideGeofence(result.distance_meters, result.radius_meters)
        return super().decide(result)
