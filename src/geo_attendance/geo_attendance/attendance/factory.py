from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import GeofenceMode
from .strategies.base import AdmissionStrategy
from .strategies.review_strategy import ReviewStrategy
from .strategies.strict_strategy import StrictGeofenceStrategy


@dataclass
class AdmissionStrategyFactory:
    """Factory Pattern: choose the admission strategy for the configured geofence mode."""

    def for_mode(self, mode: GeofenceMode) -> AdmissionStrategy:
        if mode == GeofenceMode.STRICT:
            return StrictGeofenceStrategy()
        return ReviewStrategy()
