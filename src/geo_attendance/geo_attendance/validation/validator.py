from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import FrozenSet, Optional

from ..core.enums import ReviewPriority
from ..geo.distance import distance_meters
from ..geo.model import GeoPoint, OfficeLocation
from . import rules
from .scoring import ScoringPolicy, ValidationFlags, ValidationWeights, calculate_score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationContext:
    """Facts about the company the attempt is judged against.

    Built by the service layer from repositories; the validator never reads
    ambient state.
    """

    office: Optional[OfficeLocation]
    work_start: Optional[time]
    work_end: Optional[time]
    approved_ssids: FrozenSet[str] = field(default_factory=frozenset)
    registered_devices: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class AttendanceAttempt:
    moment: datetime
    location: Optional[GeoPoint] = None
    wifi_ssid: Optional[str] = None
    device_fingerprint: Optional[str] = None


@dataclass(frozen=True)
class ValidationResult:
    flags: ValidationFlags
    score: int
    requires_approval: bool
    priority: Optional[ReviewPriority]
    distance_meters: Optional[float] = None
    radius_meters: Optional[float] = None
    errors: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "flags": self.flags.as_dict(),
            "score": self.score,
            "requires_approval": self.requires_approval,
            "priority": self.priority.value if self.priority else None,
            "distance_meters": round(self.distance_meters, 1) if self.distance_meters is not None else None,
            "radius_meters": self.radius_meters,
            "errors": list(self.errors),
        }


class AttendanceValidator:
    def __init__(self, weights: ValidationWeights | None = None, policy: ScoringPolicy | None = None):
        self._weights = weights or ValidationWeights()
        self._policy = policy or ScoringPolicy()

    @property
    def policy(self) -> ScoringPolicy:
        return self._policy

    def with_threshold(self, threshold: int) -> "AttendanceValidator":
        if threshold == self._policy.threshold:
            return self
        policy = ScoringPolicy(
            threshold=threshold,
            high_priority_below=min(self._policy.high_priority_below, threshold),
            medium_priority_below=min(self._policy.medium_priority_below, threshold),
        )
        return AttendanceValidator(self._weights, policy)

    def validate(self, attempt: AttendanceAttempt, context: ValidationContext) -> ValidationResult:
        errors: list[str] = []

        office = context.office if context.office and context.office.is_active else None
        if office is None:
            errors.append("OFFICE_NOT_CONFIGURED")
        if attempt.location is None:
            errors.append("LOCATION_MISSING")
        if not attempt.wifi_ssid:
            errors.append("WIFI_MISSING")
        if not attempt.device_fingerprint:
            errors.append("DEVICE_MISSING")

        distance = None
        if office is not None and attempt.location is not None:
            distance = distance_meters(attempt.location, office.point)

        flags = ValidationFlags(
            location=rules.within_radius(
                attempt.location,
                office.point if office else None,
                office.radius_meters if office else None,
            ),
            wifi=rules.wifi_approved(attempt.wifi_ssid, context.approved_ssids),
            device=rules.device_registered(attempt.device_fingerprint, context.registered_devices),
            work_hours=rules.within_work_hours(attempt.moment, context.work_start, context.work_end),
        )

        score = calculate_score(flags, self._weights)
        result = ValidationResult(
            flags=flags,
            score=score,
            requires_approval=not self._policy.is_auto_approved(score),
            priority=self._policy.priority_for(score),
            distance_meters=distance,
            radius_meters=office.radius_meters if office else None,
            errors=tuple(errors),
        )
        logger.debug("validation score=%s flags=%s errors=%s", score, flags.as_dict(), errors)
        return result
