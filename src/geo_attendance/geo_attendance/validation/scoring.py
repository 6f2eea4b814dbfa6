from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Optional

from ..core import constants
from ..core.enums import ReviewPriority
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ValidationFlags:
    """One outcome per rule."""

    location: bool
    wifi: bool
    device: bool
    work_hours: bool

    def as_dict(self) -> dict:
        return {f.name: bool(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "ValidationFlags":
        return cls(**{f.name: bool(data.get(f.name, False)) for f in fields(cls)})


@dataclass(frozen=True)
class ValidationWeights:
    location: int = constants.LOCATION_WEIGHT
    wifi: int = constants.WIFI_WEIGHT
    device: int = constants.DEVICE_WEIGHT
    work_hours: int = constants.WORK_HOURS_WEIGHT

    def __post_init__(self) -> None:
        for f in fields(self):
            if int(getattr(self, f.name)) < 0:
                raise ValidationError(f"weight {f.name} must be >= 0")
        if self.total <= 0:
            raise ValidationError("at least one weight must be positive")

    @property
    def total(self) -> int:
        return sum(int(getattr(self, f.name)) for f in fields(self))


@dataclass(frozen=True)
class ScoringPolicy:
    """Auto-approval cut and manual-review priority bands.

    The bands are policy, not contract; a deployment may move them.
    """

    threshold: int = constants.DEFAULT_AUTO_APPROVE_THRESHOLD
    high_priority_below: int = constants.HIGH_PRIORITY_BELOW
    medium_priority_below: int = constants.MEDIUM_PRIORITY_BELOW

    def __post_init__(self) -> None:
        if not 0 <= int(self.threshold) <= 100:
            raise ValidationError("threshold must be within 0..100")
        if not self.high_priority_below <= self.medium_priority_below <= self.threshold:
            raise ValidationError("priority bands must satisfy high <= medium <= threshold")

    def is_auto_approved(self, score: int) -> bool:
        return score >= self.threshold

    def priority_for(self, score: int) -> Optional[ReviewPriority]:
        if self.is_auto_approved(score):
            return None
        if score < self.high_priority_below:
            return ReviewPriority.HIGH
        if score < self.medium_priority_below:
            return ReviewPriority.MEDIUM
        return ReviewPriority.LOW


def calculate_score(flags: ValidationFlags, weights: ValidationWeights | None = None) -> int:
    """Weighted sum of passed rules normalized to 0..100, rounded half up."""
    weights = weights or ValidationWeights()
    passed = sum(int(getattr(weights, f.name)) for f in fields(flags) if getattr(flags, f.name))
    total = weights.total
    return (200 * passed + total) // (2 * total)
