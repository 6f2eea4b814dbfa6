import pytest

from src.geo_attendance.geo_attendance.attendance.factory import AdmissionStrategyFactory
from src.geo_attendance.geo_attendance.attendance.strategies.review_strategy import ReviewStrategy
from src.geo_attendance.geo_attendance.attendance.strategies.strict_strategy import StrictGeofenceStrategy
from src.geo_attendance.geo_attendance.core.enums import ApprovalStatus, GeofenceMode, ReviewPriority
from src.geo_attendance.geo_attendance.core.exceptions import OutsideGeofence
from src.geo_attendance.geo_attendance.validation.scoring import ValidationFlags
from src.geo_attendance.geo_attendance.validation.validator import ValidationResult


def _result(*, location: bool, score: int, priority=None, requires_approval=None) -> ValidationResult:
    return ValidationResult(
        flags=ValidationFlags(location=location, wifi=True, device=True, work_hours=True),
        score=score,
        requires_approval=score < 80 if requires_approval is None else requires_approval,
        priority=priority,
        distance_meters=15.0 if location else 1200.0,
        radius_meters=100.0,
    )


def test_factory_picks_strategy_for_mode():
    factory = AdmissionStrategyFactory()

    assert isinstance(factory.for_mode(GeofenceMode.STRICT), StrictGeofenceStrategy)
    assert isinstance(factory.for_mode(GeofenceMode.REVIEW), ReviewStrategy)
    assert not isinstance(factory.for_mode(GeofenceMode.REVIEW), StrictGeofenceStrategy)


def test_review_strategy_approves_high_score():
    decision = ReviewStrategy().decide(_result(location=True, score=100))

    assert decision.approval_status == ApprovalStatus.APPROVED
    assert not decision.needs_review


def test_review_strategy_queues_low_score_with_its_priority():
    decision = ReviewStrategy().decide(_result(location=True, score=40, priority=ReviewPriority.HIGH))

    assert decision.approval_status == ApprovalStatus.PENDING
    assert decision.priority == ReviewPriority.HIGH


def test_review_strategy_queues_outside_geofence_even_when_score_passes():
    # Custom weights can push an off-site attempt above the cut.
    decision = ReviewStrategy().decide(_result(location=False, score=85, requires_approval=False))

    assert decision.needs_review
    assert decision.priority == ReviewPriority.LOW


def test_strict_strategy_raises_outside_geofence():
    with pytest.raises(OutsideGeofence) as exc:
        StrictGeofenceStrategy().decide(_result(location=False, score=60, priority=ReviewPriority.MEDIUM))

    assert exc.value.distance_meters == 1200.0
    assert exc.value.radius_meters == 100.0


def test_strict_strategy_still_queues_low_score_inside_geofence():
    decision = StrictGeofenceStrategy().decide(_result(location=True, score=50, priority=ReviewPriority.MEDIUM))

    assert decision.approval_status == ApprovalStatus.PENDING
    assert decision.priority == ReviewPriority.MEDIUM
