from __future__ import annotations

from ...core.enums import ApprovalStatus, ReviewPriority
from ...validation.validator import ValidationResult
from .base import AdmissionDecision, AdmissionStrategy


class ReviewStrategy(AdmissionStrategy):
    """Record every attempt; anything short of auto-approval goes to the review queue."""

    def decide(self, result: ValidationResult) -> AdmissionDecision:
        if result.requires_approval or not result.flags.location:
            return AdmissionDecision(
                approval_status=ApprovalStatus.PENDING,
                priority=result.priority or ReviewPriority.LOW,
            )
        return AdmissionDecision(approval_status=ApprovalStatus.APPROVED)
