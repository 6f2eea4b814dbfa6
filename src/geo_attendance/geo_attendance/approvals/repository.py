from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalStatus, ReviewPriority, SubmissionType
from ..validation.scoring import ValidationFlags
from .model import ReviewItem


class ReviewQueueRepository(Protocol):
    def create(
        self,
        *,
        attendance_id: int,
        user_id: int,
        submission_type: SubmissionType,
        flags: ValidationFlags,
        score: int,
        priority: ReviewPriority,
    ) -> int:
        raise NotImplementedError

    def get(self, review_id: int) -> Optional[ReviewItem]:
        raise NotImplementedError

    def list_items(
        self,
        *,
        status: Optional[ApprovalStatus] = None,
        priority: Optional[ReviewPriority] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[ReviewItem]:
        """Highest priority first, then oldest first."""

        raise NotImplementedError

    def list_for_attendance(self, attendance_id: int) -> Sequence[ReviewItem]:
        raise NotImplementedError

    def decide(
        self,
        *,
        review_id: int,
        status: ApprovalStatus,
        decided_by: int,
        decided_at: datetime,
        reason: Optional[str] = None,
    ) -> bool:
        """Only pending items can be decided; returns False otherwise."""

        raise NotImplementedError
