from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_QUEUE_LIMIT
from ..core.enums import ApprovalStatus, ReviewPriority, Role, SubmissionType
from ..core.exceptions import AuthorizationError, PersistenceFailure, ValidationError
from ..validation.validator import ValidationResult
from .model import ReviewItem
from .repository import ReviewQueueRepository

logger = logging.getLogger(__name__)


class ApprovalQueueService:
    """Manual review queue for attendance submissions below the auto-approve cut."""

    def __init__(self, reviews: ReviewQueueRepository, attendance: AttendanceRepository):
        self._reviews = reviews
        self._attendance = attendance

    def enqueue(
        self,
        *,
        record: AttendanceRecord,
        result: ValidationResult,
        submission_type: SubmissionType,
        priority: ReviewPriority,
    ) -> int:
        review_id = self._reviews.create(
            attendance_id=record.attendance_id,
            user_id=record.user_id,
            submission_type=submission_type,
            flags=result.flags,
            score=result.score,
            priority=priority,
        )
        logger.warning(
            "attendance %s queued for review: review_id=%s type=%s score=%s priority=%s",
            record.attendance_id,
            review_id,
            submission_type.value,
            result.score,
            priority.name,
        )
        return review_id

    def list_pending(
        self,
        *,
        current_role: Role,
        priority: Optional[ReviewPriority] = None,
        limit: int = DEFAULT_QUEUE_LIMIT,
    ) -> Sequence[ReviewItem]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")
        return self._reviews.list_items(status=ApprovalStatus.PENDING, priority=priority, limit=limit)

    def list_for_user(self, *, user_id: int, limit: int = 50) -> Sequence[ReviewItem]:
        return self._reviews.list_items(user_id=int(user_id), limit=limit)

    def _get_pending(self, review_id: int) -> ReviewItem:
        item = self._reviews.get(int(review_id))
        if not item:
            raise ValidationError("review item not found")
        if item.status != ApprovalStatus.PENDING:
            raise ValidationError("review item already decided")
        return item

    def approve(self, *, current_role: Role, admin_user_id: int, review_id: int, now: datetime | None = None) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")

        item = self._get_pending(review_id)
        if not self._reviews.decide(
            review_id=item.review_id,
            status=ApprovalStatus.APPROVED,
            decided_by=int(admin_user_id),
            decided_at=now or now_local(),
        ):
            raise ValidationError("review item already decided")

        # The day stays pending while another submission for it awaits review.
        siblings = self._reviews.list_for_attendance(item.attendance_id)
        outstanding = [s for s in siblings if s.review_id != item.review_id and s.status != ApprovalStatus.APPROVED]
        if any(s.status == ApprovalStatus.REJECTED for s in outstanding):
            day_status = ApprovalStatus.REJECTED
        elif outstanding:
            day_status = ApprovalStatus.PENDING
        else:
            day_status = ApprovalStatus.APPROVED

        self._set_day_status(item.attendance_id, day_status)
        logger.info("review %s approved by %s", item.review_id, admin_user_id)

    def reject(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        review_id: int,
        reason: str,
        now: datetime | None = None,
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")

        reason = require_non_empty(reason, "reason")
        item = self._get_pending(review_id)
        if not self._reviews.decide(
            review_id=item.review_id,
            status=ApprovalStatus.REJECTED,
            decided_by=int(admin_user_id),
            decided_at=now or now_local(),
            reason=reason,
        ):
            raise ValidationError("review item already decided")

        self._set_day_status(item.attendance_id, ApprovalStatus.REJECTED)
        logger.info("review %s rejected by %s", item.review_id, admin_user_id)

    def _set_day_status(self, attendance_id: int, status: ApprovalStatus) -> None:
        if not self._attendance.set_approval_status(attendance_id=attendance_id, approval_status=status):
            raise PersistenceFailure(f"attendance {attendance_id} approval update failed")
