from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ApprovalStatus, ReviewPriority, SubmissionType
from ..validation.scoring import ValidationFlags


@dataclass(frozen=True)
class ReviewItem:
    """An attendance submission waiting for (or past) manual review."""

    review_id: int
    attendance_id: int
    user_id: int
    submission_type: SubmissionType
    flags: ValidationFlags
    score: int
    priority: ReviewPriority
    status: ApprovalStatus
    created_at: datetime
    reason: Optional[str] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "review_id": self.review_id,
            "attendance_id": self.attendance_id,
            "user_id": self.user_id,
            "submission_type": self.submission_type.value,
            "flags": self.flags.as_dict(),
            "score": self.score,
            "priority": self.priority.value,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "reason": self.reason,
            "decided_by": self.decided_by,
            "decided_at": self.decided_at.isoformat() if self.decided_at else None,
        }
