from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import ApprovalStatus, AttendanceStatus, LifecycleState
from ..geo.model import GeoPoint


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per employee per calendar day."""

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_in_location: Optional[GeoPoint] = None
    check_in_photo: Optional[str] = None
    check_out_time: Optional[datetime] = None
    check_out_location: Optional[GeoPoint] = None
    check_out_photo: Optional[str] = None
    total_minutes: int = 0
    status: AttendanceStatus = AttendanceStatus.NOT_STARTED
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    validation_score: Optional[int] = None

    @property
    def state(self) -> LifecycleState:
        return lifecycle_state(self)

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "user_id": self.user_id,
            "work_date": self.work_date.isoformat(),
            "check_in_time": self.check_in_time.isoformat() if self.check_in_time else None,
            "check_in_location": self.check_in_location.to_dict() if self.check_in_location else None,
            "check_in_photo": self.check_in_photo,
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else None,
            "check_out_location": self.check_out_location.to_dict() if self.check_out_location else None,
            "check_out_photo": self.check_out_photo,
            "total_minutes": self.total_minutes,
            "status": self.status.value,
            "approval_status": self.approval_status.value,
            "validation_score": self.validation_score,
            "state": self.state.value,
        }


def lifecycle_state(record: Optional[AttendanceRecord]) -> LifecycleState:
    if record is None or record.check_in_time is None:
        return LifecycleState.NOT_CHECKED_IN
    if record.check_out_time is not None or record.status == AttendanceStatus.COMPLETED:
        return LifecycleState.COMPLETED
    return LifecycleState.CHECKED_IN


def merge_approval(current: ApprovalStatus, incoming: ApprovalStatus) -> ApprovalStatus:
    """A day is only approved when every submission for it is."""
    if ApprovalStatus.REJECTED in (current, incoming):
        return ApprovalStatus.REJECTED
    if ApprovalStatus.PENDING in (current, incoming):
        return ApprovalStatus.PENDING
    return ApprovalStatus.APPROVED
