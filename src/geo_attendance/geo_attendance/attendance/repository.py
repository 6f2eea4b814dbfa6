from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalStatus, AttendanceStatus
from ..geo.model import GeoPoint
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_recent_for_user(self, user_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        location: Optional[GeoPoint],
        photo: Optional[str],
        approval_status: ApprovalStatus,
        validation_score: Optional[int] = None,
    ) -> int:
        """Insert the day's record; raises AlreadyCheckedIn on a duplicate (user, day)."""

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        location: Optional[GeoPoint],
        photo: Optional[str],
        total_minutes: int,
        approval_status: ApprovalStatus,
        validation_score: Optional[int] = None,
    ) -> bool:
        raise NotImplementedError

    def set_approval_status(self, *, attendance_id: int, approval_status: ApprovalStatus) -> bool:
        raise NotImplementedError

    def sum_completed_minutes(self, *, user_id: int, start_date: date, end_date: date) -> int:
        """Total minutes of completed, non-rejected days in the range (inclusive)."""

        raise NotImplementedError

    def list_for_date(self, work_date: date, *, status: Optional[AttendanceStatus] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def delete(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def reset_checkout(
        self,
        *,
        attendance_id: int,
        approval_status: ApprovalStatus,
        validation_score: Optional[int] = None,
    ) -> bool:
        """Undo a check-out, restoring the check-in approval and score."""

        raise NotImplementedError
