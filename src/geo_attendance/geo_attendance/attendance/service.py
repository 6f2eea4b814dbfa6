from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Sequence, Union

from ..approvals.service import ApprovalQueueService
from ..common.datetime_utils import minutes_between, now_local
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, LifecycleState, Role, SubmissionType
from ..core.exceptions import (
    AlreadyCheckedIn,
    AuthorizationError,
    DeviceLimitReached,
    DomainError,
    LocationUnavailable,
    NotCheckedIn,
    OutsideGeofence,
    PersistenceFailure,
    ValidationError,
)
from ..devices.service import DeviceService
from ..geo.model import GeoPoint, LocationFix
from ..settings.service import SettingsService
from ..storage.photo_store import PhotoStore
from ..users.repository import EmployeeRepository
from ..validation.validator import AttendanceAttempt, AttendanceValidator, ValidationContext, ValidationResult
from .factory import AdmissionStrategyFactory
from .model import AttendanceRecord, lifecycle_state, merge_approval
from .repository import AttendanceRepository
from .strategies.base import AdmissionDecision

logger = logging.getLogger(__name__)

Location = Union[GeoPoint, LocationFix, None]
Photo = Union[bytes, str, None]


@dataclass(frozen=True)
class AttendanceOutcome:
    record: AttendanceRecord
    submission_type: SubmissionType
    validation: ValidationResult
    review_id: Optional[int] = None

    @property
    def auto_approved(self) -> bool:
        return self.review_id is None

    def to_dict(self) -> dict:
        return {
            "record": self.record.to_dict(),
            "submission_type": self.submission_type.value,
            "validation": self.validation.to_dict(),
            "review_id": self.review_id,
            "auto_approved": self.auto_approved,
        }


@dataclass(frozen=True)
class DailyAttendanceRow:
    record: AttendanceRecord
    employee_code: str
    full_name: str

    def to_dict(self) -> dict:
        out = self.record.to_dict()
        out["employee_code"] = self.employee_code
        out["full_name"] = self.full_name
        return out


class AttendanceService:
    """Check-in / check-out lifecycle.

    Validation and scoring are delegated to AttendanceValidator, the
    strict/review decision to an AdmissionStrategy; persistence, photo storage
    and the review queue are collaborators. Nothing here retries.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        settings: SettingsService,
        devices: DeviceService,
        approvals: ApprovalQueueService,
        *,
        photos: PhotoStore | None = None,
        validator: AttendanceValidator | None = None,
        strategy_factory: AdmissionStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._settings = settings
        self._devices = devices
        self._approvals = approvals
        self._photos = photos
        self._validator = validator or AttendanceValidator()
        self._factory = strategy_factory or AdmissionStrategyFactory()

    def _require_employee(self, user_id: int) -> None:
        emp = self._employees.get_by_id(int(user_id))
        if not emp:
            raise ValidationError("employee not found")
        if not emp.is_active:
            raise ValidationError("employee is deactivated")

    @staticmethod
    def _point(location: Location) -> GeoPoint:
        if location is None:
            raise LocationUnavailable()
        if isinstance(location, LocationFix):
            return location.point
        return location

    @staticmethod
    def _require_photo(photo: Photo) -> None:
        if photo is None or (isinstance(photo, str) and not photo.strip()) or (isinstance(photo, bytes) and not photo):
            raise ValidationError("a selfie photo is required")

    def _store_photo(self, user_id: int, kind: SubmissionType, photo: Photo, now: datetime) -> str:
        if isinstance(photo, str):
            return photo.strip()
        if self._photos is None:
            raise PersistenceFailure("no photo store configured")
        return self._photos.save(user_id=int(user_id), kind=kind.value, payload=photo, taken_at=now)

    def _discard_photo(self, photo: Photo, photo_ref: str) -> None:
        # Only payloads written by this call are removed; references are left alone.
        if not isinstance(photo, bytes) or self._photos is None:
            return
        try:
            self._photos.delete(photo_ref)
        except PersistenceFailure:
            logger.warning("orphaned photo left in store: %s", photo_ref)

    def _register_unknown_device(self, user_id: int, fingerprint: str, max_devices: int, now: datetime) -> None:
        """Unknown fingerprints are registered inactive so they show up for admin approval."""
        try:
            self._devices.register(user_id=user_id, fingerprint=fingerprint, max_devices=max_devices, now=now)
        except DeviceLimitReached:
            logger.info("device not registered for user %s: limit of %s reached", user_id, max_devices)

    def _assess(
        self,
        *,
        user_id: int,
        point: GeoPoint,
        wifi_ssid: Optional[str],
        device_fingerprint: Optional[str],
        now: datetime,
        kind: SubmissionType,
    ) -> tuple[ValidationResult, AdmissionDecision]:
        settings = self._settings.get()
        registered = self._devices.active_fingerprints(user_id)
        if device_fingerprint and device_fingerprint not in registered:
            self._register_unknown_device(user_id, device_fingerprint, settings.max_devices_per_user, now)

        context = ValidationContext(
            office=settings.office,
            work_start=settings.work_start,
            work_end=settings.work_end,
            approved_ssids=self._settings.approved_ssids(),
            registered_devices=registered,
        )
        attempt = AttendanceAttempt(
            moment=now,
            location=point,
            wifi_ssid=wifi_ssid,
            device_fingerprint=device_fingerprint,
        )
        result = self._validator.with_threshold(settings.auto_approve_threshold).validate(attempt, context)

        try:
            decision = self._factory.for_mode(settings.geofence_mode).decide(result)
        except OutsideGeofence:
            logger.warning("%s refused for user %s: outside geofence (score=%s)", kind.value, user_id, result.score)
            raise
        return result, decision

    def check_in(
        self,
        user_id: int,
        *,
        location: Location,
        photo: Photo,
        wifi_ssid: Optional[str] = None,
        device_fingerprint: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceOutcome:
        now = now or now_local()
        today = now.date()

        self._require_employee(user_id)

        existing = self._attendance.get_for_user_and_date(int(user_id), today)
        if lifecycle_state(existing) != LifecycleState.NOT_CHECKED_IN:
            raise AlreadyCheckedIn(f"user {user_id} already checked in on {today}")

        point = self._point(location)
        self._require_photo(photo)
        result, decision = self._assess(
            user_id=int(user_id),
            point=point,
            wifi_ssid=wifi_ssid,
            device_fingerprint=device_fingerprint,
            now=now,
            kind=SubmissionType.CHECK_IN,
        )

        photo_ref = self._store_photo(user_id, SubmissionType.CHECK_IN, photo, now)
        try:
            attendance_id = self._attendance.create_checkin(
                user_id=int(user_id),
                work_date=today,
                check_in_time=now,
                location=point,
                photo=photo_ref,
                approval_status=decision.approval_status,
                validation_score=result.score,
            )
            record = self._attendance.get_by_id(attendance_id)
            if not record:
                raise PersistenceFailure(f"check-in for user {user_id} was not stored")
        except DomainError:
            self._discard_photo(photo, photo_ref)
            raise

        def undo() -> None:
            self._attendance.delete(attendance_id)
            self._discard_photo(photo, photo_ref)

        return self._finish(record, result, decision, SubmissionType.CHECK_IN, device_fingerprint, now, undo=undo)

    def check_out(
        self,
        user_id: int,
        *,
        location: Location,
        photo: Photo,
        wifi_ssid: Optional[str] = None,
        device_fingerprint: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceOutcome:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_user_and_date(int(user_id), today)
        state = lifecycle_state(record)
        if state == LifecycleState.NOT_CHECKED_IN:
            raise NotCheckedIn(f"user {user_id} has not checked in on {today}")
        if state == LifecycleState.COMPLETED:
            raise NotCheckedIn(f"user {user_id} already checked out on {today}")

        point = self._point(location)
        self._require_photo(photo)
        result, decision = self._assess(
            user_id=int(user_id),
            point=point,
            wifi_ssid=wifi_ssid,
            device_fingerprint=device_fingerprint,
            now=now,
            kind=SubmissionType.CHECK_OUT,
        )

        score = result.score
        if record.validation_score is not None:
            score = min(score, record.validation_score)

        photo_ref = self._store_photo(user_id, SubmissionType.CHECK_OUT, photo, now)
        try:
            stored = self._attendance.update_checkout(
                attendance_id=record.attendance_id,
                check_out_time=now,
                location=point,
                photo=photo_ref,
                total_minutes=minutes_between(record.check_in_time, now),
                approval_status=merge_approval(record.approval_status, decision.approval_status),
                validation_score=score,
            )
            if not stored:
                if lifecycle_state(self._attendance.get_by_id(record.attendance_id)) == LifecycleState.COMPLETED:
                    raise NotCheckedIn(f"user {user_id} already checked out on {today}")
                raise PersistenceFailure(f"check-out for attendance {record.attendance_id} was not stored")

            updated = self._attendance.get_by_id(record.attendance_id)
            if not updated:
                raise PersistenceFailure(f"attendance {record.attendance_id} disappeared after check-out")
        except DomainError:
            self._discard_photo(photo, photo_ref)
            raise

        def undo() -> None:
            self._attendance.reset_checkout(
                attendance_id=record.attendance_id,
                approval_status=record.approval_status,
                validation_score=record.validation_score,
            )
            self._discard_photo(photo, photo_ref)

        return self._finish(updated, result, decision, SubmissionType.CHECK_OUT, device_fingerprint, now, undo=undo)

    def _finish(
        self,
        record: AttendanceRecord,
        result: ValidationResult,
        decision: AdmissionDecision,
        kind: SubmissionType,
        device_fingerprint: Optional[str],
        now: datetime,
        *,
        undo: Callable[[], None],
    ) -> AttendanceOutcome:
        review_id = None
        if decision.needs_review:
            # A pending record without a queue entry could never be decided, so the write is undone.
            try:
                review_id = self._approvals.enqueue(
                    record=record,
                    result=result,
                    submission_type=kind,
                    priority=decision.priority,
                )
            except PersistenceFailure:
                logger.error("%s for attendance %s rolled back: review enqueue failed", kind.value, record.attendance_id)
                undo()
                raise
        else:
            self._devices.seen(user_id=record.user_id, fingerprint=device_fingerprint, now=now)

        logger.info(
            "%s accepted: user=%s attendance=%s score=%s approval=%s",
            kind.value,
            record.user_id,
            record.attendance_id,
            result.score,
            record.approval_status.value,
        )
        return AttendanceOutcome(record=record, submission_type=kind, validation=result, review_id=review_id)

    def get_today_record(self, user_id: int, today: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(int(user_id), today)

    def get_today_state(self, user_id: int, today: date) -> LifecycleState:
        return lifecycle_state(self.get_today_record(user_id, today))

    def get_history(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.get_recent_for_user(int(user_id), int(limit))

    def list_for_date(
        self,
        *,
        current_role: Role,
        work_date: date,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[DailyAttendanceRow]:
        """Admin view of one day's records joined with the employee's name and code."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")

        employees = {e.user_id: e for e in self._employees.list_all()}
        rows = []
        for record in self._attendance.list_for_date(work_date, status=status):
            emp = employees.get(record.user_id)
            rows.append(
                DailyAttendanceRow(
                    record=record,
                    employee_code=emp.employee_code if emp else "",
                    full_name=emp.full_name if emp else "",
                )
            )
        return rows
