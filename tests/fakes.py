"""In-memory repositories shared by the service and controller tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from src.geo_attendance.geo_attendance.approvals.model import ReviewItem
from src.geo_attendance.geo_attendance.attendance.model import AttendanceRecord
from src.geo_attendance.geo_attendance.core.enums import (
    ApprovalStatus,
    AttendanceStatus,
    Role,
    SlipStatus,
)
from src.geo_attendance.geo_attendance.core.exceptions import AlreadyCheckedIn
from src.geo_attendance.geo_attendance.devices.model import Device
from src.geo_attendance.geo_attendance.payroll.model import BonusRequest, SalarySlip
from src.geo_attendance.geo_attendance.users.model import Employee

CREATED_AT = datetime(2026, 3, 1, 8, 0, 0)

OFFICE_SETTINGS = {
    "office_latitude": "0",
    "office_longitude": "0",
    "office_radius_meters": "100",
    "work_start_time": "09:00",
    "work_end_time": "17:00",
}

EMPLOYEE_ID = 1
ADMIN_ID = 99
OFFICE_SSID = "Office-WiFi"
DEVICE_FP = "fp-laptop-1"


def make_employee(user_id: int = 1, *, role: Role = Role.EMPLOYEE, is_active: bool = True, **kw) -> Employee:
    return Employee(
        user_id=user_id,
        employee_code=kw.get("employee_code", f"E{user_id:03d}"),
        full_name=kw.get("full_name", f"Employee {user_id}"),
        email=kw.get("email", f"e{user_id}@example.com"),
        role=role,
        base_salary=Decimal(kw.get("base_salary", "0")),
        rate_per_minute=Decimal(kw.get("rate_per_minute", "0")),
        is_active=is_active,
    )


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self._by_id: dict[int, Employee] = {e.user_id: e for e in employees}
        self._id = max(self._by_id, default=0)

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        return self._by_id.get(user_id)

    def list_all(self, *, active_only: bool = False):
        items = sorted(self._by_id.values(), key=lambda e: e.user_id)
        return [e for e in items if e.is_active or not active_only]

    def create(self, *, employee_code, full_name, email, role, base_salary, rate_per_minute) -> int:
        self._id += 1
        self._by_id[self._id] = Employee(
            user_id=self._id,
            employee_code=employee_code,
            full_name=full_name,
            email=email,
            role=role,
            base_salary=base_salary,
            rate_per_minute=rate_per_minute,
        )
        return self._id

    def update(self, *, user_id, full_name, email, role, base_salary, rate_per_minute) -> bool:
        emp = self._by_id.get(user_id)
        if not emp:
            return False
        self._by_id[user_id] = replace(
            emp,
            full_name=full_name,
            email=email,
            role=role,
            base_salary=base_salary,
            rate_per_minute=rate_per_minute,
        )
        return True

    def set_active(self, *, user_id: int, is_active: bool) -> bool:
        emp = self._by_id.get(user_id)
        if not emp:
            return False
        self._by_id[user_id] = replace(emp, is_active=is_active)
        return True


class InMemoryAttendance:
    def __init__(self):
        self._by_id: dict[int, AttendanceRecord] = {}
        self._id = 0

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._by_id[record.attendance_id] = record
        self._id = max(self._id, record.attendance_id)
        return record

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._by_id.get(attendance_id)

    def get_recent_for_user(self, user_id: int, limit: int):
        items = [r for r in self._by_id.values() if r.user_id == user_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        for r in self._by_id.values():
            if r.user_id == user_id and r.work_date == work_date:
                return r
        return None

    def create_checkin(self, *, user_id, work_date, check_in_time, location, photo, approval_status, validation_score=None) -> int:
        if self.get_for_user_and_date(user_id, work_date):
            raise AlreadyCheckedIn("duplicate")
        self._id += 1
        self._by_id[self._id] = AttendanceRecord(
            attendance_id=self._id,
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_in_location=location,
            check_in_photo=photo,
            status=AttendanceStatus.INCOMPLETE,
            approval_status=approval_status,
            validation_score=validation_score,
        )
        return self._id

    def update_checkout(
        self,
        *,
        attendance_id,
        check_out_time,
        location,
        photo,
        total_minutes,
        approval_status,
        validation_score=None,
    ) -> bool:
        rec = self._by_id.get(attendance_id)
        if not rec or rec.check_out_time is not None:
            return False
        self._by_id[attendance_id] = replace(
            rec,
            check_out_time=check_out_time,
            check_out_location=location,
            check_out_photo=photo,
            total_minutes=total_minutes,
            status=AttendanceStatus.COMPLETED,
            approval_status=approval_status,
            validation_score=validation_score,
        )
        return True

    def set_approval_status(self, *, attendance_id, approval_status) -> bool:
        rec = self._by_id.get(attendance_id)
        if not rec:
            return False
        self._by_id[attendance_id] = replace(rec, approval_status=approval_status)
        return True

    def list_for_date(self, work_date, *, status=None):
        items = [
            r for r in self._by_id.values() if r.work_date == work_date and (status is None or r.status == status)
        ]
        items.sort(key=lambda r: (r.check_in_time, r.attendance_id), reverse=True)
        return items

    def delete(self, attendance_id: int) -> bool:
        return self._by_id.pop(attendance_id, None) is not None

    def reset_checkout(self, *, attendance_id, approval_status, validation_score=None) -> bool:
        rec = self._by_id.get(attendance_id)
        if not rec:
            return False
        self._by_id[attendance_id] = replace(
            rec,
            check_out_time=None,
            check_out_location=None,
            check_out_photo=None,
            total_minutes=0,
            status=AttendanceStatus.INCOMPLETE,
            approval_status=approval_status,
            validation_score=validation_score,
        )
        return True

    def sum_completed_minutes(self, *, user_id, start_date, end_date) -> int:
        return sum(
            r.total_minutes
            for r in self._by_id.values()
            if r.user_id == user_id
            and start_date <= r.work_date <= end_date
            and r.status == AttendanceStatus.COMPLETED
            and r.approval_status != ApprovalStatus.REJECTED
        )


class InMemoryReviews:
    def __init__(self):
        self._by_id: dict[int, ReviewItem] = {}
        self._id = 0

    def create(self, *, attendance_id, user_id, submission_type, flags, score, priority) -> int:
        self._id += 1
        self._by_id[self._id] = ReviewItem(
            review_id=self._id,
            attendance_id=attendance_id,
            user_id=user_id,
            submission_type=submission_type,
            flags=flags,
            score=score,
            priority=priority,
            status=ApprovalStatus.PENDING,
            created_at=CREATED_AT,
        )
        return self._id

    def get(self, review_id: int) -> Optional[ReviewItem]:
        return self._by_id.get(review_id)

    def list_items(self, *, status=None, priority=None, user_id=None, limit=200):
        items = [
            i
            for i in self._by_id.values()
            if (status is None or i.status == status)
            and (priority is None or i.priority == priority)
            and (user_id is None or i.user_id == user_id)
        ]
        items.sort(key=lambda i: (-i.priority.value, i.created_at, i.review_id))
        return items[:limit]

    def list_for_attendance(self, attendance_id: int):
        return [i for i in self._by_id.values() if i.attendance_id == attendance_id]

    def decide(self, *, review_id, status, decided_by, decided_at, reason=None) -> bool:
        item = self._by_id.get(review_id)
        if not item or item.status != ApprovalStatus.PENDING:
            return False
        self._by_id[review_id] = replace(item, status=status, decided_by=decided_by, decided_at=decided_at, reason=reason)
        return True


class InMemoryDevices:
    def __init__(self):
        self._by_id: dict[int, Device] = {}
        self._id = 0

    def add(self, *, user_id: int, fingerprint: str, is_active: bool = True) -> Device:
        device_id = self.create(user_id=user_id, fingerprint=fingerprint, device_name=fingerprint, seen_at=CREATED_AT)
        self.set_active(device_id=device_id, is_active=is_active)
        return self._by_id[device_id]

    def get_by_id(self, device_id: int) -> Optional[Device]:
        return self._by_id.get(device_id)

    def get_by_fingerprint(self, *, user_id, fingerprint) -> Optional[Device]:
        for d in self._by_id.values():
            if d.user_id == user_id and d.fingerprint == fingerprint:
                return d
        return None

    def list_for_user(self, user_id: int, *, active_only: bool = False):
        return [d for d in self._by_id.values() if d.user_id == user_id and (d.is_active or not active_only)]

    def list_inactive(self, *, limit: int = 200):
        return [d for d in self._by_id.values() if not d.is_active][:limit]

    def create(self, *, user_id, fingerprint, device_name, seen_at) -> int:
        self._id += 1
        self._by_id[self._id] = Device(
            device_id=self._id,
            user_id=user_id,
            fingerprint=fingerprint,
            device_name=device_name,
            is_active=False,
            first_seen=seen_at,
            last_seen=seen_at,
        )
        return self._id

    def set_active(self, *, device_id, is_active) -> bool:
        d = self._by_id.get(device_id)
        if not d:
            return False
        self._by_id[device_id] = replace(d, is_active=is_active)
        return True

    def touch(self, *, device_id, seen_at) -> bool:
        d = self._by_id.get(device_id)
        if not d:
            return False
        self._by_id[device_id] = replace(d, last_seen=seen_at)
        return True


class InMemorySettings:
    def __init__(self, values: Optional[dict[str, str]] = None, ssids: tuple[str, ...] = ()):
        self.values: dict[str, str] = dict(values or {})
        self.ssids: dict[str, bool] = {s: True for s in ssids}

    def get_all(self) -> dict[str, str]:
        return dict(self.values)

    def upsert_many(self, values) -> bool:
        self.values.update(values)
        return True

    def list_approved_ssids(self):
        return [s for s, active in self.ssids.items() if active]

    def add_approved_ssid(self, *, ssid, bssid=None) -> int:
        self.ssids[ssid] = True
        return list(self.ssids).index(ssid) + 1

    def deactivate_ssid(self, *, ssid) -> bool:
        if ssid not in self.ssids:
            return False
        self.ssids[ssid] = False
        return True


class InMemoryBonuses:
    def __init__(self):
        self._by_id: dict[int, BonusRequest] = {}
        self.approved: list[dict] = []
        self._id = 0

    def create(self, *, from_user_id, to_user_id, work_date, late_minutes, reason) -> int:
        self._id += 1
        self._by_id[self._id] = BonusRequest(
            bonus_id=self._id,
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            work_date=work_date,
            late_minutes=late_minutes,
            reason=reason,
            status=ApprovalStatus.PENDING,
            created_at=CREATED_AT,
        )
        return self._id

    def get(self, bonus_id: int) -> Optional[BonusRequest]:
        return self._by_id.get(bonus_id)

    def list_requests(self, *, status=None, user_id=None, limit=200):
        items = [
            b
            for b in self._by_id.values()
            if (status is None or b.status == status)
            and (user_id is None or user_id in (b.from_user_id, b.to_user_id))
        ]
        return items[:limit]

    def decide(self, *, bonus_id, status, decided_by, decided_at, admin_note=None) -> bool:
        b = self._by_id.get(bonus_id)
        if not b or b.status != ApprovalStatus.PENDING:
            return False
        self._by_id[bonus_id] = replace(b, status=status, decided_by=decided_by, decided_at=decided_at, admin_note=admin_note)
        return True

    def create_approved(self, *, user_id, bonus_minutes, work_date, source_bonus_id) -> int:
        self.approved.append(
            {"user_id": user_id, "bonus_minutes": bonus_minutes, "work_date": work_date, "source_bonus_id": source_bonus_id}
        )
        return len(self.approved)

    def sum_approved_minutes(self, *, user_id, start_date, end_date) -> int:
        return sum(
            a["bonus_minutes"]
            for a in self.approved
            if a["user_id"] == user_id and start_date <= a["work_date"] <= end_date
        )


class InMemorySlips:
    def __init__(self):
        self._by_id: dict[int, SalarySlip] = {}
        self._id = 0

    def get(self, slip_id: int) -> Optional[SalarySlip]:
        return self._by_id.get(slip_id)

    def get_for_period(self, *, user_id, month, year) -> Optional[SalarySlip]:
        for s in self._by_id.values():
            if (s.user_id, s.month, s.year) == (user_id, month, year):
                return s
        return None

    def list_slips(self, *, user_id=None, month=None, year=None):
        return [
            s
            for s in self._by_id.values()
            if (user_id is None or s.user_id == user_id)
            and (month is None or s.month == month)
            and (year is None or s.year == year)
        ]

    def upsert_draft(self, *, user_id, month, year, total_work_minutes, total_bonus_minutes, base_salary, rate_per_minute) -> int:
        existing = self.get_for_period(user_id=user_id, month=month, year=year)
        slip_id = existing.slip_id if existing else self._id + 1
        self._id = max(self._id, slip_id)
        self._by_id[slip_id] = SalarySlip(
            slip_id=slip_id,
            user_id=user_id,
            month=month,
            year=year,
            total_work_minutes=total_work_minutes,
            total_bonus_minutes=total_bonus_minutes,
            base_salary=base_salary,
            rate_per_minute=rate_per_minute,
            status=SlipStatus.DRAFT,
        )
        return slip_id

    def set_status(self, *, slip_id, status, expected, finalized_by=None, finalized_at=None) -> bool:
        s = self._by_id.get(slip_id)
        if not s or s.status != expected:
            return False
        self._by_id[slip_id] = replace(
            s,
            status=status,
            finalized_by=finalized_by if finalized_by is not None else s.finalized_by,
            finalized_at=finalized_at if finalized_at is not None else s.finalized_at,
        )
        return True


class MemoryPhotoStore:
    def __init__(self):
        self.saved: dict[str, bytes] = {}

    def save(self, *, user_id, kind, payload, taken_at) -> str:
        ref = f"{user_id}/{kind}_{taken_at:%Y%m%d%H%M%S}.jpg"
        self.saved[ref] = payload
        return ref

    def delete(self, ref: str) -> None:
        self.saved.pop(ref, None)
