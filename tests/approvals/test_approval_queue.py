from __future__ import annotations

import pytest

from src.geo_attendance.geo_attendance.core.enums import ApprovalStatus, ReviewPriority, Role
from src.geo_attendance.geo_attendance.core.exceptions import AuthorizationError, ValidationError
from src.geo_attendance.geo_attendance.geo.model import GeoPoint

from ..fakes import ADMIN_ID, DEVICE_FP, EMPLOYEE_ID, OFFICE_SSID

FAR_AWAY = GeoPoint(1, 1)


def _queued_checkin(container, now, **kw):
    args = {"location": FAR_AWAY, "photo": b"img", "wifi_ssid": OFFICE_SSID, "device_fingerprint": DEVICE_FP}
    args.update(kw)
    return container.attendance_service.check_in(EMPLOYEE_ID, now=now, **args)


def _queued_checkout(container, now):
    return container.attendance_service.check_out(
        EMPLOYEE_ID,
        location=FAR_AWAY,
        photo=b"img",
        wifi_ssid=OFFICE_SSID,
        device_fingerprint=DEVICE_FP,
        now=now,
    )


def test_list_pending_requires_admin(container):
    with pytest.raises(AuthorizationError):
        container.approval_service.list_pending(current_role=Role.EMPLOYEE)


def test_list_pending_is_highest_priority_first(container, fixed_now):
    container.employees_repo.create(
        employee_code="E777",
        full_name="Other",
        email="o@example.com",
        role=Role.EMPLOYEE,
        base_salary=0,
        rate_per_minute=0,
    )
    _queued_checkin(container, fixed_now)
    container.attendance_service.check_in(100, location=FAR_AWAY, photo=b"img", now=fixed_now)

    items = container.approval_service.list_pending(current_role=Role.ADMIN)

    assert [i.priority for i in items] == [ReviewPriority.HIGH, ReviewPriority.MEDIUM]
    high_only = container.approval_service.list_pending(current_role=Role.ADMIN, priority=ReviewPriority.HIGH)
    assert [i.user_id for i in high_only] == [100]


def test_approve_marks_attendance_approved(container, fixed_now):
    outcome = _queued_checkin(container, fixed_now)

    container.approval_service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN_ID, review_id=outcome.review_id)

    record = container.attendance_repo.get_by_id(outcome.record.attendance_id)
    assert record.approval_status == ApprovalStatus.APPROVED
    item = container.reviews_repo.get(outcome.review_id)
    assert item.status == ApprovalStatus.APPROVED
    assert item.decided_by == ADMIN_ID


def test_reject_requires_reason_and_marks_rejected(container, fixed_now):
    outcome = _queued_checkin(container, fixed_now)

    with pytest.raises(ValidationError):
        container.approval_service.reject(
            current_role=Role.ADMIN, admin_user_id=ADMIN_ID, review_id=outcome.review_id, reason="  "
        )

    container.approval_service.reject(
        current_role=Role.ADMIN, admin_user_id=ADMIN_ID, review_id=outcome.review_id, reason="not at the office"
    )

    record = container.attendance_repo.get_by_id(outcome.record.attendance_id)
    assert record.approval_status == ApprovalStatus.REJECTED
    assert container.reviews_repo.get(outcome.review_id).reason == "not at the office"


def test_deciding_twice_fails(container, fixed_now):
    outcome = _queued_checkin(container, fixed_now)
    container.approval_service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN_ID, review_id=outcome.review_id)

    with pytest.raises(ValidationError):
        container.approval_service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN_ID, review_id=outcome.review_id)


def test_unknown_review_fails(container):
    with pytest.raises(ValidationError):
        container.approval_service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN_ID, review_id=404)


def test_employee_cannot_decide(container, fixed_now):
    outcome = _queued_checkin(container, fixed_now)
    with pytest.raises(AuthorizationError):
        container.approval_service.approve(
            current_role=Role.EMPLOYEE, admin_user_id=EMPLOYEE_ID, review_id=outcome.review_id
        )


def test_day_stays_pending_until_every_submission_is_approved(container, fixed_now):
    checkin = _queued_checkin(container, fixed_now)
    checkout = _queued_checkout(container, fixed_now.replace(hour=17))
    attendance_id = checkin.record.attendance_id

    container.approval_service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN_ID, review_id=checkin.review_id)
    assert container.attendance_repo.get_by_id(attendance_id).approval_status == ApprovalStatus.PENDING

    container.approval_service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN_ID, review_id=checkout.review_id)
    assert container.attendance_repo.get_by_id(attendance_id).approval_status == ApprovalStatus.APPROVED


def test_rejected_sibling_keeps_day_rejected(container, fixed_now):
    checkin = _queued_checkin(container, fixed_now)
    checkout = _queued_checkout(container, fixed_now.replace(hour=17))

    container.approval_service.reject(
        current_role=Role.ADMIN, admin_user_id=ADMIN_ID, review_id=checkin.review_id, reason="off site"
    )
    container.approval_service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN_ID, review_id=checkout.review_id)

    record = container.attendance_repo.get_by_id(checkin.record.attendance_id)
    assert record.approval_status == ApprovalStatus.REJECTED
