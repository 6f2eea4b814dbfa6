from __future__ import annotations

from datetime import date

import pytest

from src.geo_attendance.geo_attendance.core.enums import ApprovalStatus, Role
from src.geo_attendance.geo_attendance.core.exceptions import AuthorizationError, ValidationError

from ..fakes import ADMIN_ID, EMPLOYEE_ID

WORK_DATE = date(2026, 3, 2)


def _request(container, **kw):
    args = {
        "from_user_id": 2,
        "to_user_id": EMPLOYEE_ID,
        "work_date": WORK_DATE,
        "late_minutes": 30,
        "reason": "covered the front desk",
    }
    args.update(kw)
    return container.bonus_service.create(**args)


@pytest.mark.parametrize(
    "override",
    [
        {"late_minutes": 0},
        {"late_minutes": -10},
        {"reason": " "},
        {"to_user_id": 2},
        {"to_user_id": 4040},
    ],
)
def test_create_validates(container, override):
    with pytest.raises(ValidationError):
        _request(container, **override)


def test_approve_creates_bonus_minutes(container):
    bonus_id = _request(container)

    container.bonus_service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN_ID, bonus_id=bonus_id)

    assert container.bonuses_repo.get(bonus_id).status == ApprovalStatus.APPROVED
    total = container.bonuses_repo.sum_approved_minutes(
        user_id=EMPLOYEE_ID, start_date=date(2026, 3, 1), end_date=date(2026, 3, 31)
    )
    assert total == 30


def test_reject_needs_note_and_adds_nothing(container):
    bonus_id = _request(container)

    with pytest.raises(ValidationError):
        container.bonus_service.reject(current_role=Role.ADMIN, admin_user_id=ADMIN_ID, bonus_id=bonus_id, admin_note="")

    container.bonus_service.reject(
        current_role=Role.ADMIN, admin_user_id=ADMIN_ID, bonus_id=bonus_id, admin_note="not confirmed"
    )
    assert container.bonuses_repo.get(bonus_id).status == ApprovalStatus.REJECTED
    assert container.bonuses_repo.approved == []


def test_cannot_decide_twice(container):
    bonus_id = _request(container)
    container.bonus_service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN_ID, bonus_id=bonus_id)

    with pytest.raises(ValidationError):
        container.bonus_service.approve(current_role=Role.ADMIN, admin_user_id=ADMIN_ID, bonus_id=bonus_id)


def test_only_admin_decides(container):
    bonus_id = _request(container)
    with pytest.raises(AuthorizationError):
        container.bonus_service.approve(current_role=Role.EMPLOYEE, admin_user_id=EMPLOYEE_ID, bonus_id=bonus_id)
    with pytest.raises(AuthorizationError):
        container.bonus_service.list_pending(current_role=Role.EMPLOYEE)

    assert [b.bonus_id for b in container.bonus_service.list_pending(current_role=Role.ADMIN)] == [bonus_id]
