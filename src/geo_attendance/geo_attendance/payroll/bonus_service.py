from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty, require_positive_int
from ..core.enums import ApprovalStatus, Role
from ..core.exceptions import AuthorizationError, PersistenceFailure, ValidationError
from ..users.repository import EmployeeRepository
from .model import BonusRequest
from .repository import BonusRepository

logger = logging.getLogger(__name__)


class BonusService:
    """Bonus-minute requests: employee files, admin approves or rejects.

    Approved requests are copied into the approved-bonus ledger that salary
    slips read from.
    """

    def __init__(self, bonuses: BonusRepository, employees: EmployeeRepository):
        self._bonuses = bonuses
        self._employees = employees

    def create(
        self,
        *,
        from_user_id: int,
        to_user_id: int,
        work_date: date,
        late_minutes: int,
        reason: str,
    ) -> int:
        late_minutes = require_positive_int(late_minutes, "late_minutes")
        reason = require_non_empty(reason, "reason")
        to_user_id = require_positive_int(to_user_id, "to_user_id")
        if int(from_user_id) == to_user_id:
            raise ValidationError("bonus requests must come from a colleague")

        target = self._employees.get_by_id(to_user_id)
        if not target or not target.is_active:
            raise ValidationError("target employee not found")

        bonus_id = self._bonuses.create(
            from_user_id=int(from_user_id),
            to_user_id=to_user_id,
            work_date=work_date,
            late_minutes=late_minutes,
            reason=reason,
        )
        logger.info("bonus request %s: %s -> %s, %s min", bonus_id, from_user_id, to_user_id, late_minutes)
        return bonus_id

    def list_pending(self, *, current_role: Role) -> Sequence[BonusRequest]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")
        return self._bonuses.list_requests(status=ApprovalStatus.PENDING)

    def list_for_user(self, *, user_id: int) -> Sequence[BonusRequest]:
        return self._bonuses.list_requests(user_id=int(user_id))

    def _get_pending(self, bonus_id: int) -> BonusRequest:
        bonus = self._bonuses.get(int(bonus_id))
        if not bonus:
            raise ValidationError("bonus request not found")
        if bonus.status != ApprovalStatus.PENDING:
            raise ValidationError("bonus request already decided")
        return bonus

    def approve(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        bonus_id: int,
        admin_note: Optional[str] = None,
        now: datetime | None = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")

        bonus = self._get_pending(bonus_id)
        if not self._bonuses.decide(
            bonus_id=bonus.bonus_id,
            status=ApprovalStatus.APPROVED,
            decided_by=int(admin_user_id),
            decided_at=now or now_local(),
            admin_note=(admin_note or "").strip() or None,
        ):
            raise ValidationError("bonus request already decided")

        approved_id = self._bonuses.create_approved(
            user_id=bonus.to_user_id,
            bonus_minutes=bonus.late_minutes,
            work_date=bonus.work_date,
            source_bonus_id=bonus.bonus_id,
        )
        if not approved_id:
            raise PersistenceFailure(f"approved bonus for request {bonus.bonus_id} was not stored")

        logger.info("bonus request %s approved by %s", bonus.bonus_id, admin_user_id)
        return approved_id

    def reject(
        self,
        *,
        current_role: Role,
        admin_user_id: int,
        bonus_id: int,
        admin_note: str,
        now: datetime | None = None,
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")

        admin_note = require_non_empty(admin_note, "admin_note")
        bonus = self._get_pending(bonus_id)
        if not self._bonuses.decide(
            bonus_id=bonus.bonus_id,
            status=ApprovalStatus.REJECTED,
            decided_by=int(admin_user_id),
            decided_at=now or now_local(),
            admin_note=admin_note,
        ):
            raise ValidationError("bonus request already decided")
        logger.info("bonus request %s rejected by %s", bonus.bonus_id, admin_user_id)
