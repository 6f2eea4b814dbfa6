from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import ApprovalStatus, SlipStatus
from .model import BonusRequest, SalarySlip


class BonusRepository(Protocol):
    def create(self, *, from_user_id: int, to_user_id: int, work_date: date, late_minutes: int, reason: str) -> int:
        raise NotImplementedError

    def get(self, bonus_id: int) -> Optional[BonusRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[ApprovalStatus] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[BonusRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        bonus_id: int,
        status: ApprovalStatus,
        decided_by: int,
        decided_at: datetime,
        admin_note: Optional[str] = None,
    ) -> bool:
        """Only pending requests can be decided; returns False otherwise."""

        raise NotImplementedError

    def create_approved(self, *, user_id: int, bonus_minutes: int, work_date: date, source_bonus_id: int) -> int:
        raise NotImplementedError

    def sum_approved_minutes(self, *, user_id: int, start_date: date, end_date: date) -> int:
        raise NotImplementedError


class SalarySlipRepository(Protocol):
    def get(self, slip_id: int) -> Optional[SalarySlip]:
        raise NotImplementedError

    def get_for_period(self, *, user_id: int, month: int, year: int) -> Optional[SalarySlip]:
        raise NotImplementedError

    def list_slips(
        self,
        *,
        user_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[SalarySlip]:
        raise NotImplementedError

    def upsert_draft(
        self,
        *,
        user_id: int,
        month: int,
        year: int,
        total_work_minutes: int,
        total_bonus_minutes: int,
        base_salary: Decimal,
        rate_per_minute: Decimal,
    ) -> int:
        raise NotImplementedError

    def set_status(
        self,
        *,
        slip_id: int,
        status: SlipStatus,
        expected: SlipStatus,
        finalized_by: Optional[int] = None,
        finalized_at: Optional[datetime] = None,
    ) -> bool:
        raise NotImplementedError
