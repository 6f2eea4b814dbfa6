from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import ApprovalStatus, SlipStatus


@dataclass(frozen=True)
class BonusRequest:
    """A colleague vouching extra minutes for an employee (e.g. covering a late start)."""

    bonus_id: int
    from_user_id: int
    to_user_id: int
    work_date: date
    late_minutes: int
    reason: str
    status: ApprovalStatus
    created_at: datetime
    admin_note: Optional[str] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None


@dataclass(frozen=True)
class SalarySlip:
    slip_id: int
    user_id: int
    month: int
    year: int
    total_work_minutes: int
    total_bonus_minutes: int
    base_salary: Decimal
    rate_per_minute: Decimal
    status: SlipStatus
    finalized_by: Optional[int] = None
    finalized_at: Optional[datetime] = None
