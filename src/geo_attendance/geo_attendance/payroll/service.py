from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local
from ..core.enums import Role, SlipStatus
from ..core.exceptions import AuthorizationError, PersistenceFailure, ValidationError
from ..users.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import SalarySlip
from .repository import BonusRepository, SalarySlipRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationReport:
    generated: list[int]
    skipped: list[int]


def _hhmm(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class SalarySlipService:
    def __init__(
        self,
        slips: SalarySlipRepository,
        attendance: AttendanceRepository,
        bonuses: BonusRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._slips = slips
        self._attendance = attendance
        self._bonuses = bonuses
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()

    def generate(self, *, current_role: Role, month: int, year: int) -> GenerationReport:
        """(Re)build draft slips for every active employee.

        Slips that were already finalized or sent are left untouched.
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")

        start, end = month_bounds(year, month)
        generated: list[int] = []
        skipped: list[int] = []

        for emp in self._employees.list_all(active_only=True):
            existing = self._slips.get_for_period(user_id=emp.user_id, month=month, year=year)
            if existing and existing.status != SlipStatus.DRAFT:
                skipped.append(emp.user_id)
                continue

            work = self._attendance.sum_completed_minutes(user_id=emp.user_id, start_date=start, end_date=end)
            bonus = self._bonuses.sum_approved_minutes(user_id=emp.user_id, start_date=start, end_date=end)
            self._slips.upsert_draft(
                user_id=emp.user_id,
                month=month,
                year=year,
                total_work_minutes=work,
                total_bonus_minutes=bonus,
                base_salary=emp.base_salary,
                rate_per_minute=emp.rate_per_minute,
            )
            generated.append(emp.user_id)

        logger.info("salary slips %04d-%02d: %d generated, %d skipped", year, month, len(generated), len(skipped))
        return GenerationReport(generated=generated, skipped=skipped)

    def _transition(
        self,
        slip_id: int,
        *,
        expected: SlipStatus,
        target: SlipStatus,
        admin_user_id: Optional[int] = None,
        now: datetime | None = None,
    ) -> None:
        slip = self._slips.get(int(slip_id))
        if not slip:
            raise ValidationError("salary slip not found")
        if slip.status != expected:
            raise ValidationError(f"salary slip is {slip.status.value}, expected {expected.value}")

        ok = self._slips.set_status(
            slip_id=slip.slip_id,
            status=target,
            expected=expected,
            finalized_by=admin_user_id,
            finalized_at=now,
        )
        if not ok:
            raise PersistenceFailure(f"salary slip {slip.slip_id} status update failed")
        logger.info("salary slip %s: %s -> %s", slip.slip_id, expected.value, target.value)

    def finalize(self, *, current_role: Role, admin_user_id: int, slip_id: int, now: datetime | None = None) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")
        self._transition(
            slip_id,
            expected=SlipStatus.DRAFT,
            target=SlipStatus.FINALIZED,
            admin_user_id=int(admin_user_id),
            now=now or now_local(),
        )

    def mark_sent(self, *, current_role: Role, slip_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("admin role required")
        self._transition(slip_id, expected=SlipStatus.FINALIZED, target=SlipStatus.SENT)

    def list_slips(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[SalarySlip]:
        # Employees only ever see their own finalized or sent slips.
        if current_role == Role.ADMIN:
            return self._slips.list_slips(month=month, year=year)
        slips = self._slips.list_slips(user_id=int(current_user_id), month=month, year=year)
        return [s for s in slips if s.status != SlipStatus.DRAFT]

    def to_rows(self, slips: Sequence[SalarySlip]) -> list[dict]:
        rows = []
        for s in slips:
            rows.append(
                {
                    "slip_id": s.slip_id,
                    "user_id": s.user_id,
                    "period": f"{s.year:04d}-{s.month:02d}",
                    "work_hours": _hhmm(s.total_work_minutes),
                    "bonus_hours": _hhmm(s.total_bonus_minutes),
                    "total_work_minutes": s.total_work_minutes,
                    "total_bonus_minutes": s.total_bonus_minutes,
                    "base_salary": str(s.base_salary),
                    "rate_per_minute": str(s.rate_per_minute),
                    "earnings": str(self._calculator.earnings(s)),
                    "status": s.status.value,
                }
            )
        return rows
