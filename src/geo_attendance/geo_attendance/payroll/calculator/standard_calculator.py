from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ..model import SalarySlip
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: base salary + (worked + bonus minutes) * rate per minute."""

    def earnings(self, slip: SalarySlip) -> Decimal:
        minutes = max(int(slip.total_work_minutes), 0) + max(int(slip.total_bonus_minutes), 0)
        amount = Decimal(slip.base_salary) + Decimal(minutes) * Decimal(slip.rate_per_minute)
        return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
