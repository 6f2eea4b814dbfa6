from decimal import Decimal

from src.geo_attendance.geo_attendance.core.enums import SlipStatus
from src.geo_attendance.geo_attendance.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.geo_attendance.geo_attendance.payroll.model import SalarySlip


def _slip(work: int, bonus: int, base: str = "1000", rate: str = "0.5") -> SalarySlip:
    return SalarySlip(
        slip_id=1,
        user_id=1,
        month=3,
        year=2026,
        total_work_minutes=work,
        total_bonus_minutes=bonus,
        base_salary=Decimal(base),
        rate_per_minute=Decimal(rate),
        status=SlipStatus.DRAFT,
    )


def test_standard_calculator_adds_worked_and_bonus_minutes():
    calc = StandardPayrollCalculator()
    assert calc.earnings(_slip(960, 30)) == Decimal("1495.00")


def test_standard_calculator_rounds_to_cents():
    calc = StandardPayrollCalculator()
    assert calc.earnings(_slip(1, 0, base="0", rate="0.125")) == Decimal("0.13")
