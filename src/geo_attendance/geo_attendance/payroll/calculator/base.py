from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ..model import SalarySlip


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def earnings(self, slip: SalarySlip) -> Decimal:
        raise NotImplementedError
