from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import EmployeeMonthInput, PayrollResult


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(self, data: EmployeeMonthInput) -> PayrollResult:
        raise NotImplementedError
