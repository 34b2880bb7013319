from __future__ import annotations

from ..model import SalaryComponents
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: base + allowances + bonuses + overtime - deductions."""

    def net_salary(self, components: SalaryComponents) -> float:
        total = (
            components.base_salary
            + components.allowances
            + components.bonuses
            + components.overtime_pay
            - components.deductions
        )
        return round(total, 2)
