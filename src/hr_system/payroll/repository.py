from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import Payroll, SalaryComponents


class PayrollRepository(Protocol):
    """Payroll persistence; unique per ``(employee_id, payroll_month)``."""

    def create(
        self,
        *,
        employee_id: int,
        payroll_month: str,
        components: SalaryComponents,
        net_salary: float,
    ) -> Optional[Payroll]:
        """Returns None when a payroll for the employee and month already exists."""

        raise NotImplementedError

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        raise NotImplementedError

    def get_for_employee_and_month(self, employee_id: int, payroll_month: str) -> Optional[Payroll]:
        raise NotImplementedError

    def list_payrolls(
        self,
        *,
        employee_id: Optional[int] = None,
        payroll_month: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
    ) -> Sequence[Payroll]:
        raise NotImplementedError

    def update(
        self,
        payroll_id: int,
        *,
        components: SalaryComponents,
        net_salary: float,
        payment_date: Optional[date],
        status: PayrollStatus,
    ) -> bool:
        """Write the new values unless the payroll has been paid meanwhile."""

        raise NotImplementedError

    def delete_draft(self, payroll_id: int) -> bool:
        """Delete the payroll only while it is still a draft."""

        raise NotImplementedError
