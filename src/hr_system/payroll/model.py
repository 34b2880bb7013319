from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class Payroll:
    """Domain entity: one payroll per employee per month (``YYYY-MM``)."""

    payroll_id: int
    employee_id: int
    payroll_month: str
    base_salary: float
    net_salary: float
    allowances: float = 0.0
    bonuses: float = 0.0
    deductions: float = 0.0
    overtime_pay: float = 0.0
    payment_date: Optional[date] = None
    status: PayrollStatus = PayrollStatus.DRAFT
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "payroll_id": self.payroll_id,
            "employee_id": self.employee_id,
            "payroll_month": self.payroll_month,
            "base_salary": self.base_salary,
            "allowances": self.allowances,
            "bonuses": self.bonuses,
            "deductions": self.deductions,
            "overtime_pay": self.overtime_pay,
            "net_salary": self.net_salary,
            "payment_date": self.payment_date.isoformat() if self.payment_date else None,
            "payroll_status": self.status.value,
        }


@dataclass(frozen=True)
class SalaryComponents:
    base_salary: float
    allowances: float = 0.0
    bonuses: float = 0.0
    deductions: float = 0.0
    overtime_pay: float = 0.0


@dataclass(frozen=True)
class PayrollSummary:
    payroll_month: str
    total_employees: int
    total_base_salary: float
    total_allowances: float
    total_bonuses: float
    total_deductions: float
    total_overtime_pay: float
    total_net_salary: float


@dataclass
class GenerationResult:
    created: list[dict]
    skipped: list[dict]
    errors: list[dict]
