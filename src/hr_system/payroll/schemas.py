from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.enums import PayrollStatus

_MONTH = r"^\d{4}-(0[1-9]|1[0-2])$"


class PayrollCreateIn(BaseModel):
    employee_id: int
    payroll_month: str = Field(pattern=_MONTH)
    base_salary: float = Field(ge=0)
    allowances: float = Field(default=0, ge=0)
    bonuses: float = Field(default=0, ge=0)
    deductions: float = Field(default=0, ge=0)
    overtime_pay: float = Field(default=0, ge=0)


class PayrollGenerateIn(BaseModel):
    payroll_month: str = Field(pattern=_MONTH)
    employee_ids: Optional[List[int]] = None


class PayrollUpdateIn(BaseModel):
    base_salary: Optional[float] = Field(default=None, ge=0)
    allowances: Optional[float] = Field(default=None, ge=0)
    bonuses: Optional[float] = Field(default=None, ge=0)
    deductions: Optional[float] = Field(default=None, ge=0)
    overtime_pay: Optional[float] = Field(default=None, ge=0)
    payment_date: Optional[date] = None
    payroll_status: Optional[PayrollStatus] = None


class PayrollQuery(BaseModel):
    employee_id: Optional[int] = None
    payroll_month: Optional[str] = Field(default=None, pattern=_MONTH)
    status: Optional[PayrollStatus] = None


class PayrollSummaryQuery(BaseModel):
    payroll_month: str = Field(pattern=_MONTH)
