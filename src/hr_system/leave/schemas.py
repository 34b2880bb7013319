from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from ..core.enums import LeaveStatus


class LeaveRequestIn(BaseModel):
    leave_type_id: int
    start_date: date
    end_date: date
    reason: str = Field(min_length=1, max_length=500)
    employee_id: Optional[int] = None


class RejectIn(BaseModel):
    rejection_reason: Optional[str] = Field(default=None, max_length=500)


class LeaveQuery(BaseModel):
    employee_id: Optional[int] = None
    status: Optional[LeaveStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class BalanceQuery(BaseModel):
    employee_id: Optional[int] = None
    year: Optional[int] = Field(default=None, ge=2000, le=2100)


class LeaveTypeQuery(BaseModel):
    include_inactive: bool = False
