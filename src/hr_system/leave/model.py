from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from ..core.enums import LeaveStatus, LeaveTypeStatus


@dataclass(frozen=True)
class LeaveType:
    leave_type_id: int
    leave_type_name: str
    annual_quota: float
    is_paid: bool = True
    status: LeaveTypeStatus = LeaveTypeStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == LeaveTypeStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            "leave_type_id": self.leave_type_id,
            "leave_type_name": self.leave_type_name,
            "annual_quota": self.annual_quota,
            "is_paid": self.is_paid,
            "leave_type_status": self.status.value,
        }


@dataclass(frozen=True)
class LeaveBalance:
    """Remaining days of one leave type for an employee in a calendar year."""

    leave_balance_id: int
    employee_id: int
    leave_type_id: int
    year: int
    annual_quota: float
    used_days: float
    remaining_days: float

    def to_dict(self) -> dict:
        return {
            "leave_balance_id": self.leave_balance_id,
            "employee_id": self.employee_id,
            "leave_type_id": self.leave_type_id,
            "year": self.year,
            "annual_quota": self.annual_quota,
            "used_days": self.used_days,
            "remaining_days": self.remaining_days,
        }


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_type_id: int
    start_date: date
    end_date: date
    requested_days: int
    reason: str
    status: LeaveStatus = LeaveStatus.PENDING
    approved_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    decision_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def balance_year(self) -> int:
        return self.start_date.year

    def overlaps(self, start_date: date, end_date: date) -> bool:
        return self.start_date <= end_date and start_date <= self.end_date

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "employee_id": self.employee_id,
            "leave_type_id": self.leave_type_id,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "requested_days": self.requested_days,
            "reason": self.reason,
            "leave_status": self.status.value,
            "approved_by": self.approved_by,
            "decided_at": self.decided_at.isoformat() if self.decided_at else None,
            "decision_notes": self.decision_notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


class DecisionResult(str, Enum):
    """Outcome of a conditional approve/cancel write."""

    APPLIED = "applied"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    STATE_CHANGED = "state_changed"
