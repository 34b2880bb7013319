from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import DecisionResult, LeaveBalance, LeaveRequest, LeaveType


class LeaveRepository(Protocol):
    """Leave types, balances and requests.

    ``approve`` and ``cancel`` change the request status and the balance in a
    single transaction. Both writes are conditional; when either condition
    fails nothing is written and the returned ``DecisionResult`` says why.
    """

    def get_leave_type(self, leave_type_id: int) -> Optional[LeaveType]:
        raise NotImplementedError

    def list_leave_types(self, *, active_only: bool = True) -> Sequence[LeaveType]:
        raise NotImplementedError

    def get_balance(self, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def get_or_create_balance(self, employee_id: int, leave_type_id: int, year: int, *, annual_quota: float) -> LeaveBalance:
        raise NotImplementedError

    def list_balances(self, *, employee_id: Optional[int] = None, year: Optional[int] = None) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def find_overlapping(self, employee_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        """Pending or approved requests of the employee intersecting the range."""

        raise NotImplementedError

    def create_request(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        start_date: date,
        end_date: date,
        requested_days: int,
        reason: str,
    ) -> LeaveRequest:
        raise NotImplementedError

    def get_request(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        """Newest first."""

        raise NotImplementedError

    def approve(self, request: LeaveRequest, *, approver_id: int, decided_at: datetime) -> DecisionResult:
        """pending -> approved while consuming ``requested_days`` from the balance."""

        raise NotImplementedError

    def reject(self, request_id: int, *, approver_id: int, decided_at: datetime, notes: Optional[str]) -> bool:
        """pending -> rejected; False if the request is no longer pending."""

        raise NotImplementedError

    def cancel(self, request: LeaveRequest, *, expected: LeaveStatus) -> DecisionResult:
        """``expected`` -> cancelled; restores the balance when ``expected`` is approved."""

        raise NotImplementedError
