from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from ..common.datetime_utils import get_zone, inclusive_days, now_utc, today_in
from ..common.validators import require_non_empty
from ..core.constants import APPROVER_ROLES, DEFAULT_ORG_TIMEZONE
from ..core.enums import LeaveStatus
from ..core.exceptions import (
    ForbiddenError,
    InsufficientBalanceError,
    NotCancellableError,
    NotFoundError,
    NotPendingError,
    OverlapError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from ..users.model import Actor
from .model import DecisionResult, LeaveBalance, LeaveRequest, LeaveType
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

_CANCELLABLE = (LeaveStatus.PENDING, LeaveStatus.APPROVED)


class LeaveService:
    """Leave requests and the balances they consume.

    Balances change only on approval (decrement) and on cancelling an approved
    request (restore). Both go through conditional repository writes so two
    concurrent approvals can never push ``remaining_days`` below zero.
    """

    def __init__(
        self,
        leave: LeaveRepository,
        employees: EmployeeRepository,
        *,
        tz: ZoneInfo | None = None,
    ):
        self._leave = leave
        self._employees = employees
        self._tz = tz or get_zone(DEFAULT_ORG_TIMEZONE)

    def create_leave_request(
        self,
        employee_id: int,
        leave_type_id: int,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> LeaveRequest:
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        leave_type = self._leave.get_leave_type(leave_type_id)
        if not leave_type or not leave_type.is_active:
            raise NotFoundError("Leave type not found or inactive")

        if start_date > end_date:
            raise ValidationError("Start date must be before or equal to end date")
        reason = require_non_empty(reason, "reason")

        if self._leave.find_overlapping(employee_id, start_date, end_date):
            logger.warning("Overlapping leave request for employee %s (%s..%s)", employee_id, start_date, end_date)
            raise OverlapError("Leave request overlaps with existing leave request")

        requested_days = inclusive_days(start_date, end_date)
        balance = self._leave.get_or_create_balance(
            employee_id,
            leave_type_id,
            start_date.year,
            annual_quota=leave_type.annual_quota,
        )
        if requested_days > balance.remaining_days:
            raise InsufficientBalanceError(
                f"Insufficient leave balance. Available: {balance.remaining_days:g} days, "
                f"Requested: {requested_days} days"
            )

        request = self._leave.create_request(
            employee_id=employee_id,
            leave_type_id=leave_type_id,
            start_date=start_date,
            end_date=end_date,
            requested_days=requested_days,
            reason=reason,
        )
        logger.info("Leave request %s created for employee %s (%d days)", request.request_id, employee_id, requested_days)
        return request

    def approve_leave_request(self, request_id: int, approver: Actor) -> LeaveRequest:
        request = self._require_request(request_id)
        self._require_approver(approver)
        if request.status != LeaveStatus.PENDING:
            raise NotPendingError("Only pending leave requests can be approved")

        balance = self._leave.get_balance(request.employee_id, request.leave_type_id, request.balance_year)
        if balance is None or balance.remaining_days < request.requested_days:
            raise self._insufficient(request, balance)

        result = self._leave.approve(request, approver_id=approver.user_id, decided_at=now_utc())
        if result == DecisionResult.STATE_CHANGED:
            raise NotPendingError("Only pending leave requests can be approved")
        if result == DecisionResult.INSUFFICIENT_BALANCE:
            raise self._insufficient(
                request,
                self._leave.get_balance(request.employee_id, request.leave_type_id, request.balance_year),
            )

        logger.info("Leave request %s approved by user %s", request_id, approver.user_id)
        return self._require_request(request_id)

    def reject_leave_request(self, request_id: int, approver: Actor, notes: str | None = None) -> LeaveRequest:
        request = self._require_request(request_id)
        self._require_approver(approver)
        if request.status != LeaveStatus.PENDING:
            raise NotPendingError("Only pending leave requests can be rejected")

        if not self._leave.reject(request_id, approver_id=approver.user_id, decided_at=now_utc(), notes=notes):
            raise NotPendingError("Only pending leave requests can be rejected")

        logger.info("Leave request %s rejected by user %s", request_id, approver.user_id)
        return self._require_request(request_id)

    def cancel_leave_request(self, request_id: int, requester_id: int, *, today: date | None = None) -> LeaveRequest:
        """Cancel a request on behalf of its owner.

        Approved leave can only be cancelled before its first day; the consumed
        days go back to the balance.
        """
        request = self._leave.get_request(request_id)
        if request is None or request.employee_id != requester_id:
            raise NotFoundError("Leave request not found")

        if request.status not in _CANCELLABLE:
            raise NotCancellableError(f"Leave request is already {request.status.value}")

        today = today or today_in(self._tz)
        if request.status == LeaveStatus.APPROVED and today >= request.start_date:
            raise NotCancellableError("Approved leave can only be cancelled before it starts")

        result = self._leave.cancel(request, expected=request.status)
        if result != DecisionResult.APPLIED:
            logger.warning("Leave request %s changed state during cancellation", request_id)
            raise NotCancellableError("Leave request changed state, please retry")

        logger.info("Leave request %s cancelled by employee %s", request_id, requester_id)
        return self._require_request(request_id)

    def get_employee_leave_balances(self, employee_id: int, year: int | None = None) -> Sequence[LeaveBalance]:
        year = year or today_in(self._tz).year
        return self._leave.list_balances(employee_id=employee_id, year=year)

    def get_leave_request(self, request_id: int) -> Optional[LeaveRequest]:
        return self._leave.get_request(request_id)

    def list_leave_requests(
        self,
        *,
        employee_id: int | None = None,
        status: LeaveStatus | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> Sequence[LeaveRequest]:
        return self._leave.list_requests(
            employee_id=employee_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
        )

    def list_leave_types(self, *, active_only: bool = True) -> Sequence[LeaveType]:
        return self._leave.list_leave_types(active_only=active_only)

    def _require_request(self, request_id: int) -> LeaveRequest:
        request = self._leave.get_request(request_id)
        if request is None:
            raise NotFoundError("Leave request not found")
        return request

    @staticmethod
    def _require_approver(approver: Actor) -> None:
        if not approver.has_role(*APPROVER_ROLES):
            raise ForbiddenError("Only managers, HR managers and admins can decide leave requests")

    @staticmethod
    def _insufficient(request: LeaveRequest, balance: LeaveBalance | None) -> InsufficientBalanceError:
        available = balance.remaining_days if balance else 0
        logger.warning("Insufficient balance to approve leave request %s", request.request_id)
        return InsufficientBalanceError(
            f"Insufficient leave balance. Available: {available:g} days, Requested: {request.requested_days} days"
        )
