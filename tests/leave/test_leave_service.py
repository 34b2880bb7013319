from __future__ import annotations

from datetime import date

import pytest

from hr_system.core.enums import LeaveStatus, Role
from hr_system.core.exceptions import (
    ForbiddenError,
    InsufficientBalanceError,
    NotCancellableError,
    NotFoundError,
    NotPendingError,
    OverlapError,
    ValidationError,
)
from hr_system.leave.model import DecisionResult
from hr_system.leave.service import LeaveService
from hr_system.users.model import Actor

from fakes import ANNUAL, PHNOM_PENH, SICK, UNPAID_OLD

MANAGER = Actor(user_id=3, employee_id=3, role=Role.MANAGER)
HR = Actor(user_id=6, employee_id=None, role=Role.HR_MANAGER)
EMPLOYEE = Actor(user_id=2, employee_id=2, role=Role.EMPLOYEE)


@pytest.fixture
def service(leave_repo, employees):
    return LeaveService(leave_repo, employees, tz=PHNOM_PENH)


def remaining(leave_repo, employee_id=1, leave_type_id=ANNUAL, year=2024):
    return leave_repo.get_balance(employee_id, leave_type_id, year).remaining_days


def test_balance_is_consumed_on_approval_only(service, leave_repo):
    leave_repo.set_balance(1, ANNUAL, 2024, quota=5)

    request = service.create_leave_request(1, ANNUAL, date(2024, 1, 10), date(2024, 1, 12), "Family trip")
    assert request.status == LeaveStatus.PENDING
    assert request.requested_days == 3
    assert remaining(leave_repo) == 5

    approved = service.approve_leave_request(request.request_id, MANAGER)
    assert approved.status == LeaveStatus.APPROVED
    assert approved.approved_by == MANAGER.user_id
    assert approved.decided_at is not None
    assert remaining(leave_repo) == 2

    with pytest.raises(InsufficientBalanceError):
        service.create_leave_request(1, ANNUAL, date(2024, 1, 15), date(2024, 1, 17), "Another trip")


def test_balance_initialised_from_leave_type_quota(service, leave_repo):
    service.create_leave_request(1, SICK, date(2024, 3, 4), date(2024, 3, 4), "Flu")

    balance = leave_repo.get_balance(1, SICK, 2024)
    assert balance.annual_quota == 7
    assert balance.used_days == 0
    assert balance.remaining_days == 7


def test_balance_year_is_start_date_year(service, leave_repo):
    service.create_leave_request(1, ANNUAL, date(2024, 12, 30), date(2025, 1, 2), "New year")

    assert leave_repo.get_balance(1, ANNUAL, 2024) is not None
    assert leave_repo.get_balance(1, ANNUAL, 2025) is None


def test_create_validations(service):
    with pytest.raises(NotFoundError):
        service.create_leave_request(99, ANNUAL, date(2024, 1, 10), date(2024, 1, 12), "x")
    with pytest.raises(NotFoundError):
        service.create_leave_request(1, UNPAID_OLD, date(2024, 1, 10), date(2024, 1, 12), "x")
    with pytest.raises(ValidationError):
        service.create_leave_request(1, ANNUAL, date(2024, 1, 12), date(2024, 1, 10), "x")
    with pytest.raises(ValidationError):
        service.create_leave_request(1, ANNUAL, date(2024, 1, 10), date(2024, 1, 12), "   ")


def test_request_larger_than_balance_is_refused_at_creation(service, leave_repo):
    leave_repo.set_balance(1, ANNUAL, 2024, quota=2)
    with pytest.raises(InsufficientBalanceError):
        service.create_leave_request(1, ANNUAL, date(2024, 1, 10), date(2024, 1, 12), "Too long")
    assert leave_repo.requests == {}


def test_overlap_with_pending_or_approved_request(service):
    service.create_leave_request(1, ANNUAL, date(2024, 2, 5), date(2024, 2, 9), "Holiday")

    with pytest.raises(OverlapError):
        service.create_leave_request(1, SICK, date(2024, 2, 9), date(2024, 2, 12), "Sick")

    # other employees are unaffected
    service.create_leave_request(2, ANNUAL, date(2024, 2, 5), date(2024, 2, 9), "Holiday")


def test_rejected_request_does_not_block_new_one(service):
    request = service.create_leave_request(1, ANNUAL, date(2024, 2, 5), date(2024, 2, 9), "Holiday")
    service.reject_leave_request(request.request_id, MANAGER, "Busy period")

    again = service.create_leave_request(1, ANNUAL, date(2024, 2, 5), date(2024, 2, 9), "Holiday")
    assert again.status == LeaveStatus.PENDING


def test_approve_requires_approver_role(service):
    request = service.create_leave_request(1, ANNUAL, date(2024, 2, 5), date(2024, 2, 6), "Errand")
    with pytest.raises(ForbiddenError):
        service.approve_leave_request(request.request_id, EMPLOYEE)
    with pytest.raises(ForbiddenError):
        service.reject_leave_request(request.request_id, EMPLOYEE)


def test_approve_unknown_request(service):
    with pytest.raises(NotFoundError):
        service.approve_leave_request(404, MANAGER)


def test_approve_only_pending(service):
    request = service.create_leave_request(1, ANNUAL, date(2024, 2, 5), date(2024, 2, 6), "Errand")
    service.approve_leave_request(request.request_id, HR)

    with pytest.raises(NotPendingError):
        service.approve_leave_request(request.request_id, HR)
    with pytest.raises(NotPendingError):
        service.reject_leave_request(request.request_id, HR)


def test_approval_over_balance_leaves_balance_unchanged(service, leave_repo):
    leave_repo.set_balance(1, ANNUAL, 2024, quota=5)
    first = service.create_leave_request(1, ANNUAL, date(2024, 3, 1), date(2024, 3, 3), "A")
    second = service.create_leave_request(1, ANNUAL, date(2024, 4, 1), date(2024, 4, 3), "B")

    service.approve_leave_request(first.request_id, MANAGER)
    with pytest.raises(InsufficientBalanceError):
        service.approve_leave_request(second.request_id, MANAGER)

    assert remaining(leave_repo) == 2
    assert leave_repo.get_request(second.request_id).status == LeaveStatus.PENDING


def test_conditional_approval_refuses_when_balance_drained_concurrently(leave_repo, employees):
    leave_repo.set_balance(1, ANNUAL, 2024, quota=3)
    service = LeaveService(leave_repo, employees, tz=PHNOM_PENH)
    request = service.create_leave_request(1, ANNUAL, date(2024, 3, 1), date(2024, 3, 3), "A")

    leave_repo.set_balance(1, ANNUAL, 2024, quota=3, used=2)
    assert leave_repo.approve(request, approver_id=3, decided_at=None) == DecisionResult.INSUFFICIENT_BALANCE
    assert remaining(leave_repo) == 1


def test_reject_records_notes(service, leave_repo):
    request = service.create_leave_request(1, ANNUAL, date(2024, 2, 5), date(2024, 2, 6), "Errand")
    rejected = service.reject_leave_request(request.request_id, MANAGER, "Team offsite")

    assert rejected.status == LeaveStatus.REJECTED
    assert rejected.decision_notes == "Team offsite"
    assert remaining(leave_repo) == 18


def test_cancel_approved_restores_balance_exactly(service, leave_repo):
    leave_repo.set_balance(1, ANNUAL, 2024, quota=5)
    request = service.create_leave_request(1, ANNUAL, date(2024, 5, 6), date(2024, 5, 8), "Trip")
    service.approve_leave_request(request.request_id, MANAGER)
    assert remaining(leave_repo) == 2

    cancelled = service.cancel_leave_request(request.request_id, 1, today=date(2024, 5, 5))

    assert cancelled.status == LeaveStatus.CANCELLED
    balance = leave_repo.get_balance(1, ANNUAL, 2024)
    assert balance.remaining_days == 5
    assert balance.used_days == 0


def test_cancel_pending_has_no_balance_effect(service, leave_repo):
    request = service.create_leave_request(1, ANNUAL, date(2024, 5, 6), date(2024, 5, 8), "Trip")
    service.cancel_leave_request(request.request_id, 1, today=date(2024, 5, 7))
    assert remaining(leave_repo) == 18


def test_cannot_cancel_approved_leave_once_started(service):
    request = service.create_leave_request(1, ANNUAL, date(2024, 5, 6), date(2024, 5, 8), "Trip")
    service.approve_leave_request(request.request_id, MANAGER)

    with pytest.raises(NotCancellableError):
        service.cancel_leave_request(request.request_id, 1, today=date(2024, 5, 6))


def test_cannot_cancel_terminal_requests(service):
    request = service.create_leave_request(1, ANNUAL, date(2024, 5, 6), date(2024, 5, 8), "Trip")
    service.reject_leave_request(request.request_id, MANAGER)

    with pytest.raises(NotCancellableError):
        service.cancel_leave_request(request.request_id, 1, today=date(2024, 5, 1))


def test_cancel_by_non_owner_is_not_found(service):
    request = service.create_leave_request(1, ANNUAL, date(2024, 5, 6), date(2024, 5, 8), "Trip")
    with pytest.raises(NotFoundError):
        service.cancel_leave_request(request.request_id, 2, today=date(2024, 5, 1))


def test_remaining_never_negative_across_sequence(service, leave_repo):
    leave_repo.set_balance(1, ANNUAL, 2024, quota=4)
    a = service.create_leave_request(1, ANNUAL, date(2024, 7, 1), date(2024, 7, 2), "A")
    b = service.create_leave_request(1, ANNUAL, date(2024, 7, 8), date(2024, 7, 10), "B")

    service.approve_leave_request(a.request_id, MANAGER)
    with pytest.raises(InsufficientBalanceError):
        service.approve_leave_request(b.request_id, MANAGER)
    service.cancel_leave_request(a.request_id, 1, today=date(2024, 6, 30))
    service.approve_leave_request(b.request_id, MANAGER)

    assert remaining(leave_repo) == 1
    assert all(bal.remaining_days >= 0 for bal in leave_repo.balances.values())


def test_list_and_balances(service):
    service.create_leave_request(1, ANNUAL, date(2024, 2, 5), date(2024, 2, 6), "A")
    service.create_leave_request(1, SICK, date(2024, 3, 5), date(2024, 3, 5), "B")
    service.create_leave_request(2, ANNUAL, date(2024, 2, 5), date(2024, 2, 6), "C")

    mine = service.list_leave_requests(employee_id=1)
    assert [r.reason for r in mine] == ["B", "A"]

    february = service.list_leave_requests(start_date=date(2024, 2, 1), end_date=date(2024, 2, 29))
    assert {r.reason for r in february} == {"A", "C"}

    balances = service.get_employee_leave_balances(1, 2024)
    assert {b.leave_type_id for b in balances} == {ANNUAL, SICK}
    assert service.get_employee_leave_balances(1, 2023) == []


def test_list_leave_types_hides_inactive_by_default(service):
    assert {t.leave_type_id for t in service.list_leave_types()} == {ANNUAL, SICK}
    assert len(service.list_leave_types(active_only=False)) == 3
