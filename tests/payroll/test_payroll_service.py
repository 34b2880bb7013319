from __future__ import annotations

from datetime import date

import pytest

from hr_system.core.enums import PayrollStatus
from hr_system.core.exceptions import NotFoundError, ValidationError
from hr_system.payroll.service import PayrollService


@pytest.fixture
def service(payroll_repo, employees):
    return PayrollService(payroll_repo, employees)


def test_create_payroll_computes_net_salary(service):
    payroll = service.create_payroll(1, "2024-05", 1200, allowances=100, bonuses=50, deductions=30, overtime_pay=20)

    assert payroll.status == PayrollStatus.DRAFT
    assert payroll.net_salary == 1340


@pytest.mark.parametrize("month", ["2024-13", "2024-5", "24-05", ""])
def test_create_payroll_rejects_bad_month(service, month):
    with pytest.raises(ValidationError):
        service.create_payroll(1, month, 1000)


def test_create_payroll_once_per_employee_and_month(service):
    service.create_payroll(1, "2024-05", 1000)
    with pytest.raises(ValidationError):
        service.create_payroll(1, "2024-05", 1000)


def test_create_payroll_unknown_employee(service):
    with pytest.raises(NotFoundError):
        service.create_payroll(99, "2024-05", 1000)


def test_generate_payroll_for_active_employees(service):
    service.create_payroll(2, "2024-06", 900)

    result = service.generate_payroll("2024-06")

    assert [c["employee_id"] for c in result.created] == [1, 3]
    assert [s["employee_id"] for s in result.skipped] == [2]
    assert result.errors == []
    assert service.list_payrolls(payroll_month="2024-06", employee_id=3)[0].base_salary == 1500


def test_generate_payroll_restricted_to_ids(service):
    result = service.generate_payroll("2024-06", employee_ids=[3])
    assert [c["employee_id"] for c in result.created] == [3]


def test_generate_payroll_without_active_employees(service):
    with pytest.raises(NotFoundError):
        service.generate_payroll("2024-06", employee_ids=[4])


def test_update_recomputes_net_salary(service):
    payroll = service.create_payroll(1, "2024-05", 1000)
    updated = service.update_payroll(payroll.payroll_id, bonuses=200, deductions=50)

    assert updated.net_salary == 1150
    assert updated.base_salary == 1000


def test_paid_payroll_is_frozen(service):
    payroll = service.create_payroll(1, "2024-05", 1000)
    service.update_payroll(payroll.payroll_id, status=PayrollStatus.PAID, payment_date=date(2024, 5, 31))

    with pytest.raises(ValidationError):
        service.update_payroll(payroll.payroll_id, bonuses=10)
    with pytest.raises(ValidationError):
        service.approve_payroll(payroll.payroll_id)


def test_approve_payroll(service):
    payroll = service.create_payroll(1, "2024-05", 1000)
    assert service.approve_payroll(payroll.payroll_id).status == PayrollStatus.APPROVED


def test_delete_only_draft_payroll(service):
    draft = service.create_payroll(1, "2024-05", 1000)
    approved = service.create_payroll(3, "2024-05", 1500)
    service.approve_payroll(approved.payroll_id)

    service.delete_payroll(draft.payroll_id)

    with pytest.raises(NotFoundError):
        service.get_payroll(draft.payroll_id)
    with pytest.raises(ValidationError):
        service.delete_payroll(approved.payroll_id)
    assert service.get_payroll(approved.payroll_id).status == PayrollStatus.APPROVED


def test_payroll_summary_totals(service):
    service.create_payroll(1, "2024-05", 1000, allowances=100)
    service.create_payroll(3, "2024-05", 1500, deductions=200)
    service.create_payroll(1, "2024-06", 999)

    summary = service.get_payroll_summary("2024-05")

    assert summary.total_employees == 2
    assert summary.total_base_salary == 2500
    assert summary.total_allowances == 100
    assert summary.total_deductions == 200
    assert summary.total_net_salary == 2400
