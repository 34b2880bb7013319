from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import is_valid_month
from ..common.validators import require_non_negative
from ..core.enums import PayrollStatus
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import GenerationResult, Payroll, PayrollSummary, SalaryComponents
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


def _require_month(payroll_month: str) -> str:
    if not is_valid_month(payroll_month):
        raise ValidationError("Invalid payroll_month format. Expected YYYY-MM")
    return payroll_month


def _validate_components(components: SalaryComponents) -> SalaryComponents:
    require_non_negative(components.base_salary, "base_salary")
    require_non_negative(components.allowances, "allowances")
    require_non_negative(components.bonuses, "bonuses")
    require_non_negative(components.deductions, "deductions")
    require_non_negative(components.overtime_pay, "overtime_pay")
    return components


class PayrollService:
    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()

    def create_payroll(
        self,
        employee_id: int,
        payroll_month: str,
        base_salary: float,
        *,
        allowances: float = 0.0,
        bonuses: float = 0.0,
        deductions: float = 0.0,
        overtime_pay: float = 0.0,
    ) -> Payroll:
        _require_month(payroll_month)
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        components = _validate_components(
            SalaryComponents(
                base_salary=base_salary,
                allowances=allowances,
                bonuses=bonuses,
                deductions=deductions,
                overtime_pay=overtime_pay,
            )
        )
        payroll = self._payrolls.create(
            employee_id=employee_id,
            payroll_month=payroll_month,
            components=components,
            net_salary=self._calculator.net_salary(components),
        )
        if payroll is None:
            raise ValidationError("Payroll already exists for this employee and month")

        logger.info("Payroll %s created for employee %s (%s)", payroll.payroll_id, employee_id, payroll_month)
        return payroll

    def generate_payroll(self, payroll_month: str, employee_ids: Iterable[int] | None = None) -> GenerationResult:
        """Create draft payrolls from each active employee's salary.

        Employees that already have a payroll for the month are skipped; a
        failure for one employee is reported and does not stop the others.
        """
        _require_month(payroll_month)
        ids = list(employee_ids) if employee_ids else None
        employees = self._employees.list_active(employee_ids=ids)
        if not employees:
            raise NotFoundError("No active employees found")

        result = GenerationResult(created=[], skipped=[], errors=[])
        for employee in employees:
            ref = {"employee_id": employee.employee_id, "employee_code": employee.employee_code}
            if self._payrolls.get_for_employee_and_month(employee.employee_id, payroll_month):
                result.skipped.append({**ref, "reason": "Payroll already exists"})
                continue
            try:
                payroll = self.create_payroll(employee.employee_id, payroll_month, employee.salary_amount)
            except DomainError as err:
                logger.warning("Payroll generation failed for employee %s: %s", employee.employee_id, err)
                result.errors.append({**ref, "error": str(err)})
                continue
            result.created.append({**ref, "payroll_id": payroll.payroll_id})

        logger.info(
            "Payroll %s generated: %d created, %d skipped, %d errors",
            payroll_month,
            len(result.created),
            len(result.skipped),
            len(result.errors),
        )
        return result

    def update_payroll(
        self,
        payroll_id: int,
        *,
        base_salary: float | None = None,
        allowances: float | None = None,
        bonuses: float | None = None,
        deductions: float | None = None,
        overtime_pay: float | None = None,
        payment_date: date | None = None,
        status: PayrollStatus | None = None,
    ) -> Payroll:
        payroll = self.get_payroll(payroll_id)
        if payroll.status == PayrollStatus.PAID:
            raise ValidationError("Cannot update paid payroll")

        changes = {
            k: v
            for k, v in {
                "base_salary": base_salary,
                "allowances": allowances,
                "bonuses": bonuses,
                "deductions": deductions,
                "overtime_pay": overtime_pay,
            }.items()
            if v is not None
        }
        current = SalaryComponents(
            base_salary=payroll.base_salary,
            allowances=payroll.allowances,
            bonuses=payroll.bonuses,
            deductions=payroll.deductions,
            overtime_pay=payroll.overtime_pay,
        )
        components = _validate_components(replace(current, **changes))
        return self._write(
            payroll,
            components=components,
            payment_date=payment_date if payment_date is not None else payroll.payment_date,
            status=status or payroll.status,
        )

    def approve_payroll(self, payroll_id: int) -> Payroll:
        payroll = self.get_payroll(payroll_id)
        if payroll.status == PayrollStatus.PAID:
            raise ValidationError("Payroll is already paid")

        components = SalaryComponents(
            base_salary=payroll.base_salary,
            allowances=payroll.allowances,
            bonuses=payroll.bonuses,
            deductions=payroll.deductions,
            overtime_pay=payroll.overtime_pay,
        )
        approved = self._write(payroll, components=components, payment_date=payroll.payment_date, status=PayrollStatus.APPROVED)
        logger.info("Payroll %s approved", payroll_id)
        return approved

    def delete_payroll(self, payroll_id: int) -> None:
        payroll = self.get_payroll(payroll_id)
        if payroll.status != PayrollStatus.DRAFT or not self._payrolls.delete_draft(payroll_id):
            raise ValidationError("Can only delete draft payroll")
        logger.info("Payroll %s deleted", payroll_id)

    def get_payroll(self, payroll_id: int) -> Payroll:
        payroll = self._payrolls.get_by_id(payroll_id)
        if payroll is None:
            raise NotFoundError("Payroll not found")
        return payroll

    def list_payrolls(
        self,
        *,
        employee_id: int | None = None,
        payroll_month: str | None = None,
        status: PayrollStatus | None = None,
    ) -> Sequence[Payroll]:
        if payroll_month is not None:
            _require_month(payroll_month)
        return self._payrolls.list_payrolls(employee_id=employee_id, payroll_month=payroll_month, status=status)

    def get_payroll_summary(self, payroll_month: str) -> PayrollSummary:
        rows = self.list_payrolls(payroll_month=payroll_month)
        return PayrollSummary(
            payroll_month=payroll_month,
            total_employees=len(rows),
            total_base_salary=round(sum(p.base_salary for p in rows), 2),
            total_allowances=round(sum(p.allowances for p in rows), 2),
            total_bonuses=round(sum(p.bonuses for p in rows), 2),
            total_deductions=round(sum(p.deductions for p in rows), 2),
            total_overtime_pay=round(sum(p.overtime_pay for p in rows), 2),
            total_net_salary=round(sum(p.net_salary for p in rows), 2),
        )

    def _write(
        self,
        payroll: Payroll,
        *,
        components: SalaryComponents,
        payment_date: date | None,
        status: PayrollStatus,
    ) -> Payroll:
        updated = self._payrolls.update(
            payroll.payroll_id,
            components=components,
            net_salary=self._calculator.net_salary(components),
            payment_date=payment_date,
            status=status,
        )
        if not updated:
            raise ValidationError("Cannot update paid payroll")
        return self.get_payroll(payroll.payroll_id)
