from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_non_negative
from ..core.enums import DepartmentStatus, EmployeeStatus, EmployeeType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import Department, Employee, NewEmployee
from .repository import DepartmentRepository, EmployeeRepository

logger = logging.getLogger(__name__)


def _clean_email(email: Optional[str]) -> Optional[str]:
    if email is None:
        return None
    email = email.strip().lower()
    return email or None


class EmployeeService:
    """Use case: maintain the employee directory and departments (HR admin)."""

    def __init__(self, employees: EmployeeRepository, departments: DepartmentRepository):
        self._employees = employees
        self._departments = departments

    # Employees

    def list_employees(
        self,
        *,
        search: Optional[str] = None,
        department_id: Optional[int] = None,
        status: Optional[EmployeeStatus] = None,
        employee_type: Optional[EmployeeType] = None,
    ) -> Sequence[Employee]:
        return self._employees.list_employees(
            search=search.strip() if search else None,
            department_id=department_id,
            status=status,
            employee_type=employee_type,
        )

    def get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if employee is None:
            raise NotFoundError("Employee not found")
        return employee

    def create_employee(
        self,
        *,
        employee_code: str,
        first_name: str,
        last_name: str,
        email: Optional[str] = None,
        department_id: Optional[int] = None,
        position: Optional[str] = None,
        employee_type: EmployeeType = EmployeeType.FULL_TIME,
        salary_amount: float = 0.0,
        hire_date: Optional[date] = None,
    ) -> Employee:
        self._require_active_department(department_id)
        draft = NewEmployee(
            employee_code=require_non_empty(employee_code, "employee_code"),
            first_name=require_non_empty(first_name, "first_name"),
            last_name=require_non_empty(last_name, "last_name"),
            email=_clean_email(email),
            department_id=department_id,
            position=position.strip() if position else None,
            employee_type=employee_type,
            salary_amount=require_non_negative(salary_amount, "salary_amount"),
            hire_date=hire_date,
        )

        employee = self._employees.create(draft)
        if employee is None:
            raise ConflictError("Employee code or email already exists")

        logger.info("Employee %s created (%s)", employee.employee_id, employee.employee_code)
        return employee

    def update_employee(self, employee_id: int, **changes) -> Employee:
        """Apply the given field changes; ``None`` values are ignored."""
        current = self.get_employee(employee_id)
        changes = {k: v for k, v in changes.items() if v is not None}

        if "department_id" in changes and changes["department_id"] != current.department_id:
            self._require_active_department(changes["department_id"])
        for name in ("employee_code", "first_name", "last_name"):
            if name in changes:
                changes[name] = require_non_empty(changes[name], name)
        if "salary_amount" in changes:
            require_non_negative(changes["salary_amount"], "salary_amount")
        if "email" in changes:
            changes["email"] = _clean_email(changes["email"])

        try:
            updated = replace(current, **changes)
        except TypeError as err:
            raise ValidationError(f"Unknown employee field: {err}")

        if not self._employees.update(updated):
            raise ConflictError("Employee code or email already exists")

        logger.info("Employee %s updated: %s", employee_id, ", ".join(sorted(changes)) or "no changes")
        return self.get_employee(employee_id)

    def delete_employee(self, employee_id: int) -> None:
        """Soft delete: the employee is terminated and hidden from the directory."""
        self.get_employee(employee_id)
        if not self._employees.soft_delete(employee_id):
            raise NotFoundError("Employee not found")
        logger.info("Employee %s deleted", employee_id)

    # Departments

    def list_departments(self, *, include_inactive: bool = False) -> Sequence[Department]:
        return [d for d in self._departments.list_all() if include_inactive or d.is_active]

    def get_department(self, department_id: int) -> Department:
        department = self._departments.get_by_id(department_id)
        if department is None:
            raise NotFoundError("Department not found")
        return department

    def create_department(self, department_name: str) -> Department:
        name = require_non_empty(department_name, "department_name")
        department = self._departments.create(name)
        if department is None:
            raise ConflictError("Department name already exists")
        logger.info("Department %s created (%s)", department.department_id, name)
        return department

    def update_department(
        self,
        department_id: int,
        *,
        department_name: Optional[str] = None,
        status: Optional[DepartmentStatus] = None,
    ) -> Department:
        current = self.get_department(department_id)
        if status == DepartmentStatus.INACTIVE and current.is_active:
            self._require_no_active_employees(department_id)

        updated = replace(
            current,
            department_name=require_non_empty(department_name, "department_name")
            if department_name is not None
            else current.department_name,
            department_status=status or current.department_status,
        )
        if not self._departments.update(updated):
            raise ConflictError("Department name already exists")
        return self.get_department(department_id)

    def delete_department(self, department_id: int) -> None:
        """Soft delete: the department becomes inactive."""
        self.update_department(department_id, status=DepartmentStatus.INACTIVE)
        logger.info("Department %s deactivated", department_id)

    def _require_active_department(self, department_id: Optional[int]) -> None:
        if department_id is None:
            return
        department = self._departments.get_by_id(department_id)
        if department is None or not department.is_active:
            raise ValidationError("Invalid department_id")

    def _require_no_active_employees(self, department_id: int) -> None:
        if self._employees.list_employees(department_id=department_id, status=EmployeeStatus.ACTIVE):
            raise ValidationError("Cannot delete department with active employees")
