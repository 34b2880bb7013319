from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import DepartmentStatus, EmployeeStatus, EmployeeType


@dataclass(frozen=True)
class Department:
    department_id: int
    department_name: str
    department_status: DepartmentStatus = DepartmentStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.department_status == DepartmentStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            "department_id": self.department_id,
            "department_name": self.department_name,
            "department_status": self.department_status.value,
        }


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: plain data object, no DB access code here.
    """

    employee_id: int
    employee_code: str
    first_name: str
    last_name: str
    department_id: Optional[int]
    employee_type: EmployeeType = EmployeeType.FULL_TIME
    employee_status: EmployeeStatus = EmployeeStatus.ACTIVE
    salary_amount: float = 0.0
    email: Optional[str] = None
    position: Optional[str] = None
    hire_date: Optional[date] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_active(self) -> bool:
        return self.employee_status == EmployeeStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_code": self.employee_code,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "email": self.email,
            "department_id": self.department_id,
            "position": self.position,
            "employee_type": self.employee_type.value,
            "employee_status": self.employee_status.value,
            "salary_amount": self.salary_amount,
            "hire_date": self.hire_date.isoformat() if self.hire_date else None,
        }


@dataclass(frozen=True)
class NewEmployee:
    """Fields of an employee before the database assigns an id."""

    employee_code: str
    first_name: str
    last_name: str
    department_id: Optional[int] = None
    employee_type: EmployeeType = EmployeeType.FULL_TIME
    salary_amount: float = 0.0
    email: Optional[str] = None
    position: Optional[str] = None
    hire_date: Optional[date] = None
