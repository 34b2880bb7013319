from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from ..core.enums import DepartmentStatus, EmployeeStatus, EmployeeType


class EmployeeCreateIn(BaseModel):
    employee_code: str = Field(min_length=1, max_length=30)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    department_id: Optional[int] = None
    position: Optional[str] = Field(default=None, max_length=100)
    employee_type: EmployeeType = EmployeeType.FULL_TIME
    salary_amount: float = Field(default=0, ge=0)
    hire_date: Optional[date] = None


class EmployeeUpdateIn(BaseModel):
    employee_code: Optional[str] = Field(default=None, min_length=1, max_length=30)
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    department_id: Optional[int] = None
    position: Optional[str] = Field(default=None, max_length=100)
    employee_type: Optional[EmployeeType] = None
    employee_status: Optional[EmployeeStatus] = None
    salary_amount: Optional[float] = Field(default=None, ge=0)
    hire_date: Optional[date] = None


class EmployeeQuery(BaseModel):
    search: Optional[str] = Field(default=None, max_length=100)
    department_id: Optional[int] = None
    employee_status: Optional[EmployeeStatus] = None
    employee_type: Optional[EmployeeType] = None


class DepartmentIn(BaseModel):
    department_name: str = Field(min_length=1, max_length=100)


class DepartmentUpdateIn(BaseModel):
    department_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    department_status: Optional[DepartmentStatus] = None


class DepartmentQuery(BaseModel):
    include_inactive: bool = False
