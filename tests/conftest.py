from __future__ import annotations

from datetime import time

import pytest
from werkzeug.security import generate_password_hash

from hr_system.attendance.model import AttendancePolicy
from hr_system.container import wire
from hr_system.core.enums import EmployeeStatus, EmployeeType, LeaveTypeStatus, Role
from hr_system.employees.model import Department, Employee
from hr_system.leave.model import LeaveType
from hr_system.users.model import UserAccount

from fakes import (
    ANNUAL,
    PHNOM_PENH,
    SICK,
    UNPAID_OLD,
    InMemoryAttendance,
    InMemoryDepartments,
    InMemoryEmployees,
    InMemoryLeave,
    InMemoryPayrolls,
    InMemoryUsers,
)


@pytest.fixture
def policy() -> AttendancePolicy:
    return AttendancePolicy(timezone=PHNOM_PENH, late_cutoff=time(8, 15), half_day_hours=4.0)


@pytest.fixture
def employees() -> InMemoryEmployees:
    repo = InMemoryEmployees()
    repo.add(Employee(1, "E001", "Sok", "Dara", department_id=10, salary_amount=1200.0))
    repo.add(Employee(2, "E002", "Chan", "Vanna", department_id=10, employee_type=EmployeeType.PART_TIME, salary_amount=800.0))
    repo.add(Employee(3, "E003", "Lim", "Sophea", department_id=20, salary_amount=1500.0))
    repo.add(Employee(4, "E004", "Keo", "Rith", department_id=20, employee_status=EmployeeStatus.TERMINATED))
    return repo


@pytest.fixture
def departments() -> InMemoryDepartments:
    return InMemoryDepartments([Department(10, "Engineering"), Department(20, "Finance")])


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def leave_repo() -> InMemoryLeave:
    return InMemoryLeave(
        [
            LeaveType(ANNUAL, "Annual", annual_quota=18),
            LeaveType(SICK, "Sick", annual_quota=7),
            LeaveType(UNPAID_OLD, "Unpaid (old)", annual_quota=0, is_paid=False, status=LeaveTypeStatus.INACTIVE),
        ]
    )


@pytest.fixture
def payroll_repo() -> InMemoryPayrolls:
    return InMemoryPayrolls()


@pytest.fixture
def users() -> InMemoryUsers:
    password_hash = generate_password_hash("secret")
    return InMemoryUsers(
        {
            1: UserAccount(1, "dara", password_hash, Role.EMPLOYEE, employee_id=1),
            2: UserAccount(2, "vanna", password_hash, Role.EMPLOYEE, employee_id=2),
            3: UserAccount(3, "sophea", password_hash, Role.MANAGER, employee_id=3),
            4: UserAccount(4, "admin", password_hash, Role.ADMIN, employee_id=None),
            5: UserAccount(5, "gone", password_hash, Role.EMPLOYEE, employee_id=4, is_active=False),
            6: UserAccount(6, "fresh", password_hash, Role.EMPLOYEE, employee_id=None),
        }
    )


@pytest.fixture
def container(users, employees, departments, attendance_repo, leave_repo, payroll_repo, policy):
    return wire(
        users_repo=users,
        employees_repo=employees,
        departments_repo=departments,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        payroll_repo=payroll_repo,
        policy=policy,
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from hr_system.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(username: str, password: str = "secret"):
        resp = client.post("/api/auth/login", json={"username": username, "password": password})
        assert resp.status_code == 200, resp.get_json()
        return resp

    return _login
