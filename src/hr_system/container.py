from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.model import AttendancePolicy
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import get_zone, parse_clock_time
from .core.constants import DEFAULT_HALF_DAY_HOURS, DEFAULT_LATE_CUTOFF, DEFAULT_ORG_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLDepartmentRepository, MySQLEmployeeRepository
from .employees.repository import DepartmentRepository, EmployeeRepository
from .employees.service import EmployeeService
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .reports.service import ReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    employees_repo: EmployeeRepository
    departments_repo: DepartmentRepository
    attendance_repo: AttendanceRepository
    leave_repo: LeaveRepository
    payroll_repo: PayrollRepository

    auth_service: AuthService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService
    report_service: ReportService


def build_policy(
    *,
    org_timezone: str = DEFAULT_ORG_TIMEZONE,
    late_cutoff: str = DEFAULT_LATE_CUTOFF,
    half_day_hours: float = DEFAULT_HALF_DAY_HOURS,
) -> AttendancePolicy:
    return AttendancePolicy(
        timezone=get_zone(org_timezone),
        late_cutoff=parse_clock_time(late_cutoff),
        half_day_hours=float(half_day_hours),
    )


def wire(
    *,
    users_repo: UserRepository,
    employees_repo: EmployeeRepository,
    departments_repo: DepartmentRepository,
    attendance_repo: AttendanceRepository,
    leave_repo: LeaveRepository,
    payroll_repo: PayrollRepository,
    policy: AttendancePolicy,
) -> Container:
    """Build the services over any set of repositories."""
    return Container(
        users_repo=users_repo,
        employees_repo=employees_repo,
        departments_repo=departments_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        payroll_repo=payroll_repo,
        auth_service=AuthService(users_repo),
        employee_service=EmployeeService(employees_repo, departments_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            employees_repo,
            policy=policy,
            strategy_factory=AttendanceStrategyFactory(),
        ),
        leave_service=LeaveService(leave_repo, employees_repo, tz=policy.timezone),
        payroll_service=PayrollService(payroll_repo, employees_repo, calculator=StandardPayrollCalculator()),
        report_service=ReportService(employees_repo, departments_repo, attendance_repo, leave_repo, payroll_repo),
    )


def build_container(
    *,
    db_config: dict,
    org_timezone: str = DEFAULT_ORG_TIMEZONE,
    late_cutoff: str = DEFAULT_LATE_CUTOFF,
    half_day_hours: float = DEFAULT_HALF_DAY_HOURS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        users_repo=MySQLUserRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        policy=build_policy(org_timezone=org_timezone, late_cutoff=late_cutoff, half_day_hours=half_day_hours),
    )
