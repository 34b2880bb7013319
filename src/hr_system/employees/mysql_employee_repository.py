from __future__ import annotations

from typing import Iterable, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import DepartmentStatus, EmployeeStatus, EmployeeType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Department, Employee, NewEmployee
from .repository import DepartmentRepository, EmployeeRepository

_COLUMNS = """
    employee_id, employee_code, first_name, last_name, email, department_id,
    position, employee_type, employee_status, salary_amount, hire_date
"""

_DEPARTMENT_COLUMNS = "department_id, department_name, department_status"


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        employee_code=r["employee_code"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r.get("email"),
        department_id=int(r["department_id"]) if r.get("department_id") is not None else None,
        position=r.get("position"),
        employee_type=EmployeeType(r["employee_type"]),
        employee_status=EmployeeStatus(r["employee_status"]),
        salary_amount=float(r.get("salary_amount") or 0),
        hire_date=r.get("hire_date"),
    )


def _row_to_department(r: dict) -> Department:
    return Department(
        department_id=int(r["department_id"]),
        department_name=r["department_name"],
        department_status=DepartmentStatus(r["department_status"]),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s AND deleted_at IS NULL",
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def list_active(self, *, employee_ids: Optional[Iterable[int]] = None) -> Sequence[Employee]:
        clauses = ["employee_status=%s", "deleted_at IS NULL"]
        params: list[object] = [EmployeeStatus.ACTIVE.value]

        ids = [int(i) for i in employee_ids] if employee_ids is not None else None
        if ids is not None:
            if not ids:
                return []
            clauses.append(f"employee_id IN ({', '.join(['%s'] * len(ids))})")
            params.extend(ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE {' AND '.join(clauses)} ORDER BY employee_id",
                tuple(params),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE deleted_at IS NULL ORDER BY employee_id")
            return [_row_to_employee(r) for r in fetchall(cur)]

    def list_employees(
        self,
        *,
        search: Optional[str] = None,
        department_id: Optional[int] = None,
        status: Optional[EmployeeStatus] = None,
        employee_type: Optional[EmployeeType] = None,
    ) -> Sequence[Employee]:
        clauses = ["deleted_at IS NULL"]
        params: list[object] = []
        if search:
            clauses.append(
                "(employee_code LIKE %s OR first_name LIKE %s OR last_name LIKE %s OR email LIKE %s)"
            )
            params.extend([f"%{search}%"] * 4)
        if department_id is not None:
            clauses.append("department_id=%s")
            params.append(int(department_id))
        if status is not None:
            clauses.append("employee_status=%s")
            params.append(status.value)
        if employee_type is not None:
            clauses.append("employee_type=%s")
            params.append(employee_type.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE {build_where(clauses)} ORDER BY employee_id",
                tuple(params),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def create(self, employee: NewEmployee) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO employees(employee_code, first_name, last_name, email, department_id,
                                          position, employee_type, employee_status, salary_amount, hire_date)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,'active',%s,%s)
                    """,
                    (
                        employee.employee_code,
                        employee.first_name,
                        employee.last_name,
                        employee.email,
                        employee.department_id,
                        employee.position,
                        employee.employee_type.value,
                        employee.salary_amount,
                        employee.hire_date,
                    ),
                )
            except IntegrityError as err:
                if is_duplicate_key(err):
                    return None
                raise
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(cur.lastrowid),))
            return _row_to_employee(fetchone(cur))

    def update(self, employee: Employee) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    UPDATE employees
                    SET employee_code=%s, first_name=%s, last_name=%s, email=%s, department_id=%s,
                        position=%s, employee_type=%s, employee_status=%s, salary_amount=%s, hire_date=%s
                    WHERE employee_id=%s AND deleted_at IS NULL
                    """,
                    (
                        employee.employee_code,
                        employee.first_name,
                        employee.last_name,
                        employee.email,
                        employee.department_id,
                        employee.position,
                        employee.employee_type.value,
                        employee.employee_status.value,
                        employee.salary_amount,
                        employee.hire_date,
                        int(employee.employee_id),
                    ),
                )
            except IntegrityError as err:
                if is_duplicate_key(err):
                    return False
                raise
            return cur.rowcount > 0

    def soft_delete(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET deleted_at=UTC_TIMESTAMP(), employee_status='terminated'
                WHERE employee_id=%s AND deleted_at IS NULL
                """,
                (int(employee_id),),
            )
            return cur.rowcount > 0


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_DEPARTMENT_COLUMNS} FROM departments WHERE department_id=%s",
                (int(department_id),),
            )
            r = fetchone(cur)
            return _row_to_department(r) if r else None

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_DEPARTMENT_COLUMNS} FROM departments ORDER BY department_name")
            return [_row_to_department(r) for r in fetchall(cur)]

    def create(self, department_name: str) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    "INSERT INTO departments(department_name, department_status) VALUES(%s, 'active')",
                    (department_name,),
                )
            except IntegrityError as err:
                if is_duplicate_key(err):
                    return None
                raise
            return Department(department_id=int(cur.lastrowid), department_name=department_name)

    def update(self, department: Department) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    "UPDATE departments SET department_name=%s, department_status=%s WHERE department_id=%s",
                    (department.department_name, department.department_status.value, int(department.department_id)),
                )
            except IntegrityError as err:
                if is_duplicate_key(err):
                    return False
                raise
            return cur.rowcount > 0
