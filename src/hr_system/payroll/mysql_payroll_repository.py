from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, from_db_datetime, is_duplicate_key
from .model import Payroll, SalaryComponents
from .repository import PayrollRepository

_COLUMNS = """
    payroll_id, employee_id, payroll_month, base_salary, allowances, bonuses,
    deductions, overtime_pay, net_salary, payment_date, payroll_status, created_at
"""


def _row_to_payroll(r: dict) -> Payroll:
    return Payroll(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        payroll_month=r["payroll_month"],
        base_salary=float(r["base_salary"]),
        allowances=float(r["allowances"]),
        bonuses=float(r["bonuses"]),
        deductions=float(r["deductions"]),
        overtime_pay=float(r["overtime_pay"]),
        net_salary=float(r["net_salary"]),
        payment_date=r.get("payment_date"),
        status=PayrollStatus(r["payroll_status"]),
        created_at=from_db_datetime(r.get("created_at")),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        payroll_month: str,
        components: SalaryComponents,
        net_salary: float,
    ) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO payrolls(employee_id, payroll_month, base_salary, allowances, bonuses,
                                         deductions, overtime_pay, net_salary, payroll_status)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,'draft')
                    """,
                    (
                        int(employee_id),
                        payroll_month,
                        components.base_salary,
                        components.allowances,
                        components.bonuses,
                        components.deductions,
                        components.overtime_pay,
                        net_salary,
                    ),
                )
            except IntegrityError as err:
                if is_duplicate_key(err):
                    return None
                raise
            cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE payroll_id=%s", (int(cur.lastrowid),))
            return _row_to_payroll(fetchone(cur))

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _row_to_payroll(r) if r else None

    def get_for_employee_and_month(self, employee_id: int, payroll_month: str) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payrolls WHERE employee_id=%s AND payroll_month=%s",
                (int(employee_id), payroll_month),
            )
            r = fetchone(cur)
            return _row_to_payroll(r) if r else None

    def list_payrolls(
        self,
        *,
        employee_id: Optional[int] = None,
        payroll_month: Optional[str] = None,
        status: Optional[PayrollStatus] = None,
    ) -> Sequence[Payroll]:
        clauses: list[str] = []
        params: list[object] = []
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if payroll_month is not None:
            clauses.append("payroll_month=%s")
            params.append(payroll_month)
        if status is not None:
            clauses.append("payroll_status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM payrolls
                WHERE {build_where(clauses)}
                ORDER BY payroll_month DESC, employee_id ASC
                """,
                tuple(params),
            )
            return [_row_to_payroll(r) for r in fetchall(cur)]

    def update(
        self,
        payroll_id: int,
        *,
        components: SalaryComponents,
        net_salary: float,
        payment_date: Optional[date],
        status: PayrollStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payrolls
                SET base_salary=%s, allowances=%s, bonuses=%s, deductions=%s, overtime_pay=%s,
                    net_salary=%s, payment_date=%s, payroll_status=%s
                WHERE payroll_id=%s AND payroll_status <> 'paid'
                """,
                (
                    components.base_salary,
                    components.allowances,
                    components.bonuses,
                    components.deductions,
                    components.overtime_pay,
                    net_salary,
                    payment_date,
                    status.value,
                    int(payroll_id),
                ),
            )
            return cur.rowcount > 0

    def delete_draft(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM payrolls WHERE payroll_id=%s AND payroll_status='draft'",
                (int(payroll_id),),
            )
            return cur.rowcount > 0
