from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveTypeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import Rollback, build_where, db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import DecisionResult, LeaveBalance, LeaveRequest, LeaveType
from .repository import LeaveRepository

_REQUEST_COLUMNS = """
    request_id, employee_id, leave_type_id, start_date, end_date, requested_days,
    reason, leave_status, approved_by, decided_at, decision_notes, created_at
"""
_BALANCE_COLUMNS = "leave_balance_id, employee_id, leave_type_id, year, annual_quota, used_days, remaining_days"


def _row_to_type(r: dict) -> LeaveType:
    return LeaveType(
        leave_type_id=int(r["leave_type_id"]),
        leave_type_name=r["leave_type_name"],
        annual_quota=float(r["annual_quota"]),
        is_paid=bool(r["is_paid"]),
        status=LeaveTypeStatus(r["leave_type_status"]),
    )


def _row_to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        leave_balance_id=int(r["leave_balance_id"]),
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        year=int(r["year"]),
        annual_quota=float(r["annual_quota"]),
        used_days=float(r["used_days"]),
        remaining_days=float(r["remaining_days"]),
    )


def _row_to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type_id=int(r["leave_type_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        requested_days=int(r["requested_days"]),
        reason=r["reason"],
        status=LeaveStatus(r["leave_status"]),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        decided_at=from_db_datetime(r.get("decided_at")),
        decision_notes=r.get("decision_notes"),
        created_at=from_db_datetime(r.get("created_at")),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # Leave types

    def get_leave_type(self, leave_type_id: int) -> Optional[LeaveType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_type_id, leave_type_name, annual_quota, is_paid, leave_type_status
                FROM leave_types WHERE leave_type_id=%s
                """,
                (int(leave_type_id),),
            )
            r = fetchone(cur)
            return _row_to_type(r) if r else None

    def list_leave_types(self, *, active_only: bool = True) -> Sequence[LeaveType]:
        where = "leave_type_status='active'" if active_only else "1=1"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT leave_type_id, leave_type_name, annual_quota, is_paid, leave_type_status
                FROM leave_types WHERE {where} ORDER BY leave_type_name
                """
            )
            return [_row_to_type(r) for r in fetchall(cur)]

    # Balances

    def get_balance(self, employee_id: int, leave_type_id: int, year: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_BALANCE_COLUMNS} FROM leave_balances
                WHERE employee_id=%s AND leave_type_id=%s AND year=%s
                """,
                (int(employee_id), int(leave_type_id), int(year)),
            )
            r = fetchone(cur)
            return _row_to_balance(r) if r else None

    def get_or_create_balance(self, employee_id: int, leave_type_id: int, year: int, *, annual_quota: float) -> LeaveBalance:
        with db_cursor(self._conn_factory) as (_, cur):
            # The unique key makes concurrent initialisation a no-op for the loser.
            cur.execute(
                """
                INSERT IGNORE INTO leave_balances(employee_id, leave_type_id, year, annual_quota, used_days, remaining_days)
                VALUES(%s,%s,%s,%s,0,%s)
                """,
                (int(employee_id), int(leave_type_id), int(year), annual_quota, annual_quota),
            )
            cur.execute(
                f"""
                SELECT {_BALANCE_COLUMNS} FROM leave_balances
                WHERE employee_id=%s AND leave_type_id=%s AND year=%s
                """,
                (int(employee_id), int(leave_type_id), int(year)),
            )
            return _row_to_balance(fetchone(cur))

    def list_balances(self, *, employee_id: Optional[int] = None, year: Optional[int] = None) -> Sequence[LeaveBalance]:
        clauses: list[str] = []
        params: list[object] = []
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if year is not None:
            clauses.append("year=%s")
            params.append(int(year))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_BALANCE_COLUMNS} FROM leave_balances
                WHERE {build_where(clauses)}
                ORDER BY employee_id, leave_type_id
                """,
                tuple(params),
            )
            return [_row_to_balance(r) for r in fetchall(cur)]

    # Requests

    def find_overlapping(self, employee_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS} FROM leave_requests
                WHERE employee_id=%s
                  AND leave_status IN ('pending','approved')
                  AND start_date <= %s AND end_date >= %s
                """,
                (int(employee_id), end_date, start_date),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def create_request(
        self,
        *,
        employee_id: int,
        leave_type_id: int,
        start_date: date,
        end_date: date,
        requested_days: int,
        reason: str,
    ) -> LeaveRequest:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type_id, start_date, end_date, requested_days, reason, leave_status)
                VALUES(%s,%s,%s,%s,%s,%s,'pending')
                """,
                (int(employee_id), int(leave_type_id), start_date, end_date, int(requested_days), reason),
            )
            request_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM leave_requests WHERE request_id=%s", (request_id,))
            return _row_to_request(fetchone(cur))

    def get_request(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def list_requests(
        self,
        *,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        clauses: list[str] = []
        params: list[object] = []

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("leave_status=%s")
            params.append(status.value)
        if start_date is not None and end_date is not None:
            clauses.append("start_date <= %s AND end_date >= %s")
            params.extend([end_date, start_date])
        elif start_date is not None:
            clauses.append("start_date >= %s")
            params.append(start_date)
        elif end_date is not None:
            clauses.append("end_date <= %s")
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS} FROM leave_requests
                WHERE {build_where(clauses)}
                ORDER BY created_at DESC, request_id DESC
                """,
                tuple(params),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def approve(self, request: LeaveRequest, *, approver_id: int, decided_at: datetime) -> DecisionResult:
        result = DecisionResult.APPLIED
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET leave_status='approved', approved_by=%s, decided_at=%s
                WHERE request_id=%s AND leave_status='pending'
                """,
                (int(approver_id), to_db_datetime(decided_at), int(request.request_id)),
            )
            if cur.rowcount == 0:
                result = DecisionResult.STATE_CHANGED
                raise Rollback()

            cur.execute(
                """
                UPDATE leave_balances
                SET used_days = used_days + %s, remaining_days = remaining_days - %s
                WHERE employee_id=%s AND leave_type_id=%s AND year=%s AND remaining_days >= %s
                """,
                (
                    request.requested_days,
                    request.requested_days,
                    int(request.employee_id),
                    int(request.leave_type_id),
                    request.balance_year,
                    request.requested_days,
                ),
            )
            if cur.rowcount == 0:
                result = DecisionResult.INSUFFICIENT_BALANCE
                raise Rollback()
        return result

    def reject(self, request_id: int, *, approver_id: int, decided_at: datetime, notes: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET leave_status='rejected', approved_by=%s, decided_at=%s, decision_notes=%s
                WHERE request_id=%s AND leave_status='pending'
                """,
                (int(approver_id), to_db_datetime(decided_at), notes, int(request_id)),
            )
            return cur.rowcount > 0

    def cancel(self, request: LeaveRequest, *, expected: LeaveStatus) -> DecisionResult:
        result = DecisionResult.APPLIED
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests SET leave_status='cancelled'
                WHERE request_id=%s AND employee_id=%s AND leave_status=%s
                """,
                (int(request.request_id), int(request.employee_id), expected.value),
            )
            if cur.rowcount == 0:
                result = DecisionResult.STATE_CHANGED
                raise Rollback()

            if expected == LeaveStatus.APPROVED:
                cur.execute(
                    """
                    UPDATE leave_balances
                    SET used_days = used_days - %s, remaining_days = remaining_days + %s
                    WHERE employee_id=%s AND leave_type_id=%s AND year=%s
                    """,
                    (
                        request.requested_days,
                        request.requested_days,
                        int(request.employee_id),
                        int(request.leave_type_id),
                        request.balance_year,
                    ),
                )
        return result
