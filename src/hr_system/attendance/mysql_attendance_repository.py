from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_where, db_cursor, fetchall, fetchone, from_db_datetime, is_duplicate_key, to_db_datetime
from .model import AttendanceRecord, GeoPoint
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, employee_id, work_date, check_in_time, check_out_time,
    check_in_lat, check_in_lng, check_out_lat, check_out_lng,
    work_hours, status, notes
"""


def _point(lat, lng) -> Optional[GeoPoint]:
    if lat is None or lng is None:
        return None
    return GeoPoint(lat=float(lat), lng=float(lng))


def _coords(location: Optional[GeoPoint]) -> tuple:
    return (location.lat, location.lng) if location else (None, None)


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=from_db_datetime(r.get("check_in_time")),
        check_out_time=from_db_datetime(r.get("check_out_time")),
        check_in_location=_point(r.get("check_in_lat"), r.get("check_in_lng")),
        check_out_location=_point(r.get("check_out_lat"), r.get("check_out_lng")),
        work_hours=float(r["work_hours"]) if r.get("work_hours") is not None else None,
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def record_check_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        location: Optional[GeoPoint] = None,
        notes: Optional[str] = None,
    ) -> bool:
        lat, lng = _coords(location)
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance_records(employee_id, work_date, check_in_time, check_in_lat, check_in_lng, status, notes)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), work_date, to_db_datetime(check_in_time), lat, lng, status.value, notes),
                )
                return True
            except IntegrityError as err:
                if not is_duplicate_key(err):
                    raise

            # A record exists for the day: only an absent, time-less one may take the check-in.
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_in_lat=%s, check_in_lng=%s, status=%s, notes=%s
                WHERE employee_id=%s AND work_date=%s AND check_in_time IS NULL
                """,
                (to_db_datetime(check_in_time), lat, lng, status.value, notes, int(employee_id), work_date),
            )
            return cur.rowcount > 0

    def record_check_out(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_out_time: datetime,
        work_hours: float,
        status: AttendanceStatus,
        location: Optional[GeoPoint] = None,
        notes: Optional[str] = None,
    ) -> bool:
        lat, lng = _coords(location)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_lat=%s, check_out_lng=%s, work_hours=%s, status=%s, notes=%s
                WHERE employee_id=%s AND work_date=%s
                  AND check_in_time IS NOT NULL AND check_out_time IS NULL
                """,
                (to_db_datetime(check_out_time), lat, lng, work_hours, status.value, notes, int(employee_id), work_date),
            )
            return cur.rowcount > 0

    def create_absence(self, *, employee_id: int, work_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO attendance_records(employee_id, work_date, status, notes)
                VALUES(%s,%s,%s,%s)
                """,
                (int(employee_id), work_date, AttendanceStatus.ABSENT.value, "Auto-marked absent"),
            )
            return cur.rowcount > 0

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if start_date is not None:
            clauses.append("work_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("work_date <= %s")
            params.append(end_date)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        limit_sql = ""
        if limit is not None:
            limit_sql = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE {build_where(clauses)}
                ORDER BY work_date DESC, employee_id ASC
                {limit_sql}
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]
