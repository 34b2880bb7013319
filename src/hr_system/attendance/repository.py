from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, GeoPoint


class AttendanceRepository(Protocol):
    """Attendance persistence.

    Writes are keyed by ``(employee_id, work_date)`` and must be atomic:
    implementations enforce uniqueness and apply each transition with a
    conditional write, reporting ``False`` when the condition does not hold.
    """

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

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
        """Insert the record, or fill a record that has no check-in yet.

        Returns False if the record already has a check-in time.
        """

        raise NotImplementedError

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
        """Returns False unless the record is checked in and not yet checked out."""

        raise NotImplementedError

    def create_absence(self, *, employee_id: int, work_date: date) -> bool:
        """Insert an absent record only if none exists."""

        raise NotImplementedError

    def list_records(
        self,
        *,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest work date first."""

        raise NotImplementedError
