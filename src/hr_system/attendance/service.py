from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import ensure_aware, hours_between, local_time_of, work_date_of
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    DuplicateCheckInError,
    DuplicateCheckOutError,
    InvalidOrderError,
    NoCheckInError,
    NotFoundError,
    ValidationError,
)
from ..employees.repository import EmployeeRepository
from .factory import AttendanceStrategyFactory
from .model import AttendancePolicy, AttendanceRecord, AttendanceReport, AttendanceStatistics, GeoPoint
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_ATTENDED = (AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.HALF_DAY)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        policy: AttendancePolicy | None = None,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._policy = policy or AttendancePolicy.default()
        self._factory = strategy_factory or AttendanceStrategyFactory()

    @property
    def policy(self) -> AttendancePolicy:
        return self._policy

    def get_work_date(self, timestamp: datetime) -> date:
        return work_date_of(timestamp, self._policy.timezone)

    def check_in(
        self,
        employee_id: int,
        timestamp: datetime,
        *,
        location: GeoPoint | None = None,
    ) -> AttendanceRecord:
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        timestamp = ensure_aware(timestamp)
        work_date = self.get_work_date(timestamp)

        existing = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if existing and existing.is_checked_in:
            logger.warning("Duplicate check-in for employee %s on %s", employee_id, work_date)
            raise DuplicateCheckInError("Already checked in today")

        local_time = local_time_of(timestamp, self._policy.timezone)
        strategy = self._factory.for_checkin(local_time=local_time, late_cutoff=self._policy.late_cutoff)
        decision = strategy.decide_checkin(local_time=local_time, late_cutoff=self._policy.late_cutoff)

        created = self._attendance.record_check_in(
            employee_id=employee_id,
            work_date=work_date,
            check_in_time=timestamp,
            status=decision.status,
            location=location,
            notes=decision.note,
        )
        if not created:
            # Another check-in for the same day won the race.
            logger.warning("Concurrent check-in lost for employee %s on %s", employee_id, work_date)
            raise DuplicateCheckInError("Already checked in today")

        logger.info("Employee %s checked in on %s as %s", employee_id, work_date, decision.status.value)
        return self._require_record(employee_id, work_date)

    def check_out(
        self,
        employee_id: int,
        work_date: date,
        timestamp: datetime,
        *,
        location: GeoPoint | None = None,
    ) -> AttendanceRecord:
        """Complete the record of ``work_date``.

        ``work_date`` comes from the caller: a shift that crosses midnight is
        still closed on the day it started.
        """
        timestamp = ensure_aware(timestamp)

        record = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if not record or not record.is_checked_in:
            raise NoCheckInError("Please check in first")
        if record.is_checked_out:
            raise DuplicateCheckOutError("Already checked out today")
        if timestamp <= record.check_in_time:
            raise InvalidOrderError("Check-out time must be after check-in time")

        work_hours = hours_between(record.check_in_time, timestamp)
        strategy = self._factory.for_checkout(work_hours=work_hours, half_day_hours=self._policy.half_day_hours)
        decision = strategy.decide_checkout(work_hours=work_hours, current=record.status)

        updated = self._attendance.record_check_out(
            employee_id=employee_id,
            work_date=work_date,
            check_out_time=timestamp,
            work_hours=work_hours,
            status=decision.status,
            location=location,
            notes=decision.note or record.notes,
        )
        if not updated:
            logger.warning("Concurrent check-out lost for employee %s on %s", employee_id, work_date)
            raise DuplicateCheckOutError("Already checked out today")

        logger.info(
            "Employee %s checked out on %s after %.2fh as %s",
            employee_id,
            work_date,
            work_hours,
            decision.status.value,
        )
        return self._require_record(employee_id, work_date)

    def mark_absences(self, work_date: date) -> int:
        created = 0
        for employee in self._employees.list_active():
            if self._attendance.create_absence(employee_id=employee.employee_id, work_date=work_date):
                created += 1
        logger.info("Marked %d employee(s) absent on %s", created, work_date)
        return created

    def get_record(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(employee_id, work_date)

    def list_records(
        self,
        *,
        employee_id: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        status: AttendanceStatus | None = None,
        limit: int | None = DEFAULT_LIST_LIMIT,
    ) -> Sequence[AttendanceRecord]:
        if start_date and end_date and start_date > end_date:
            raise ValidationError("start_date must be on or before end_date")
        return self._attendance.list_records(
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            status=status,
            limit=limit,
        )

    def build_report(
        self,
        start_date: date,
        end_date: date,
        *,
        employee_id: int | None = None,
    ) -> AttendanceReport:
        records = list(
            self.list_records(employee_id=employee_id, start_date=start_date, end_date=end_date, limit=None)
        )
        return AttendanceReport(records=records, statistics=compute_statistics(records))

    def _require_record(self, employee_id: int, work_date: date) -> AttendanceRecord:
        record = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if record is None:
            raise NotFoundError("Attendance record not found")
        return record


def compute_statistics(records: Sequence[AttendanceRecord]) -> AttendanceStatistics:
    total = len(records)
    counts = {status: 0 for status in AttendanceStatus}
    for r in records:
        counts[r.status] += 1

    total_hours = round(sum(r.work_hours or 0.0 for r in records), 2)
    attended = sum(counts[s] for s in _ATTENDED)
    return AttendanceStatistics(
        total_records=total,
        present_count=counts[AttendanceStatus.PRESENT],
        late_count=counts[AttendanceStatus.LATE],
        absent_count=counts[AttendanceStatus.ABSENT],
        half_day_count=counts[AttendanceStatus.HALF_DAY],
        total_work_hours=total_hours,
        average_work_hours=round(total_hours / total, 2) if total else 0.0,
        attendance_rate=round(attended / total * 100) if total else 0,
    )
