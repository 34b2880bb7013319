from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_HALF_DAY_HOURS, DEFAULT_LATE_CUTOFF, DEFAULT_ORG_TIMEZONE
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per employee per work date."""

    attendance_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    check_in_location: Optional[GeoPoint] = None
    check_out_location: Optional[GeoPoint] = None
    work_hours: Optional[float] = None
    notes: Optional[str] = None

    @property
    def is_checked_in(self) -> bool:
        return self.check_in_time is not None

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "employee_id": self.employee_id,
            "work_date": self.work_date.isoformat(),
            "check_in_time": self.check_in_time.isoformat() if self.check_in_time else None,
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else None,
            "check_in_location": _point_to_dict(self.check_in_location),
            "check_out_location": _point_to_dict(self.check_out_location),
            "work_hours": self.work_hours,
            "attendance_status": self.status.value,
            "notes": self.notes,
        }


def _point_to_dict(point: Optional[GeoPoint]) -> Optional[dict]:
    return {"lat": point.lat, "lng": point.lng} if point else None


@dataclass(frozen=True)
class AttendancePolicy:
    """Organization rules for classifying attendance.

    ``late_cutoff`` is a local time of day in ``timezone``; a check-in strictly
    after it is late.
    """

    timezone: ZoneInfo
    late_cutoff: time
    half_day_hours: float

    @classmethod
    def default(cls) -> "AttendancePolicy":
        h, m = (int(p) for p in DEFAULT_LATE_CUTOFF.split(":"))
        return cls(
            timezone=ZoneInfo(DEFAULT_ORG_TIMEZONE),
            late_cutoff=time(h, m),
            half_day_hours=float(DEFAULT_HALF_DAY_HOURS),
        )


@dataclass(frozen=True)
class AttendanceStatistics:
    total_records: int
    present_count: int
    late_count: int
    absent_count: int
    half_day_count: int
    total_work_hours: float
    average_work_hours: float
    attendance_rate: int


@dataclass(frozen=True)
class AttendanceReport:
    records: list[AttendanceRecord]
    statistics: AttendanceStatistics
