from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from ..core.enums import AttendanceStatus
from .model import GeoPoint


class LocationIn(BaseModel):
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    def to_point(self) -> Optional[GeoPoint]:
        if self.latitude is None or self.longitude is None:
            return None
        return GeoPoint(lat=self.latitude, lng=self.longitude)


class CheckInIn(LocationIn):
    pass


class CheckOutIn(LocationIn):
    # Defaults to today's work date; pass the check-in day to close an overnight shift.
    work_date: Optional[date] = None


class MarkAbsencesIn(BaseModel):
    work_date: Optional[date] = None


class AttendanceQuery(BaseModel):
    employee_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[AttendanceStatus] = None
    limit: int = Field(default=200, ge=1, le=1000)


class AttendanceReportQuery(BaseModel):
    start_date: date
    end_date: date
    employee_id: Optional[int] = None
