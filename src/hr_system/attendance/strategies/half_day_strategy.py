from __future__ import annotations

from datetime import time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Short working day: fewer hours than the half-day threshold."""

    def decide_checkin(self, *, local_time: time, late_cutoff: time) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.HALF_DAY)

    def decide_checkout(self, *, work_hours: float, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.HALF_DAY, note=f"Worked {work_hours:.2f}h")
