from __future__ import annotations

from datetime import time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Check-in after the late cutoff."""

    def decide_checkin(self, *, local_time: time, late_cutoff: time) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.LATE,
            note=f"Checked in at {local_time.strftime('%H:%M')} after cutoff {late_cutoff.strftime('%H:%M')}",
        )

    def decide_checkout(self, *, work_hours: float, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
