from __future__ import annotations

from datetime import time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """On-time check-in; check-out keeps whatever status check-in decided."""

    def decide_checkin(self, *, local_time: time, late_cutoff: time) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, work_hours: float, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
