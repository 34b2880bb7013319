from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, local_time: time, late_cutoff: time) -> AttendanceStrategy:
        if local_time > late_cutoff:
            return LateStrategy()
        return PresentStrategy()

    def for_checkout(self, *, work_hours: float, half_day_hours: float) -> AttendanceStrategy:
        if work_hours < half_day_hours:
            return HalfDayStrategy()
        return PresentStrategy()
