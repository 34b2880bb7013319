from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import time
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: decides the attendance status for a transition."""

    @abstractmethod
    def decide_checkin(self, *, local_time: time, late_cutoff: time) -> StatusDecision:
        raise NotImplementedError

    @abstractmethod
    def decide_checkout(self, *, work_hours: float, current: AttendanceStatus) -> StatusDecision:
        raise NotImplementedError
