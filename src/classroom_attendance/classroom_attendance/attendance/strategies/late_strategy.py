from __future__ import annotations

import math
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...timing.model import ClassTiming
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late arrival; minutes are counted from class start, not from the cutoff."""

    def decide(self, *, arrival: Optional[datetime], timing: ClassTiming) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.LATE,
            arrival_time=arrival,
            late_minutes=late_minutes(arrival, timing) if arrival else 1,
        )


def late_minutes(arrival: datetime, timing: ClassTiming) -> int:
    """ceil((arrival - start) / 60s), never below 1."""
    seconds = (arrival - timing.start_at(arrival.date())).total_seconds()
    return max(1, math.ceil(seconds / 60))
