from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...timing.model import ClassTiming
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """Arrived on or before the cutoff."""

    def decide(self, *, arrival: Optional[datetime], timing: ClassTiming) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT, arrival_time=arrival)
