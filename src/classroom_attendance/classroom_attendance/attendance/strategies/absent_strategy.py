from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...timing.model import ClassTiming
from .base import AttendanceStrategy, StatusDecision


class AbsentStrategy(AttendanceStrategy):
    """Explicit absence: no arrival time, no lateness."""

    def decide(self, *, arrival: Optional[datetime], timing: ClassTiming) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ABSENT)
