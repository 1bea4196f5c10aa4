from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..timing.model import ClassTiming
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import AttendanceStrategy, StatusDecision
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_mark(
        self,
        *,
        requested: AttendanceStatus,
        arrival: Optional[datetime],
        supplied: bool,
        timing: ClassTiming,
    ) -> AttendanceStrategy:
        if requested == AttendanceStatus.ABSENT:
            return AbsentStrategy()
        if requested == AttendanceStatus.LATE:
            return LateStrategy()

        # A requested "present" is advisory: an explicit arrival after the cutoff upgrades it.
        if supplied and arrival is not None and arrival > timing.cutoff_at(arrival.date()):
            return LateStrategy()
        return PresentStrategy()

    def decide(
        self,
        *,
        requested: AttendanceStatus,
        arrival: Optional[datetime],
        supplied: bool,
        timing: ClassTiming,
    ) -> StatusDecision:
        strategy = self.for_mark(requested=requested, arrival=arrival, supplied=supplied, timing=timing)
        return strategy.decide(arrival=arrival, timing=timing)
