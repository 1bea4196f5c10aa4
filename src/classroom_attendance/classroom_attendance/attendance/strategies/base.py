from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from ...timing.model import ClassTiming


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    arrival_time: Optional[datetime] = None
    late_minutes: Optional[int] = None


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a final attendance status."""

    @abstractmethod
    def decide(self, *, arrival: Optional[datetime], timing: ClassTiming) -> StatusDecision:
        raise NotImplementedError
