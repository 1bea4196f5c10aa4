from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class ClassTiming:
    """Scheduled start and late cutoff of one class meeting."""

    start_time: time
    cutoff_time: time

    def __post_init__(self) -> None:
        if self.cutoff_time < self.start_time:
            raise ValidationError("Late cutoff cannot be earlier than class start")

    def start_at(self, day: date) -> datetime:
        return datetime.combine(day, self.start_time)

    def cutoff_at(self, day: date) -> datetime:
        return datetime.combine(day, self.cutoff_time)
