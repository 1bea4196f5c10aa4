from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Mapping, Optional

from ..common.datetime_utils import parse_clock_time, parse_iso_date
from ..core.constants import DEFAULT_CLASS_START, DEFAULT_LATE_CUTOFF_MINUTES
from ..core.exceptions import ValidationError
from ..members.model import Cohort
from .model import ClassTiming

# (class_id, subject_id) or (class_id, subject_id, date)
TimingKey = tuple


class ClassTimingPolicy:
    """Supplies the fixed start time and late cutoff for a cohort on a date.

    Pure function of configuration. Lookup order: date-specific override,
    cohort override, default.
    """

    def __init__(self, default: ClassTiming, overrides: Optional[Mapping[TimingKey, ClassTiming]] = None):
        self._default = default
        self._overrides = dict(overrides or {})

    @classmethod
    def from_settings(
        cls,
        *,
        start: str = DEFAULT_CLASS_START,
        cutoff_minutes: int = DEFAULT_LATE_CUTOFF_MINUTES,
        overrides: Optional[Mapping[str, Mapping[str, object]]] = None,
    ) -> "ClassTimingPolicy":
        """Build from settings values.

        ``overrides`` maps "class_id:subject_id" or "class_id:subject_id:YYYY-MM-DD"
        to {"start": "HH:MM", "cutoff_minutes": int}.
        """

        default = build_timing(start, int(cutoff_minutes))
        parsed: dict[TimingKey, ClassTiming] = {}
        for raw_key, values in (overrides or {}).items():
            parts = str(raw_key).split(":", 2)
            if len(parts) < 2:
                raise ValidationError(f"Timing override key must be class_id:subject_id, got {raw_key!r}")
            timing = build_timing(str(values.get("start", start)), int(values.get("cutoff_minutes", cutoff_minutes)))
            if len(parts) == 3:
                parsed[(parts[0], parts[1], parse_iso_date(parts[2]))] = timing
            else:
                parsed[(parts[0], parts[1])] = timing
        return cls(default, parsed)

    @property
    def default(self) -> ClassTiming:
        return self._default

    def timing_for(self, cohort: Cohort, on: date) -> ClassTiming:
        dated = self._overrides.get((cohort.class_id, cohort.subject_id, on))
        if dated:
            return dated
        return self._overrides.get((cohort.class_id, cohort.subject_id)) or self._default


def build_timing(start: str, cutoff_minutes: int) -> ClassTiming:
    """Start "HH:MM" plus a grace period in minutes; cutoff is capped at 23:59:59."""
    if cutoff_minutes < 0:
        raise ValidationError("Late cutoff minutes cannot be negative")

    start_t = parse_clock_time(start)
    anchor = date(2000, 1, 1)
    cutoff_dt = datetime.combine(anchor, start_t) + timedelta(minutes=cutoff_minutes)
    cutoff_t = cutoff_dt.time() if cutoff_dt.date() == anchor else time(23, 59, 59)
    return ClassTiming(start_time=start_t, cutoff_time=cutoff_t)
