from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..members.model import Cohort
from ..notifications.model import NotificationSummary


@dataclass(frozen=True)
class DraftEntry:
    """One uncommitted mark in an operator's session.

    ``requested`` and ``supplied`` keep what the operator entered so the
    lateness rule can be re-run against the timing of the commit date.
    """

    member_id: str
    status: AttendanceStatus
    arrival_time: Optional[datetime]
    late_minutes: Optional[int] = None
    requested: Optional[AttendanceStatus] = None
    supplied: bool = False


@dataclass
class AttendanceDraft:
    """In-memory marks for one (cohort, date); never visible to readers."""

    cohort: Cohort
    on: date
    entries: dict[str, DraftEntry] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def is_empty(self) -> bool:
        return not self.entries


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: committed attendance of one member for one cohort and date."""

    member_id: str
    class_id: str
    subject_id: str
    attendance_date: date
    status: AttendanceStatus
    arrival_time: Optional[datetime]
    late_minutes: Optional[int]
    recorded_by: str
    committed_at: datetime

    def __post_init__(self) -> None:
        if self.status == AttendanceStatus.LATE:
            if self.late_minutes is None or self.late_minutes < 1:
                raise ValidationError("Late records need late_minutes >= 1")
        elif self.late_minutes is not None:
            raise ValidationError("late_minutes is only allowed on late records")

    @property
    def key(self) -> tuple:
        return (self.member_id, self.class_id, self.subject_id, self.attendance_date)


@dataclass(frozen=True)
class AttendanceFilter:
    """Immutable filter request for reading committed records.

    ``subject_id=None`` reads every subject of the class; ``member_id`` narrows
    to a single-member view. Date bounds are inclusive.
    """

    class_id: str
    subject_id: Optional[str] = None
    member_id: Optional[str] = None
    start: Optional[date] = None
    end: Optional[date] = None
    status: Optional[AttendanceStatus] = None

    def __post_init__(self) -> None:
        if self.start and self.end and self.start > self.end:
            raise ValidationError("Start date must not be after end date")

    @property
    def cohort(self) -> Cohort:
        return Cohort(class_id=self.class_id, subject_id=self.subject_id)

    def matches(self, record: AttendanceRecord) -> bool:
        if record.class_id != self.class_id:
            return False
        if self.subject_id is not None and record.subject_id != self.subject_id:
            return False
        if self.member_id is not None and record.member_id != self.member_id:
            return False
        if self.start and record.attendance_date < self.start:
            return False
        if self.end and record.attendance_date > self.end:
            return False
        if self.status is not None and record.status != self.status:
            return False
        return True


@dataclass(frozen=True)
class AttendanceSummary:
    total: int
    present: int
    late: int
    absent: int
    rate: int


@dataclass(frozen=True)
class AttendanceSession:
    """Per-date counts of one cohort's committed records."""

    attendance_date: date
    total: int
    present: int
    late: int
    absent: int
    committed_at: datetime


@dataclass(frozen=True)
class QueryResult:
    """Records plus a separately surfaced store error (never folded into "no records")."""

    records: tuple[AttendanceRecord, ...]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class CommitResult:
    committed_count: int
    records: tuple[AttendanceRecord, ...]
    notifications: NotificationSummary = NotificationSummary()
