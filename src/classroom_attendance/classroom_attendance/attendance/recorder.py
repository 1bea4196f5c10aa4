from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFound, ValidationError
from ..members.model import Cohort, Member, roll_order_key
from ..notifications.model import NotificationSummary
from ..notifications.notifier import Notifier
from ..notifications.service import notify_affected
from ..timing.model import ClassTiming
from ..timing.policy import ClassTimingPolicy
from .factory import AttendanceStrategyFactory
from .model import AttendanceDraft, AttendanceFilter, AttendanceRecord, CommitResult, DraftEntry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceRecorder:
    """Holds one operator's draft for a (cohort, date) and commits it.

    Draft marks are invisible to readers until ``commit`` returns. The draft is
    cleared only after the store accepted every record, so a failed commit can
    be retried without re-entering marks.
    """

    def __init__(
        self,
        *,
        cohort: Cohort,
        recorder_id: str,
        roster: Sequence[Member],
        attendance: AttendanceRepository,
        policy: ClassTimingPolicy,
        notifier: Optional[Notifier] = None,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        clock: Callable[[], datetime] = now_local,
        on: Optional[date] = None,
    ):
        if cohort.subject_id is None:
            raise ValidationError("Select a subject before marking attendance")

        self._cohort = cohort
        self._recorder_id = recorder_id
        self._roster = {m.member_id: m for m in roster}
        self._attendance = attendance
        self._policy = policy
        self._notifier = notifier
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock
        self._draft = AttendanceDraft(cohort=cohort, on=on or clock().date())

    @property
    def cohort(self) -> Cohort:
        return self._cohort

    @property
    def recorder_id(self) -> str:
        return self._recorder_id

    @property
    def draft(self) -> AttendanceDraft:
        return self._draft

    @property
    def roster(self) -> list[Member]:
        return sorted(self._roster.values(), key=roll_order_key)

    def mark(self, member_id: str, status: AttendanceStatus, arrival_time: Optional[datetime] = None) -> DraftEntry:
        """Insert or overwrite a draft entry.

        A ``present`` mark with an explicit arrival time is re-evaluated against
        the cutoff and may become ``late``. Without an arrival time the mark is
        stamped with the current time and kept as requested.
        """

        if member_id not in self._roster:
            raise NotFound(f"Member {member_id!r} is not enrolled in this class/subject")

        status = AttendanceStatus(status)
        supplied = arrival_time is not None
        arrival = arrival_time if supplied else self._clock()
        if supplied and arrival.date() != self._draft.on:
            arrival = datetime.combine(self._draft.on, arrival.time())

        timing = self._policy.timing_for(self._cohort, self._draft.on)
        decision = self._factory.decide(requested=status, arrival=arrival, supplied=supplied, timing=timing)

        entry = DraftEntry(
            member_id=member_id,
            status=decision.status,
            arrival_time=decision.arrival_time,
            late_minutes=decision.late_minutes,
            requested=status,
            supplied=supplied,
        )
        self._draft.entries[member_id] = entry
        return entry

    def clear(self) -> None:
        self._draft.entries.clear()

    def is_drafted(self, member_id: str) -> bool:
        return member_id in self._draft.entries

    def draft_entry(self, member_id: str) -> Optional[DraftEntry]:
        return self._draft.entries.get(member_id)

    def load_committed(self, on: date) -> dict[str, AttendanceRecord]:
        """Committed records of this cohort for one date, read from the store."""
        records = self._attendance.find(
            AttendanceFilter(class_id=self._cohort.class_id, subject_id=self._cohort.subject_id, start=on, end=on)
        )
        return {r.member_id: r for r in records}

    def is_marked(self, member_id: str, on: date) -> bool:
        """True when a committed record exists (re-marking it is an update)."""
        return self.record_for(member_id, on) is not None

    def record_for(self, member_id: str, on: date) -> Optional[AttendanceRecord]:
        records = self._attendance.find(
            AttendanceFilter(
                class_id=self._cohort.class_id,
                subject_id=self._cohort.subject_id,
                member_id=member_id,
                start=on,
                end=on,
            )
        )
        return records[0] if records else None

    def commit(self, on: Optional[date] = None) -> CommitResult:
        """Write the whole draft for ``on`` (today when omitted) in one upsert."""

        now = self._clock()
        on = on or now.date()

        if self._draft.is_empty():
            raise ValidationError("No attendance data to post")
        if on > now.date():
            raise ValidationError("Attendance cannot be posted for a future date")

        timing = self._policy.timing_for(self._cohort, on)
        records = [
            self._to_record(entry, on=on, timing=timing, committed_at=now) for entry in self._draft.entries.values()
        ]

        # StoreError propagates; the draft stays intact for a retry.
        self._attendance.upsert(records)
        self._draft.entries.clear()

        logger.info(
            "attendance committed class=%s subject=%s date=%s count=%d by=%s",
            self._cohort.class_id,
            self._cohort.subject_id,
            on,
            len(records),
            self._recorder_id,
        )

        summary = notify_affected(records, self._notifier) if self._notifier else NotificationSummary()
        return CommitResult(committed_count=len(records), records=tuple(records), notifications=summary)

    def _to_record(self, entry: DraftEntry, *, on: date, timing: ClassTiming, committed_at: datetime) -> AttendanceRecord:
        arrival = entry.arrival_time
        if arrival is not None and arrival.date() != on:
            arrival = datetime.combine(on, arrival.time())

        # Lateness is decided against the commit date's timing, not the draft date's.
        decision = self._factory.decide(
            requested=entry.requested or entry.status,
            arrival=arrival,
            supplied=entry.supplied,
            timing=timing,
        )
        return AttendanceRecord(
            member_id=entry.member_id,
            class_id=self._cohort.class_id,
            subject_id=str(self._cohort.subject_id),
            attendance_date=on,
            status=decision.status,
            arrival_time=decision.arrival_time,
            late_minutes=decision.late_minutes,
            recorded_by=self._recorder_id,
            committed_at=committed_at,
        )
