from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFound, ValidationError
from ..members.model import Cohort
from ..members.repository import EnrollmentRepository
from ..notifications.notifier import Notifier
from ..timing.policy import ClassTimingPolicy
from .factory import AttendanceStrategyFactory
from .model import AttendanceFilter, AttendanceRecord, AttendanceSummary, QueryResult
from .query import AttendanceQueryEngine
from .recorder import AttendanceRecorder
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

SessionKey = tuple[str, str, str]


class AttendanceService:
    """Use cases around marking sessions.

    One operator owns one draft per (class, subject) for the current day;
    opening the same session again that day returns the existing recorder with
    its unsaved marks. A session left over from an earlier day is replaced.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        enrollment: EnrollmentRepository,
        policy: ClassTimingPolicy,
        *,
        notifier: Optional[Notifier] = None,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._enrollment = enrollment
        self._policy = policy
        self._notifier = notifier
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._clock = clock
        self._sessions: dict[SessionKey, AttendanceRecorder] = {}
        self._lock = threading.Lock()
        self.queries = AttendanceQueryEngine(attendance, enrollment)

    @staticmethod
    def _key(recorder_id: str, cohort: Cohort) -> SessionKey:
        return (recorder_id, cohort.class_id, str(cohort.subject_id))

    def _current(self, key: SessionKey, today: date) -> Optional[AttendanceRecorder]:
        """Open recorder for ``key``; one left over from an earlier day is discarded. Caller holds the lock."""
        recorder = self._sessions.get(key)
        if recorder is None or recorder.draft.on == today:
            return recorder

        if not recorder.draft.is_empty():
            logger.warning(
                "discarding %d uncommitted marks from %s class=%s subject=%s by=%s",
                len(recorder.draft),
                recorder.draft.on,
                key[1],
                key[2],
                key[0],
            )
        del self._sessions[key]
        return None

    def open_session(self, *, recorder_id: str, class_id: str, subject_id: Optional[str]) -> AttendanceRecorder:
        recorder_id = require_non_empty(recorder_id, "Recorder")
        class_id = require_non_empty(class_id, "Class")
        if not subject_id:
            raise ValidationError("Select a subject before marking attendance")

        cohort = Cohort(class_id=class_id, subject_id=subject_id)
        key = self._key(recorder_id, cohort)
        today = self._clock().date()
        with self._lock:
            existing = self._current(key, today)
            if existing:
                return existing

        roster = self._enrollment.members_of(cohort)
        recorder = AttendanceRecorder(
            cohort=cohort,
            recorder_id=recorder_id,
            roster=roster,
            attendance=self._attendance,
            policy=self._policy,
            notifier=self._notifier,
            strategy_factory=self._factory,
            clock=self._clock,
            on=today,
        )
        with self._lock:
            # Another request may have opened it meanwhile; keep the first.
            return self._sessions.setdefault(key, recorder)

    def get_session(self, *, recorder_id: str, class_id: str, subject_id: str) -> AttendanceRecorder:
        key = self._key(recorder_id, Cohort(class_id=class_id, subject_id=subject_id))
        with self._lock:
            recorder = self._current(key, self._clock().date())
        if not recorder:
            raise NotFound("No open marking session for this class/subject")
        return recorder

    def close_session(self, *, recorder_id: str, class_id: str, subject_id: str) -> None:
        """Abandon the session and its unsaved draft."""
        key = self._key(recorder_id, Cohort(class_id=class_id, subject_id=subject_id))
        with self._lock:
            self._sessions.pop(key, None)

    def amend(
        self,
        *,
        recorder_id: str,
        member_id: str,
        class_id: str,
        subject_id: str,
        on: date,
        status: AttendanceStatus,
        arrival_time: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """Edit one committed record in place (re-marking is an update, not an insert)."""

        cohort = Cohort(class_id=class_id, subject_id=subject_id)
        existing = self._attendance.find(
            AttendanceFilter(class_id=class_id, subject_id=subject_id, member_id=member_id, start=on, end=on)
        )
        if not existing:
            raise NotFound("No committed attendance for this member and date")

        timing = self._policy.timing_for(cohort, on)
        supplied = arrival_time is not None
        arrival = datetime.combine(on, arrival_time.time()) if supplied else existing[0].arrival_time
        decision = self._factory.decide(
            requested=AttendanceStatus(status),
            arrival=arrival,
            supplied=supplied,
            timing=timing,
        )

        record = AttendanceRecord(
            member_id=member_id,
            class_id=class_id,
            subject_id=subject_id,
            attendance_date=on,
            status=decision.status,
            arrival_time=decision.arrival_time,
            late_minutes=decision.late_minutes,
            recorded_by=recorder_id,
            committed_at=self._clock(),
        )
        self._attendance.upsert([record])
        logger.info("attendance amended member=%s class=%s subject=%s date=%s", member_id, class_id, subject_id, on)
        return record

    def report(self, flt: AttendanceFilter) -> tuple[QueryResult, AttendanceSummary]:
        result = self.queries.query(flt)
        return result, self.queries.summarize(result.records)
