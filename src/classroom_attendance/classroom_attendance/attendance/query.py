from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..common.validators import round_half_up
from ..core.enums import AttendanceStatus
from ..core.exceptions import StoreError
from ..members.model import roll_order_key
from ..members.repository import EnrollmentRepository
from .model import AttendanceFilter, AttendanceRecord, AttendanceSession, AttendanceSummary, QueryResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceQueryEngine:
    """Read side over committed attendance records."""

    def __init__(self, attendance: AttendanceRepository, enrollment: EnrollmentRepository):
        self._attendance = attendance
        self._enrollment = enrollment

    def query(self, flt: AttendanceFilter) -> QueryResult:
        """Committed records newest first, ties in roll order.

        NotFound (unknown cohort) propagates; a store failure is returned as
        ``QueryResult.error`` with no records.
        """

        roster = self._enrollment.members_of(flt.cohort)
        order = {m.member_id: i for i, m in enumerate(sorted(roster, key=roll_order_key))}

        try:
            rows = self._attendance.find(flt)
        except StoreError as e:
            logger.error("attendance query failed class=%s subject=%s: %s", flt.class_id, flt.subject_id, e)
            return QueryResult(records=(), error=str(e))

        matched = [r for r in rows if flt.matches(r)]
        # Stable two-pass sort: roll order first, then date descending.
        matched.sort(key=lambda r: (order.get(r.member_id, len(order)), r.member_id))
        matched.sort(key=lambda r: r.attendance_date, reverse=True)
        return QueryResult(records=tuple(matched))

    @staticmethod
    def summarize(records: Iterable[AttendanceRecord]) -> AttendanceSummary:
        present = late = absent = 0
        for r in records:
            if r.status == AttendanceStatus.PRESENT:
                present += 1
            elif r.status == AttendanceStatus.LATE:
                late += 1
            else:
                absent += 1

        total = present + late + absent
        rate = round_half_up(100 * (present + late) / total) if total else 0
        return AttendanceSummary(total=total, present=present, late=late, absent=absent, rate=rate)

    @staticmethod
    def sessions(records: Sequence[AttendanceRecord]) -> list[AttendanceSession]:
        """Per-date counts, newest date first."""
        by_date: dict = {}
        for r in records:
            by_date.setdefault(r.attendance_date, []).append(r)

        out: list[AttendanceSession] = []
        for on in sorted(by_date, reverse=True):
            day = by_date[on]
            s = AttendanceQueryEngine.summarize(day)
            out.append(
                AttendanceSession(
                    attendance_date=on,
                    total=s.total,
                    present=s.present,
                    late=s.late,
                    absent=s.absent,
                    committed_at=max(r.committed_at for r in day),
                )
            )
        return out
