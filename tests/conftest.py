from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import pytest

from src.classroom_attendance.classroom_attendance.assessments.model import AssessmentFilter, AssessmentResult
from src.classroom_attendance.classroom_attendance.attendance.model import AttendanceFilter, AttendanceRecord
from src.classroom_attendance.classroom_attendance.core.exceptions import NotFound, NotificationError, StoreError
from src.classroom_attendance.classroom_attendance.members.model import Cohort, Member
from src.classroom_attendance.classroom_attendance.timing.policy import ClassTimingPolicy


class InMemoryEnrollment:
    def __init__(self, members: list[Member], subjects: dict[str, list[str]]):
        # subjects: subject_id -> enrolled member ids
        self._members = {m.member_id: m for m in members}
        self._classes = {m.class_id for m in members}
        self._subjects = subjects

    def add_class(self, class_id: str) -> None:
        self._classes.add(class_id)

    def members_of(self, cohort: Cohort) -> list[Member]:
        if cohort.class_id not in self._classes:
            raise NotFound(f"Unknown class {cohort.class_id!r}")
        in_class = [m for m in self._members.values() if m.class_id == cohort.class_id]
        if cohort.subject_id is None:
            return in_class
        if cohort.subject_id not in self._subjects:
            raise NotFound(f"Unknown subject {cohort.subject_id!r}")
        enrolled = set(self._subjects[cohort.subject_id])
        return [m for m in in_class if m.member_id in enrolled]

    def cohorts_for(self, member_id: str) -> list[Cohort]:
        m = self._members.get(member_id)
        if not m:
            return []
        return [Cohort(m.class_id, s) for s, ids in sorted(self._subjects.items()) if member_id in ids]

    def get_member(self, member_id: str) -> Optional[Member]:
        return self._members.get(member_id)


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[tuple, AttendanceRecord] = {}
        self.upsert_calls = 0
        self.fail_writes = False
        self.fail_reads = False

    def upsert(self, records) -> None:
        self.upsert_calls += 1
        if self.fail_writes:
            raise StoreError("connection lost")
        for r in records:
            self.rows[r.key] = r

    def find(self, flt: AttendanceFilter) -> list[AttendanceRecord]:
        if self.fail_reads:
            raise StoreError("read timeout")
        return [r for r in self.rows.values() if flt.matches(r)]


class InMemoryAssessments:
    def __init__(self, results: list[AssessmentResult], defined: dict[tuple[str, str], int]):
        # defined: (class_id, subject_name) -> number of assessments
        self._results = results
        self._defined = defined

    def find_assessments(self, flt: AssessmentFilter) -> list[AssessmentResult]:
        out = [
            r
            for r in self._results
            if r.class_id == flt.class_id
            and (flt.subject_id is None or r.subject_id == flt.subject_id)
            and (flt.member_id is None or r.member_id == flt.member_id)
        ]
        return sorted(out, key=lambda r: r.recorded_at, reverse=True)

    def count_defined(self, *, class_id: str, subject_id: Optional[str] = None) -> int:
        return sum(
            n
            for (c, subject), n in self._defined.items()
            if c == class_id and (subject_id is None or SUBJECT_IDS.get(subject) == subject_id)
        )

    def count_defined_by_subject(self, *, class_id: str) -> dict[str, int]:
        return {subject: n for (c, subject), n in self._defined.items() if c == class_id}


class RecordingNotifier:
    def __init__(self, fail_for: tuple[str, ...] = ()):
        self.sent: list[tuple[str, object]] = []
        self._fail_for = set(fail_for)

    def notify(self, member_id: str, payload) -> None:
        if member_id in self._fail_for:
            raise NotificationError("push gateway rejected")
        self.sent.append((member_id, payload))


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


SUBJECT_IDS = {"Mathematics": "math", "Physics": "phys"}


def result(member_id: str, pct: float, *, day: int, subject: str = "Mathematics", class_id: str = "10A") -> AssessmentResult:
    return AssessmentResult(
        member_id=member_id,
        assessment_id=f"{subject[:4]}-{day}",
        class_id=class_id,
        subject_id=SUBJECT_IDS[subject],
        subject_name=subject,
        score=pct / 5,
        max_score=20,
        percentage=pct,
        recorded_at=datetime(2026, 9, day, 10, 0),
    )


@pytest.fixture
def members() -> list[Member]:
    return [
        Member(member_id="m-1", full_name="Ana Lima", roll_code="1", class_id="10A", guardian_contact="+15550001"),
        Member(member_id="m-2", full_name="Ben Okafor", roll_code="2", class_id="10A"),
        Member(member_id="m-3", full_name="Chen Wei", roll_code="10", class_id="10A"),
    ]


@pytest.fixture
def enrollment(members) -> InMemoryEnrollment:
    return InMemoryEnrollment(members, {"math": ["m-1", "m-2", "m-3"], "phys": ["m-1", "m-3"]})


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def policy() -> ClassTimingPolicy:
    # Scenario timing: class starts 09:00, anything after 09:00 is late.
    return ClassTimingPolicy.from_settings(start="09:00", cutoff_minutes=0)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 10, 19, 9, 30))


@pytest.fixture
def today(clock) -> date:
    return clock.now.date()


@pytest.fixture
def make_result():
    return result


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def failing_notifier() -> RecordingNotifier:
    return RecordingNotifier(fail_for=("m-2",))


@pytest.fixture
def assessments() -> InMemoryAssessments:
    results = [
        result("m-1", 95, day=1),
        result("m-1", 95, day=8),
        result("m-1", 95, day=15, subject="Physics"),
        result("m-2", 80, day=1),
        result("m-2", 80, day=8),
        result("m-3", 70, day=1),
    ]
    return InMemoryAssessments(results, {("10A", "Mathematics"): 3, ("10A", "Physics"): 2})


@pytest.fixture
def empty_assessments() -> InMemoryAssessments:
    return InMemoryAssessments([], {})


@pytest.fixture
def assessments_from():
    return InMemoryAssessments
