from __future__ import annotations

from datetime import date, datetime

from src.classroom_attendance.classroom_attendance.analytics.aggregator import AnalyticsAggregator, average_score
from src.classroom_attendance.classroom_attendance.analytics.model import CompletionRatio
from src.classroom_attendance.classroom_attendance.attendance.model import AttendanceRecord
from src.classroom_attendance.classroom_attendance.core.enums import AttendanceStatus
from src.classroom_attendance.classroom_attendance.members.model import Cohort, Member


def attendance(member_id: str, day: int, status: AttendanceStatus) -> AttendanceRecord:
    on = date(2026, 10, day)
    return AttendanceRecord(
        member_id=member_id,
        class_id="10A",
        subject_id="math",
        attendance_date=on,
        status=status,
        arrival_time=None if status == AttendanceStatus.ABSENT else datetime(2026, 10, day, 8, 55),
        late_minutes=3 if status == AttendanceStatus.LATE else None,
        recorded_by="op-1",
        committed_at=datetime(2026, 10, day, 9, 30),
    )


def test_member_metrics(members, make_result):
    ana = members[0]
    records = [
        attendance("m-1", 12, AttendanceStatus.PRESENT),
        attendance("m-1", 13, AttendanceStatus.LATE),
        attendance("m-1", 14, AttendanceStatus.ABSENT),
        attendance("m-2", 14, AttendanceStatus.ABSENT),
    ]
    results = [
        make_result("m-1", 70, day=1),
        make_result("m-1", 85, day=5),
        make_result("m-1", 90, day=9, subject="Physics"),
        make_result("m-2", 10, day=9),
    ]

    metrics = AnalyticsAggregator().member_metrics(
        ana,
        records,
        results,
        total_defined=4,
        subject_totals={"Mathematics": 2, "Physics": 2},
    )

    assert metrics.attendance_rate == 67
    # (70 + 85 + 90) / 3 = 81.67
    assert metrics.average_score == 82
    assert metrics.completion == CompletionRatio(completed=3, total=4)
    assert metrics.completion.percent == 75
    assert metrics.recent_scores == (90, 85, 70)
    assert [(s.subject_name, s.average_score, s.completion.percent) for s in metrics.subjects] == [
        ("Mathematics", 78, 100),
        ("Physics", 90, 50),
    ]


def test_member_without_results_or_records(members):
    metrics = AnalyticsAggregator().member_metrics(members[1], [], [], total_defined=0)

    assert metrics.attendance_rate == 0
    assert metrics.average_score == 0
    assert metrics.completion.completed == 0
    assert metrics.completion.total == 0
    assert metrics.completion.percent is None
    assert metrics.subjects == ()
    assert metrics.recent_scores == ()


def test_recent_scores_are_capped(members, make_result):
    results = [make_result("m-1", 50 + day, day=day) for day in range(1, 9)]

    metrics = AnalyticsAggregator(recent_limit=5).member_metrics(members[0], [], results, total_defined=8)

    assert metrics.recent_scores == (58, 57, 56, 55, 54)


def test_average_score_rounds_half_up(make_result):
    assert average_score([make_result("m-1", 82, day=1), make_result("m-1", 83, day=2)]) == 83
    assert average_score([]) == 0


def test_cohort_rollup_picks_top_performer(members, make_result):
    agg = AnalyticsAggregator()
    results = [make_result("m-1", 95, day=1), make_result("m-2", 80, day=1), make_result("m-3", 70, day=1)]
    metrics = [agg.member_metrics(m, [], results, total_defined=1) for m in members]

    rollup = agg.cohort_rollup(Cohort("10A"), metrics)

    assert rollup.total_members == 3
    assert rollup.average_score == 82
    assert rollup.average_attendance == 0
    assert rollup.top_performer.member_id == "m-1"
    assert rollup.top_performer.full_name == "Ana Lima"
    assert rollup.top_performer.average_score == 95


def test_cohort_rollup_tie_goes_to_lowest_member_id(make_result):
    agg = AnalyticsAggregator()
    roster = [
        Member(member_id="m-9", full_name="Zed", roll_code="9", class_id="10A"),
        Member(member_id="m-4", full_name="Ida", roll_code="4", class_id="10A"),
    ]
    results = [make_result("m-9", 88, day=1), make_result("m-4", 88, day=1)]

    rollup = agg.cohort_rollup(Cohort("10A"), [agg.member_metrics(m, [], results, total_defined=1) for m in roster])

    assert rollup.top_performer.member_id == "m-4"


def test_empty_cohort_rollup():
    rollup = AnalyticsAggregator.cohort_rollup(Cohort("10A", "math"), [])

    assert rollup.total_members == 0
    assert rollup.average_score == 0
    assert rollup.average_attendance == 0
    assert rollup.top_performer is None
