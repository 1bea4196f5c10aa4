from __future__ import annotations

from datetime import date, datetime

import pytest

from src.classroom_attendance.classroom_attendance.analytics.ranking import RankingEngine, SharedTiePolicy
from src.classroom_attendance.classroom_attendance.analytics.service import AnalyticsService
from src.classroom_attendance.classroom_attendance.attendance.model import AttendanceRecord
from src.classroom_attendance.classroom_attendance.core.enums import AttendanceStatus, Trend
from src.classroom_attendance.classroom_attendance.core.exceptions import NotFound, StoreError


def committed(member_id: str, status: AttendanceStatus, *, subject_id: str = "math", day: int = 19):
    return AttendanceRecord(
        member_id=member_id,
        class_id="10A",
        subject_id=subject_id,
        attendance_date=date(2026, 10, day),
        status=status,
        arrival_time=None,
        late_minutes=None,
        recorded_by="op-1",
        committed_at=datetime(2026, 10, day, 9, 30),
    )


@pytest.fixture
def service(attendance_repo, assessments, enrollment) -> AnalyticsService:
    attendance_repo.upsert(
        [
            committed("m-1", AttendanceStatus.PRESENT),
            committed("m-1", AttendanceStatus.ABSENT, subject_id="phys"),
            committed("m-2", AttendanceStatus.PRESENT),
            committed("m-3", AttendanceStatus.ABSENT),
        ]
    )
    return AnalyticsService(attendance_repo, assessments, enrollment)


def test_member_analytics_for_top_member(service):
    view = service.member_analytics("m-1")

    assert view.member.full_name == "Ana Lima"
    assert view.metrics.attendance_rate == 50
    assert view.metrics.average_score == 95
    assert view.metrics.completion.completed == 3
    assert view.metrics.completion.total == 5
    assert view.ranking.rank == 1
    assert view.ranking.total_ranked == 3
    assert view.trend == Trend.STABLE
    assert view.recent_scores == (95, 95, 95)


def test_member_analytics_ranks_within_class(service):
    assert service.member_analytics("m-2").ranking.rank == 2
    assert service.member_analytics("m-3").ranking.rank == 3


def test_unknown_member_is_not_found(service):
    with pytest.raises(NotFound):
        service.member_analytics("nobody")


def test_store_failure_propagates(service, attendance_repo):
    attendance_repo.fail_reads = True

    with pytest.raises(StoreError):
        service.member_analytics("m-1")


def test_cohort_report_class_wide(service):
    report = service.cohort_report("10A")

    assert [m.member_id for m in report.members] == ["m-1", "m-2", "m-3"]
    assert report.rollup.total_members == 3
    assert report.rollup.average_score == 82
    # 50, 100, 0
    assert report.rollup.average_attendance == 50
    assert report.rollup.top_performer.member_id == "m-1"


def test_cohort_report_for_one_subject(service):
    report = service.cohort_report("10A", "phys")

    assert [m.member_id for m in report.members] == ["m-1", "m-3"]
    physics = report.members[0]
    assert physics.average_score == 95
    assert physics.attendance_rate == 0
    assert physics.completion.total == 2
    assert report.rollup.subject_id == "phys"


def test_cohort_report_without_assessments(attendance_repo, empty_assessments, enrollment):
    service = AnalyticsService(attendance_repo, empty_assessments, enrollment)

    report = service.cohort_report("10A")

    assert report.rollup.average_score == 0
    assert all(m.completion.percent is None for m in report.members)


def test_operator_overview_skips_unknown_classes(service, enrollment):
    enrollment.add_class("10B")

    reports = service.operator_overview(["10A", "11Z", "10B"])

    assert [r.cohort.class_id for r in reports] == ["10A", "10B"]
    assert reports[1].rollup.total_members == 0
    assert reports[1].rollup.top_performer is None


def test_shared_ties_in_member_view(attendance_repo, enrollment, make_result, assessments_from):
    assessments = assessments_from(
        [make_result("m-1", 80, day=1), make_result("m-2", 80, day=1), make_result("m-3", 90, day=1)],
        {("10A", "Mathematics"): 1},
    )
    service = AnalyticsService(
        attendance_repo, assessments, enrollment, ranking=RankingEngine(SharedTiePolicy())
    )

    assert service.member_analytics("m-1").ranking.rank == 2
    assert service.member_analytics("m-2").ranking.rank == 2
