from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..assessments.model import AssessmentFilter
from ..assessments.repository import AssessmentRepository
from ..attendance.model import AttendanceFilter
from ..attendance.repository import AttendanceRepository
from ..core.exceptions import NotFound
from ..members.model import Cohort
from ..members.repository import EnrollmentRepository
from .aggregator import AnalyticsAggregator
from .model import CohortReport, MemberAnalytics
from .ranking import RankingEngine, mean_percentages
from .trend import TrendDetector

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Fetches through the collaborators, then delegates to the pure engines."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        assessments: AssessmentRepository,
        enrollment: EnrollmentRepository,
        *,
        aggregator: Optional[AnalyticsAggregator] = None,
        ranking: Optional[RankingEngine] = None,
        trend: Optional[TrendDetector] = None,
    ):
        self._attendance = attendance
        self._assessments = assessments
        self._enrollment = enrollment
        self._aggregator = aggregator or AnalyticsAggregator()
        self._ranking = ranking or RankingEngine()
        self._trend = trend or TrendDetector()

    def member_analytics(self, member_id: str) -> MemberAnalytics:
        member = self._enrollment.get_member(member_id)
        if not member:
            raise NotFound(f"Unknown member {member_id!r}")

        cohort = Cohort(class_id=member.class_id)
        roster = self._enrollment.members_of(cohort)

        records = self._attendance.find(AttendanceFilter(class_id=member.class_id, member_id=member_id))
        class_results = self._assessments.find_assessments(AssessmentFilter(class_id=member.class_id))

        metrics = self._aggregator.member_metrics(
            member,
            records,
            class_results,
            total_defined=self._assessments.count_defined(class_id=member.class_id),
            subject_totals=self._assessments.count_defined_by_subject(class_id=member.class_id),
        )
        ranking = self._ranking.rank(
            member_id,
            mean_percentages(class_results),
            [m.member_id for m in roster],
        )
        return MemberAnalytics(
            member=member,
            metrics=metrics,
            ranking=ranking,
            trend=self._trend.classify(metrics.recent_scores),
        )

    def cohort_report(self, class_id: str, subject_id: Optional[str] = None) -> CohortReport:
        cohort = Cohort(class_id=class_id, subject_id=subject_id)
        roster = self._enrollment.members_of(cohort)

        records = self._attendance.find(AttendanceFilter(class_id=class_id, subject_id=subject_id))
        results = self._assessments.find_assessments(AssessmentFilter(class_id=class_id, subject_id=subject_id))
        total_defined = self._assessments.count_defined(class_id=class_id, subject_id=subject_id)
        subject_totals = self._assessments.count_defined_by_subject(class_id=class_id)

        metrics = tuple(
            self._aggregator.member_metrics(
                m,
                records,
                results,
                total_defined=total_defined,
                subject_totals=subject_totals,
            )
            for m in roster
        )
        return CohortReport(cohort=cohort, members=metrics, rollup=self._aggregator.cohort_rollup(cohort, metrics))

    def operator_overview(self, class_ids: Iterable[str]) -> list[CohortReport]:
        reports: list[CohortReport] = []
        for class_id in class_ids:
            try:
                reports.append(self.cohort_report(class_id))
            except NotFound:
                logger.warning("skipping unknown class %s in overview", class_id)
        return reports
