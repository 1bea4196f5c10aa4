from __future__ import annotations

from statistics import fmean
from typing import Mapping, Optional, Sequence

from ..assessments.model import AssessmentResult
from ..attendance.model import AttendanceRecord
from ..attendance.query import AttendanceQueryEngine
from ..common.validators import round_half_up
from ..core.constants import RECENT_SCORES_LIMIT
from ..members.model import Cohort, Member
from .model import CohortRollup, CompletionRatio, MemberMetrics, SubjectBreakdown, TopPerformer


def average_score(results: Sequence[AssessmentResult]) -> int:
    """round(mean percentage), 0 without results."""
    if not results:
        return 0
    return round_half_up(fmean(r.percentage for r in results))


def newest_first(results: Sequence[AssessmentResult]) -> list[AssessmentResult]:
    return sorted(results, key=lambda r: r.recorded_at, reverse=True)


class AnalyticsAggregator:
    """Pure per-member and per-cohort metrics over already fetched data.

    Every member is computed independently, so callers may fan members out
    across workers.
    """

    def __init__(self, *, recent_limit: int = RECENT_SCORES_LIMIT):
        self._recent_limit = int(recent_limit)

    def member_metrics(
        self,
        member: Member,
        records: Sequence[AttendanceRecord],
        results: Sequence[AssessmentResult],
        *,
        total_defined: int,
        subject_totals: Optional[Mapping[str, int]] = None,
    ) -> MemberMetrics:
        own_records = [r for r in records if r.member_id == member.member_id]
        own_results = newest_first([r for r in results if r.member_id == member.member_id])

        return MemberMetrics(
            member_id=member.member_id,
            full_name=member.full_name,
            roll_code=member.roll_code,
            attendance_rate=AttendanceQueryEngine.summarize(own_records).rate,
            average_score=average_score(own_results),
            completion=CompletionRatio(completed=len(own_results), total=int(total_defined)),
            subjects=self.subject_breakdown(own_results, subject_totals or {}),
            recent_scores=tuple(r.percentage for r in own_results[: self._recent_limit]),
        )

    @staticmethod
    def subject_breakdown(
        results: Sequence[AssessmentResult], subject_totals: Mapping[str, int]
    ) -> tuple[SubjectBreakdown, ...]:
        groups: dict[str, list[AssessmentResult]] = {}
        for r in results:
            groups.setdefault(r.subject_name, []).append(r)

        return tuple(
            SubjectBreakdown(
                subject_name=name,
                average_score=average_score(group),
                completion=CompletionRatio(completed=len(group), total=int(subject_totals.get(name, 0))),
            )
            for name, group in sorted(groups.items())
        )

    @staticmethod
    def cohort_rollup(cohort: Cohort, metrics: Sequence[MemberMetrics]) -> CohortRollup:
        if not metrics:
            return CohortRollup(
                class_id=cohort.class_id,
                subject_id=cohort.subject_id,
                total_members=0,
                average_attendance=0,
                average_score=0,
                top_performer=None,
            )

        # Highest score wins; ties go to the lowest member id.
        top = min(metrics, key=lambda m: (-m.average_score, m.member_id))
        return CohortRollup(
            class_id=cohort.class_id,
            subject_id=cohort.subject_id,
            total_members=len(metrics),
            average_attendance=round_half_up(fmean(m.attendance_rate for m in metrics)),
            average_score=round_half_up(fmean(m.average_score for m in metrics)),
            top_performer=TopPerformer(member_id=top.member_id, full_name=top.full_name, average_score=top.average_score),
        )
