from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.validators import round_half_up
from ..core.enums import Trend
from ..members.model import Cohort, Member


@dataclass(frozen=True)
class CompletionRatio:
    """Completed vs defined assessments; both sides are kept so 0/0 stays visible."""

    completed: int
    total: int

    @property
    def percent(self) -> Optional[int]:
        if self.total == 0:
            return None
        return round_half_up(100 * self.completed / self.total)


@dataclass(frozen=True)
class SubjectBreakdown:
    subject_name: str
    average_score: int
    completion: CompletionRatio


@dataclass(frozen=True)
class MemberMetrics:
    member_id: str
    full_name: str
    roll_code: str
    attendance_rate: int
    average_score: int
    completion: CompletionRatio
    subjects: tuple[SubjectBreakdown, ...] = ()
    recent_scores: tuple[float, ...] = ()


@dataclass(frozen=True)
class TopPerformer:
    member_id: str
    full_name: str
    average_score: int


@dataclass(frozen=True)
class CohortRollup:
    class_id: str
    subject_id: Optional[str]
    total_members: int
    average_attendance: int
    average_score: int
    top_performer: Optional[TopPerformer]


@dataclass(frozen=True)
class Ranking:
    rank: int
    total_ranked: int


@dataclass(frozen=True)
class MemberAnalytics:
    """Member-facing view: own metrics, class rank and score trend."""

    member: Member
    metrics: MemberMetrics
    ranking: Ranking
    trend: Trend

    @property
    def recent_scores(self) -> tuple[float, ...]:
        return self.metrics.recent_scores


@dataclass(frozen=True)
class CohortReport:
    cohort: Cohort
    members: tuple[MemberMetrics, ...]
    rollup: CohortRollup
