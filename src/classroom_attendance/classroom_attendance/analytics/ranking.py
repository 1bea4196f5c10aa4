from __future__ import annotations

from abc import ABC, abstractmethod
from statistics import fmean
from typing import Mapping, Optional, Sequence

from ..assessments.model import AssessmentResult
from ..core.exceptions import NotFound
from .model import Ranking


class TiePolicy(ABC):
    """Strategy Pattern: how equal averages translate into rank numbers."""

    @abstractmethod
    def assign(self, ordered: Sequence[tuple[str, float]]) -> dict[str, int]:
        """``ordered`` is sorted by (average desc, member id asc)."""

        raise NotImplementedError


class StrictTiePolicy(TiePolicy):
    """Every member gets a distinct rank; equal averages fall back to member id."""

    def assign(self, ordered: Sequence[tuple[str, float]]) -> dict[str, int]:
        return {member_id: i for i, (member_id, _) in enumerate(ordered, start=1)}


class SharedTiePolicy(TiePolicy):
    """Standard competition ranking ("1224"): equal averages share a rank."""

    def assign(self, ordered: Sequence[tuple[str, float]]) -> dict[str, int]:
        ranks: dict[str, int] = {}
        previous: Optional[float] = None
        current = 0
        for i, (member_id, avg) in enumerate(ordered, start=1):
            if previous is None or avg != previous:
                current = i
                previous = avg
            ranks[member_id] = current
        return ranks


def mean_percentages(results: Sequence[AssessmentResult]) -> dict[str, float]:
    """Unrounded mean percentage per member."""
    grouped: dict[str, list[float]] = {}
    for r in results:
        grouped.setdefault(r.member_id, []).append(r.percentage)
    return {member_id: fmean(values) for member_id, values in grouped.items()}


class RankingEngine:
    """Orders a class roster by average score.

    Members without results rank with an average of 0, so ``total_ranked``
    always equals the roster size.
    """

    def __init__(self, tie_policy: Optional[TiePolicy] = None):
        self._tie_policy = tie_policy or StrictTiePolicy()

    def standings(self, averages: Mapping[str, float], roster: Sequence[str]) -> dict[str, int]:
        ordered = sorted(((m, float(averages.get(m, 0.0))) for m in set(roster)), key=lambda x: (-x[1], x[0]))
        return self._tie_policy.assign(ordered)

    def rank(self, member_id: str, averages: Mapping[str, float], roster: Sequence[str]) -> Ranking:
        if member_id not in roster:
            raise NotFound(f"Member {member_id!r} is not part of this class")
        ranks = self.standings(averages, roster)
        return Ranking(rank=ranks[member_id], total_ranked=len(ranks))
