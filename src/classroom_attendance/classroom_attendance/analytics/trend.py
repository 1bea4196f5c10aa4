from __future__ import annotations

from statistics import fmean
from typing import Sequence

from ..core.constants import RECENT_SCORES_LIMIT, TREND_MIN_POINTS, TREND_THRESHOLD
from ..core.enums import Trend


class TrendDetector:
    """Coarse direction of a member's most recent scores.

    Input is most-recent-first, as produced by the aggregator. By default the
    sequence is put back into chronological order before splitting, so the
    comparison is newer half against older half. ``chronological=False`` keeps
    the literal array-position split instead.
    """

    def __init__(
        self,
        *,
        chronological: bool = True,
        threshold: float = TREND_THRESHOLD,
        min_points: int = TREND_MIN_POINTS,
        limit: int = RECENT_SCORES_LIMIT,
    ):
        self._chronological = chronological
        self._threshold = threshold
        self._min_points = min_points
        self._limit = limit

    def classify(self, recent_first: Sequence[float]) -> Trend:
        points = list(recent_first)[: self._limit]
        if len(points) < self._min_points:
            return Trend.STABLE

        if self._chronological:
            points.reverse()

        # Middle element of an odd sequence belongs to the second half.
        split = len(points) // 2
        first, second = fmean(points[:split]), fmean(points[split:])

        if second > first + self._threshold:
            return Trend.UP
        if second < first - self._threshold:
            return Trend.DOWN
        return Trend.STABLE
