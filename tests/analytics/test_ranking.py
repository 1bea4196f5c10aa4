from __future__ import annotations

import pytest

from src.classroom_attendance.classroom_attendance.analytics.ranking import (
    RankingEngine,
    SharedTiePolicy,
    StrictTiePolicy,
    mean_percentages,
)
from src.classroom_attendance.classroom_attendance.core.exceptions import NotFound

ROSTER = ["m-1", "m-2", "m-3", "m-4"]


def test_mean_percentages_are_unrounded(make_result):
    results = [make_result("m-1", 80, day=1), make_result("m-1", 85, day=2), make_result("m-2", 70, day=1)]

    assert mean_percentages(results) == {"m-1": 82.5, "m-2": 70.0}


def test_rank_orders_by_average_descending():
    engine = RankingEngine()
    averages = {"m-1": 95.0, "m-2": 80.0, "m-3": 70.0}

    assert engine.rank("m-1", averages, ROSTER).rank == 1
    assert engine.rank("m-2", averages, ROSTER).rank == 2
    assert engine.rank("m-3", averages, ROSTER).rank == 3


def test_members_without_results_are_ranked_last_and_counted():
    engine = RankingEngine()
    averages = {"m-1": 95.0, "m-2": 80.0, "m-3": 70.0}

    ranking = engine.rank("m-4", averages, ROSTER)

    assert ranking.rank == 4
    assert ranking.total_ranked == len(ROSTER)


def test_higher_average_never_ranks_worse():
    engine = RankingEngine()
    averages = {"m-1": 61.0, "m-2": 88.5, "m-3": 88.4, "m-4": 12.0}

    ranks = engine.standings(averages, ROSTER)

    for a in ROSTER:
        for b in ROSTER:
            if averages[a] > averages[b]:
                assert ranks[a] < ranks[b]


def test_strict_policy_breaks_ties_by_member_id():
    engine = RankingEngine(StrictTiePolicy())
    averages = {"m-3": 90.0, "m-1": 90.0, "m-2": 75.0}

    ranks = engine.standings(averages, ROSTER)

    assert ranks == {"m-1": 1, "m-3": 2, "m-2": 3, "m-4": 4}


def test_shared_policy_gives_competition_ranks():
    engine = RankingEngine(SharedTiePolicy())
    averages = {"m-3": 90.0, "m-1": 90.0, "m-2": 75.0}

    ranks = engine.standings(averages, ROSTER)

    assert ranks == {"m-1": 1, "m-3": 1, "m-2": 3, "m-4": 4}


def test_ties_use_unrounded_averages():
    engine = RankingEngine()
    # Both display as 83, but 82.6 ranks below 82.9.
    averages = {"m-1": 82.6, "m-2": 82.9}

    assert engine.rank("m-2", averages, ["m-1", "m-2"]).rank == 1


def test_member_outside_roster_is_not_found():
    with pytest.raises(NotFound):
        RankingEngine().rank("m-9", {"m-9": 100.0}, ROSTER)
