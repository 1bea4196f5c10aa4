from datetime import date, datetime, time

import pytest

from src.classroom_attendance.classroom_attendance.common.datetime_utils import parse_clock_time
from src.classroom_attendance.classroom_attendance.core.exceptions import ValidationError
from src.classroom_attendance.classroom_attendance.members.model import Cohort
from src.classroom_attendance.classroom_attendance.timing.model import ClassTiming
from src.classroom_attendance.classroom_attendance.timing.policy import ClassTimingPolicy, build_timing


def test_default_timing_is_start_plus_grace():
    policy = ClassTimingPolicy.from_settings()

    assert policy.default == ClassTiming(start_time=time(16, 0), cutoff_time=time(16, 15))


def test_overrides_by_cohort_and_by_date():
    policy = ClassTimingPolicy.from_settings(
        start="09:00",
        cutoff_minutes=10,
        overrides={
            "10A:math": {"start": "10:30"},
            "10A:math:2026-10-19": {"start": "13:00", "cutoff_minutes": 5},
        },
    )
    math = Cohort("10A", "math")

    assert policy.timing_for(math, date(2026, 10, 18)) == ClassTiming(time(10, 30), time(10, 40))
    assert policy.timing_for(math, date(2026, 10, 19)) == ClassTiming(time(13, 0), time(13, 5))
    assert policy.timing_for(Cohort("10A", "phys"), date(2026, 10, 19)) == ClassTiming(time(9, 0), time(9, 10))


def test_malformed_override_key_is_rejected():
    with pytest.raises(ValidationError):
        ClassTimingPolicy.from_settings(overrides={"10A": {"start": "08:00"}})


def test_cutoff_is_capped_at_end_of_day():
    timing = build_timing("23:50", 30)

    assert timing.cutoff_time == time(23, 59, 59)


def test_negative_grace_is_rejected():
    with pytest.raises(ValidationError):
        build_timing("09:00", -1)


def test_cutoff_before_start_is_rejected():
    with pytest.raises(ValidationError):
        ClassTiming(start_time=time(9, 0), cutoff_time=time(8, 59))


def test_timing_anchors_on_a_day():
    timing = ClassTiming(start_time=time(9, 0), cutoff_time=time(9, 15))

    assert timing.start_at(date(2026, 10, 19)) == datetime(2026, 10, 19, 9, 0)
    assert timing.cutoff_at(date(2026, 10, 19)) == datetime(2026, 10, 19, 9, 15)


@pytest.mark.parametrize("raw", ["", "9", "25:00", "09:60", "nine"])
def test_bad_clock_times_are_rejected(raw):
    with pytest.raises(ValidationError):
        parse_clock_time(raw)


def test_clock_time_accepts_seconds():
    assert parse_clock_time("16:20:01") == time(16, 20, 1)
