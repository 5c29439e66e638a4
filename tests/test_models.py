from __future__ import annotations

from datetime import datetime

import pytest

from models import (
    COURSE_CONFIGS,
    ONE_MONTH,
    THREE_MONTH,
    AttendanceProgress,
    course_type_for_cadence,
    normalize_class_type,
    normalize_duration,
    round_half_up,
)

NOW = datetime(2026, 10, 19, 9, 0)


def progress(week=0, course_type=ONE_MONTH, total=None):
    total = COURSE_CONFIGS[course_type].total_weeks if total is None else total
    return AttendanceProgress(student_id=1, current_week=week, total_weeks=total, course_type=course_type)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1.5 hours", 1.5),
        ("2h", 2.0),
        ("1 hour", 1.0),
        (1.5, 1.5),
        (2, 2.0),
        ("1.4", 1.5),
        ("3 hours", 2.0),
        ("one hour", 1.0),
        (None, 1.0),
        ("", 1.0),
    ],
)
def test_normalize_duration(raw, expected):
    assert normalize_duration(raw) == expected


def test_normalize_class_type():
    assert normalize_class_type("1:1") == "individual"
    assert normalize_class_type("Group") == "group"
    with pytest.raises(ValueError):
        normalize_class_type("workshop")


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(57954.545) == 57955
    assert round_half_up(9.09) == 9


def test_course_type_for_cadence():
    assert course_type_for_cadence("monthly") == ONE_MONTH
    assert course_type_for_cadence("quarterly") == THREE_MONTH


# ---------- transitions ----------

def test_increment_stamps_activity_and_saturates():
    p = progress(week=3).increment(NOW)
    assert p.current_week == 4
    assert p.last_activity_at == NOW

    assert p.increment(NOW).current_week == 4


def test_decrement_stops_at_zero():
    assert progress(week=0).decrement().current_week == 0
    assert progress(week=2).decrement().current_week == 1


def test_reset_clears_week_and_activity():
    p = progress(week=3).increment(NOW).reset()
    assert p.current_week == 0
    assert p.last_activity_at is None


def test_set_week_is_clamped():
    assert progress().set_week(7).current_week == 4
    assert progress().set_week(-2).current_week == 0
    assert progress(course_type=THREE_MONTH).set_week(7).current_week == 7


@pytest.mark.parametrize("course_type", [ONE_MONTH, THREE_MONTH])
def test_increment_then_decrement_restores_week(course_type):
    total = COURSE_CONFIGS[course_type].total_weeks
    for week in range(total):
        assert progress(week, course_type).increment(NOW).decrement().current_week == week
    for week in range(1, total + 1):
        assert progress(week, course_type).decrement().increment(NOW).current_week == week


def test_increment_then_decrement_at_full_course_loses_a_week():
    assert progress(week=4).increment(NOW).decrement().current_week == 3


def test_adjust_three_month_to_one_month_clamps_week():
    p = progress(week=9, course_type=THREE_MONTH).adjust_for_course_type(ONE_MONTH)

    assert p.course_type == ONE_MONTH
    assert p.total_weeks == 4
    assert p.current_week == 4
    assert p.is_complete


def test_adjust_one_month_to_three_month_keeps_week():
    p = progress(week=2).adjust_for_course_type(THREE_MONTH)
    assert (p.current_week, p.total_weeks) == (2, 11)


@pytest.mark.parametrize("course_type", [ONE_MONTH, THREE_MONTH])
def test_adjust_is_idempotent(course_type):
    once = progress(week=9, course_type=THREE_MONTH).adjust_for_course_type(course_type)
    assert once.adjust_for_course_type(course_type) == once


# ---------- derived signals ----------

def test_progress_percentage():
    assert progress(week=3).progress_percentage == 75
    assert progress(week=1, course_type=THREE_MONTH).progress_percentage == 9
    assert progress(week=10, course_type=THREE_MONTH).progress_percentage == 91
    assert progress(week=0, total=0).progress_percentage == 0


def test_feedback_and_completion_flags():
    p = progress(week=2)
    assert not p.is_feedback_period
    assert p.weeks_until_feedback == 1

    p = progress(week=3)
    assert p.is_feedback_period
    assert not p.is_complete
    assert p.weeks_remaining == 1

    p = progress(week=10, course_type=THREE_MONTH)
    assert p.is_feedback_period
    assert p.weeks_until_feedback == 0


@pytest.mark.parametrize(
    "p,text",
    [
        (progress(week=4), "course complete"),
        (progress(week=11, course_type=THREE_MONTH), "course complete"),
        (progress(week=3), "feedback period"),
        (progress(week=10, course_type=THREE_MONTH), "feedback period"),
        (progress(week=3, course_type=THREE_MONTH, total=4), "almost done"),
        (progress(week=2), "2/4 weeks in progress"),
        (progress(week=0, course_type=THREE_MONTH), "0/11 weeks in progress"),
    ],
)
def test_status_text(p, text):
    assert p.status_text == text
