from __future__ import annotations

from datetime import date

import stats
import tuition
from models import StudentWithClass
from tests.conftest import make_student

TODAY = date(2026, 10, 19)


def roster():
    return [
        make_student(1, robotics=True, payment_day=22),
        make_student(2, class_type="group", duration=2.0, cadence="quarterly", payment_day=25),
        make_student(3, class_type="group", duration=1.0, payment_day=5),
        StudentWithClass(id=4, name="No Class"),
    ]


def test_student_count_weights_individual_twice():
    counts = stats.calculate_student_count(roster())

    assert counts.actual_students == 4
    assert counts.individual_students == 1
    assert counts.individual_count == 2
    assert counts.group_students == 2
    assert counts.weighted_count == 4
    assert counts.robotics_participants == 1
    assert counts.robotics_non_participants == 3
    assert counts.monthly_payment_students == 2
    assert counts.quarterly_payment_students == 1


def test_revenue_overview():
    overview = stats.revenue_overview(roster(), today=TODAY)

    assert overview.projected_monthly_revenue == 577500
    assert overview.weekly_revenue == 144375


def test_revenue_by_class_type():
    df = stats.revenue_by_class_type(tuition.calculate_payment_rows(roster(), today=TODAY))

    assert list(df["class_type"]) == ["group", "individual"]
    assert list(df["students"]) == [2, 1]
    assert list(df["monthly_revenue"]) == [212500 + 135000, 230000]


def test_revenue_by_class_type_empty():
    df = stats.revenue_by_class_type([])

    assert df.empty
    assert list(df.columns) == ["class_type", "students", "monthly_revenue"]
