"""
stats.py
Roster and revenue statistics for the dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pandas as pd

import tuition
from models import GROUP, INDIVIDUAL, MONTHLY, QUARTERLY, PaymentRow, StudentWithClass, round_half_up

# Individual (1:1) students count twice in the weighted head count
INDIVIDUAL_WEIGHT = 2


@dataclass(frozen=True)
class StudentCount:
    actual_students: int
    weighted_count: int
    individual_students: int
    individual_count: int
    group_students: int
    group_count: int
    robotics_participants: int
    robotics_non_participants: int
    monthly_payment_students: int
    quarterly_payment_students: int


@dataclass(frozen=True)
class RevenueOverview:
    projected_monthly_revenue: int
    weekly_revenue: int


def calculate_student_count(students: list[StudentWithClass]) -> StudentCount:
    individual = group = robotics = monthly = quarterly = 0

    for student in students:
        c = student.primary_class
        if c is None:
            continue
        if c.class_type == INDIVIDUAL:
            individual += 1
        elif c.class_type == GROUP:
            group += 1
        if c.robotics_option:
            robotics += 1
        if c.payment_cadence == MONTHLY:
            monthly += 1
        elif c.payment_cadence == QUARTERLY:
            quarterly += 1

    return StudentCount(
        actual_students=len(students),
        weighted_count=individual * INDIVIDUAL_WEIGHT + group,
        individual_students=individual,
        individual_count=individual * INDIVIDUAL_WEIGHT,
        group_students=group,
        group_count=group,
        robotics_participants=robotics,
        robotics_non_participants=len(students) - robotics,
        monthly_payment_students=monthly,
        quarterly_payment_students=quarterly,
    )


def revenue_overview(students: list[StudentWithClass], today: date | None = None) -> RevenueOverview:
    summary = tuition.generate_payment_summary(students, today)
    return RevenueOverview(
        projected_monthly_revenue=summary.total_monthly_revenue,
        weekly_revenue=round_half_up(summary.total_monthly_revenue / 4),
    )


def revenue_by_class_type(rows: list[PaymentRow]) -> pd.DataFrame:
    """
    Monthly-equivalent net revenue per class type.
    """
    df = pd.DataFrame([
        {
            "class_type": r.calculation.class_type,
            "monthly_revenue": r.calculation.net_amount / (3 if r.calculation.payment_cadence == QUARTERLY else 1),
        }
        for r in rows
    ])
    if df.empty:
        return pd.DataFrame(columns=["class_type", "students", "monthly_revenue"])
    out = (
        df.groupby("class_type", as_index=False)
        .agg(students=("monthly_revenue", "size"), monthly_revenue=("monthly_revenue", "sum"))
        .sort_values("class_type")
        .reset_index(drop=True)
    )
    out["monthly_revenue"] = out["monthly_revenue"].map(round_half_up)
    return out
