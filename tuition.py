"""
tuition.py
Tuition calculation: rate table, discounts, payment periods, payment status and summaries.

Everything here is a pure function of its inputs (plus "today"/"now", which callers
may pass explicitly). `calculate` returns a zero-value result instead of raising;
the batch helpers log and skip students that fail.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, time, timedelta

from dates import add_months, last_day_of_month, on_day
from models import (
    DISCOUNT_POLICIES,
    INDIVIDUAL,
    MONTHLY,
    MONTHS_IN_PERIOD,
    QUARTERLY,
    ROBOTICS_MONTHLY_RATE,
    TUITION_RATES,
    WEEKS_IN_PERIOD,
    PaymentRow,
    PaymentStatus,
    PaymentSummary,
    StudentWithClass,
    TuitionCalculation,
    round_half_up,
)

logger = logging.getLogger(__name__)

OVERDUE = "overdue"
DUE = "due"
UPCOMING = "upcoming"

DUE_WINDOW_DAYS = 3
THIS_WEEK_DAYS = 7


def base_amount(class_type: str, duration_hours: float, cadence: str) -> int:
    rate = TUITION_RATES[class_type][float(duration_hours)]
    if class_type == INDIVIDUAL:
        # per-week rate billed for every lesson week in the period
        return rate * WEEKS_IN_PERIOD[cadence]
    return rate * MONTHS_IN_PERIOD[cadence]


def robotics_amount(cadence: str) -> int:
    return ROBOTICS_MONTHLY_RATE * MONTHS_IN_PERIOD[cadence]


def discount_for(gross_amount: int, robotics_included: bool, cadence: str) -> tuple[list[str], int, int]:
    """
    Returns (policy names, total rate %, discount amount).
    Rates are summed first and rounded once.
    """
    policies: list[str] = []
    rate = 0

    if not robotics_included:
        policy = DISCOUNT_POLICIES["no_robotics"]
        rate += policy.rate_percent
        policies.append(policy.name)

    if cadence == QUARTERLY:
        policy = DISCOUNT_POLICIES["quarterly"]
        rate += policy.rate_percent
        policies.append(policy.name)

    return policies, rate, round_half_up(gross_amount * rate / 100)


def payment_period(cadence: str, today: date | None = None) -> tuple[date, date]:
    """
    First day of the current month through the last day of the month
    (monthly) or of the third month (quarterly).
    """
    today = today or date.today()
    start = today.replace(day=1)
    last_month = add_months(start, MONTHS_IN_PERIOD.get(cadence, 1) - 1)
    end = last_month.replace(day=last_day_of_month(last_month.year, last_month.month))
    return start, end


def empty_calculation(student: StudentWithClass, cadence: str = MONTHLY, today: date | None = None) -> TuitionCalculation:
    start, end = payment_period(cadence, today)
    return TuitionCalculation(
        student_id=student.id,
        student_name=student.name,
        class_type=None,
        duration_hours=None,
        payment_cadence=cadence,
        robotics_included=False,
        base_amount=0,
        robotics_amount=0,
        gross_amount=0,
        discount_policies_applied=[],
        discount_rate_percent=0,
        discount_amount=0,
        net_amount=0,
        payment_period_start=start,
        payment_period_end=end,
        monthly_rate=0,
        weekly_rate=0,
    )


def calculate(
    student: StudentWithClass,
    payment_cadence: str = MONTHLY,
    robotics_included: bool = False,
    today: date | None = None,
) -> TuitionCalculation:
    """
    Billing breakdown for the student's first class.

    Robotics is included when either the class opted in or the caller asks for it.
    Students without a class record get the zero-value calculation.
    """
    student_class = student.primary_class
    if student_class is None:
        logger.warning("Student %s has no class record, returning empty calculation", student.id)
        return empty_calculation(student, payment_cadence, today)

    with_robotics = bool(student_class.robotics_option or robotics_included)

    try:
        base = base_amount(student_class.class_type, student_class.duration_hours, payment_cadence)
        robotics = robotics_amount(payment_cadence) if with_robotics else 0
    except (KeyError, TypeError, ValueError):
        logger.warning(
            "Student %s has unusable class data (%s, %r, %s), returning empty calculation",
            student.id, student_class.class_type, student_class.duration_hours, payment_cadence,
        )
        return empty_calculation(student, payment_cadence, today)
    gross = base + robotics

    policies, rate, discount = discount_for(gross, with_robotics, payment_cadence)
    net = gross - discount

    start, end = payment_period(payment_cadence, today)

    return TuitionCalculation(
        student_id=student.id,
        student_name=student.name,
        class_type=student_class.class_type,
        duration_hours=student_class.duration_hours,
        payment_cadence=payment_cadence,
        robotics_included=with_robotics,
        base_amount=base,
        robotics_amount=robotics,
        gross_amount=gross,
        discount_policies_applied=policies,
        discount_rate_percent=rate,
        discount_amount=discount,
        net_amount=net,
        payment_period_start=start,
        payment_period_end=end,
        monthly_rate=round_half_up(net / MONTHS_IN_PERIOD[payment_cadence]),
        weekly_rate=round_half_up(net / WEEKS_IN_PERIOD[payment_cadence]),
    )


def calculate_next_payment_date(
    payment_day: int,
    last_payment_date: date | None = None,
    today: date | None = None,
) -> date:
    """
    Next billing date on `payment_day`, clamped to the end of shorter months
    (day 31 in February => Feb 28/29).

    - With a last payment: the month after it.
    - Otherwise: this month if the date is still ahead of today, else next month.
    """
    if not 1 <= payment_day <= 31:
        raise ValueError(f"payment_day must be between 1 and 31, got {payment_day!r}")

    if last_payment_date is not None:
        target = add_months(last_payment_date.replace(day=1), 1)
        return on_day(target.year, target.month, payment_day)

    today = today or date.today()
    candidate = on_day(today.year, today.month, payment_day)
    if candidate <= today:
        following = add_months(today.replace(day=1), 1)
        candidate = on_day(following.year, following.month, payment_day)
    return candidate


def get_payment_status(next_payment_date: date, now: datetime | None = None) -> PaymentStatus:
    now = now or datetime.now()
    gap = datetime.combine(next_payment_date, time.min) - now
    days = math.ceil(gap / timedelta(days=1))

    if days < 0:
        status = OVERDUE
    elif days <= DUE_WINDOW_DAYS:
        status = DUE
    else:
        status = UPCOMING
    return PaymentStatus(status=status, days_until_due=days)


def _payment_row(student: StudentWithClass, today: date, now: datetime) -> PaymentRow:
    student_class = student.primary_class
    calc = calculate(student, student_class.payment_cadence, today=today)
    next_date = calculate_next_payment_date(student_class.payment_day, today=today)
    return PaymentRow(
        student=student,
        calculation=calc,
        next_payment_date=next_date,
        payment_status=get_payment_status(next_date, now),
    )


def _clock(today: date | None) -> tuple[date, datetime]:
    if today is None:
        now = datetime.now()
        return now.date(), now
    return today, datetime.combine(today, time.min)


def calculate_payment_rows(students: list[StudentWithClass], today: date | None = None) -> list[PaymentRow]:
    """
    One row per student with a class; students that fail are logged and left out.
    """
    today, now = _clock(today)
    rows: list[PaymentRow] = []
    for student in students:
        if student.primary_class is None:
            continue
        try:
            rows.append(_payment_row(student, today, now))
        except Exception:
            logger.exception("Error calculating payment for student %s", student.id)
    return rows


def generate_payment_summary(students: list[StudentWithClass], today: date | None = None) -> PaymentSummary:
    total_monthly_revenue = 0.0
    overdue = 0
    upcoming = 0
    due_this_week = 0

    for row in calculate_payment_rows(students, today):
        calc = row.calculation
        if calc.payment_cadence == QUARTERLY:
            total_monthly_revenue += calc.net_amount / 3
        else:
            total_monthly_revenue += calc.net_amount

        status = row.payment_status
        if status.status == OVERDUE:
            overdue += 1
            continue
        upcoming += 1
        if status.days_until_due <= THIS_WEEK_DAYS:
            due_this_week += 1

    return PaymentSummary(
        total_students=len(students),
        total_monthly_revenue=round_half_up(total_monthly_revenue),
        overdue_payments=overdue,
        upcoming_payments=upcoming,
        payments_due_this_week=due_this_week,
    )
