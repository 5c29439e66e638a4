"""
models.py
Domain constants and records (rates, discounts, courses, dataclasses).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP

# Class types / cadences / course types (stored as plain strings in SQLite)
INDIVIDUAL = "individual"
GROUP = "group"
CLASS_TYPES = (INDIVIDUAL, GROUP)

MONTHLY = "monthly"
QUARTERLY = "quarterly"
PAYMENT_CADENCES = (MONTHLY, QUARTERLY)

ONE_MONTH = "one_month"
THREE_MONTH = "three_month"

DURATIONS = (1.0, 1.5, 2.0)

# Base rates in KRW. Individual rates are per week, group rates per month.
TUITION_RATES = {
    INDIVIDUAL: {1.0: 50000, 1.5: 70000, 2.0: 90000},
    GROUP: {1.0: 150000, 1.5: 200000, 2.0: 250000},
}
ROBOTICS_MONTHLY_RATE = 30000

# Number of lesson weeks billed per cadence
WEEKS_IN_PERIOD = {
    MONTHLY: 4,
    QUARTERLY: 11,
}

# Months covered by one payment
MONTHS_IN_PERIOD = {
    MONTHLY: 1,
    QUARTERLY: 3,
}


@dataclass(frozen=True)
class DiscountPolicy:
    key: str
    name: str
    rate_percent: int


DISCOUNT_POLICIES = {
    "no_robotics": DiscountPolicy("no_robotics", "No-robotics discount", 10),
    "quarterly": DiscountPolicy("quarterly", "Quarterly payment discount", 5),
}


@dataclass(frozen=True)
class CourseConfig:
    total_weeks: int
    feedback_week: int
    label: str


COURSE_CONFIGS = {
    ONE_MONTH: CourseConfig(total_weeks=4, feedback_week=3, label="1-month course"),
    THREE_MONTH: CourseConfig(total_weeks=11, feedback_week=10, label="3-month course"),
}

CADENCE_COURSE_TYPES = {
    MONTHLY: ONE_MONTH,
    QUARTERLY: THREE_MONTH,
}

# Weekly schedule: day 0 is Sunday
DAY_LABELS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

ACTIVE = "active"
PLANNED = "planned"
COMPLETED = "completed"
MAKEUP = "makeup"
CLASS_STATUSES = (ACTIVE, PLANNED, COMPLETED, MAKEUP)

TIME_FORMAT = "%H:%M"


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, .5 going up (Python's round() is banker's rounding).
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def course_type_for_cadence(cadence: str) -> str:
    return CADENCE_COURSE_TYPES.get(cadence, ONE_MONTH)


_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def normalize_duration(value) -> float:
    """
    Snap a duration ("1.5 hours", "2h", 1.5, ...) to the nearest of 1, 1.5, 2.
    Unparseable input falls back to 1 hour.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        hours = float(value)
    else:
        match = _NUMBER_RE.search(str(value or ""))
        if not match:
            return DURATIONS[0]
        hours = float(match.group())
    if hours <= 0:
        return DURATIONS[0]
    return min(DURATIONS, key=lambda d: abs(d - hours))


def normalize_class_type(value: str | None) -> str:
    text = (value or "").strip().lower()
    if text in ("1:1", "individual", "private"):
        return INDIVIDUAL
    if text == GROUP:
        return GROUP
    raise ValueError(f"Unknown class type: {value!r}")


@dataclass(frozen=True)
class StudentClass:
    class_type: str
    duration_hours: float
    payment_cadence: str
    robotics_option: bool
    payment_day: int
    robotics_day: str | None = None  # 'wed' or 'sat'

    def __post_init__(self):
        # "1.5 hours", 1.4, ... become one of DURATIONS
        object.__setattr__(self, "duration_hours", normalize_duration(self.duration_hours))


@dataclass(frozen=True)
class StudentWithClass:
    id: int | None
    name: str
    grade: str | None = None
    parent_name: str | None = None
    parent_phone: str | None = None
    notes: str | None = None
    student_classes: list[StudentClass] = field(default_factory=list)

    @property
    def primary_class(self) -> StudentClass | None:
        return self.student_classes[0] if self.student_classes else None


@dataclass(frozen=True)
class TuitionCalculation:
    student_id: int | None
    student_name: str
    class_type: str | None
    duration_hours: float | None
    payment_cadence: str
    robotics_included: bool

    base_amount: int
    robotics_amount: int
    gross_amount: int

    discount_policies_applied: list[str]
    discount_rate_percent: int
    discount_amount: int

    net_amount: int

    payment_period_start: date
    payment_period_end: date

    monthly_rate: int = 0
    weekly_rate: int = 0


@dataclass(frozen=True)
class PaymentStatus:
    status: str  # 'upcoming', 'due' or 'overdue'
    days_until_due: int


@dataclass(frozen=True)
class PaymentSummary:
    total_students: int = 0
    total_monthly_revenue: int = 0
    overdue_payments: int = 0
    upcoming_payments: int = 0
    payments_due_this_week: int = 0


@dataclass(frozen=True)
class PaymentRow:
    student: StudentWithClass
    calculation: TuitionCalculation
    next_payment_date: date
    payment_status: PaymentStatus


@dataclass(frozen=True)
class AttendanceProgress:
    student_id: int
    current_week: int
    total_weeks: int
    course_type: str
    last_activity_at: datetime | None = None

    @property
    def config(self) -> CourseConfig:
        return COURSE_CONFIGS[self.course_type]

    # ----- transitions (return a new record) -----

    def increment(self, now: datetime) -> AttendanceProgress:
        return replace(
            self,
            current_week=min(self.current_week + 1, self.total_weeks),
            last_activity_at=now,
        )

    def decrement(self) -> AttendanceProgress:
        return replace(self, current_week=max(self.current_week - 1, 0))

    def reset(self) -> AttendanceProgress:
        return replace(self, current_week=0, last_activity_at=None)

    def set_week(self, week: int) -> AttendanceProgress:
        return replace(self, current_week=max(0, min(int(week), self.total_weeks)))

    def adjust_for_course_type(self, course_type: str) -> AttendanceProgress:
        total = COURSE_CONFIGS[course_type].total_weeks
        return replace(
            self,
            course_type=course_type,
            total_weeks=total,
            current_week=min(self.current_week, total),
        )

    # ----- derived signals -----

    @property
    def progress_percentage(self) -> int:
        if self.total_weeks <= 0:
            return 0
        return round_half_up(self.current_week / self.total_weeks * 100)

    @property
    def is_feedback_period(self) -> bool:
        return self.current_week >= self.config.feedback_week

    @property
    def is_complete(self) -> bool:
        return self.current_week >= self.total_weeks

    @property
    def weeks_remaining(self) -> int:
        return max(0, self.total_weeks - self.current_week)

    @property
    def weeks_until_feedback(self) -> int:
        return max(0, self.config.feedback_week - self.current_week)

    @property
    def status_text(self) -> str:
        if self.is_complete:
            return "course complete"
        if self.is_feedback_period:
            return "feedback period"
        if self.weeks_remaining <= 1:
            return "almost done"
        return f"{self.current_week}/{self.total_weeks} weeks in progress"


@dataclass(frozen=True)
class AttendanceStats:
    total_students: int = 0
    completed_students: int = 0
    feedback_period_students: int = 0
    average_progress: int = 0


NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ProgressResult:
    success: bool
    data: AttendanceProgress | None = None
    error: str | None = None

    @classmethod
    def ok(cls, data: AttendanceProgress | None = None) -> ProgressResult:
        return cls(success=True, data=data)

    @classmethod
    def not_found(cls) -> ProgressResult:
        return cls(success=False, error=NOT_FOUND)


@dataclass(frozen=True)
class ScheduledClass:
    id: int
    student_id: int
    student_name: str
    day_of_week: int
    start_time: str  # 'HH:MM'
    status: str = ACTIVE
    duration_hours: float | None = None

    @property
    def day_label(self) -> str:
        return DAY_LABELS[self.day_of_week]

    @property
    def end_time(self) -> str | None:
        if self.duration_hours is None:
            return None
        start = datetime.strptime(self.start_time, TIME_FORMAT)
        return (start + timedelta(hours=self.duration_hours)).strftime(TIME_FORMAT)
