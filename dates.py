"""
dates.py
Calendar helpers for billing dates (month arithmetic with end-of-month clamping).
"""

from __future__ import annotations

from datetime import date, timedelta


def last_day_of_month(year: int, month: int) -> int:
    if month == 12:
        next_month = date(year + 1, 1, 1)
    else:
        next_month = date(year, month + 1, 1)
    return (next_month - timedelta(days=1)).day


def add_months(start: date, months: int) -> date:
    """
    Add months while keeping day in valid range (e.g., Jan 31 + 1 month => Feb 28/29).
    """
    y = start.year + (start.month - 1 + months) // 12
    m = (start.month - 1 + months) % 12 + 1
    day = min(start.day, last_day_of_month(y, m))
    return date(y, m, day)


def on_day(year: int, month: int, day: int) -> date:
    """
    `day` in the given month, clamped to the month's last day.
    """
    return date(year, month, min(day, last_day_of_month(year, month)))
