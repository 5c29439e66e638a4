"""
schedule.py
Weekly class schedule: one row per student slot (day of week + start time + status).

Inputs are checked before anything is written; bad values raise ValueError.
Lookups of a missing slot return None.
"""

from __future__ import annotations

import logging
from datetime import datetime

import pandas as pd

import db
from models import ACTIVE, CLASS_STATUSES, DAY_LABELS, TIME_FORMAT, ScheduledClass, normalize_duration

logger = logging.getLogger(__name__)

_SELECT = """
    SELECT sc.*, st.name AS student_name,
           (SELECT class_duration FROM student_classes c
            WHERE c.student_id = sc.student_id ORDER BY c.id LIMIT 1) AS class_duration
    FROM schedules sc
    JOIN students st ON st.id = sc.student_id
"""


def normalize_start_time(value: str) -> str:
    """
    '9:05' / '09:05' => '09:05'. Anything that is not a clock time raises ValueError.
    """
    return datetime.strptime(str(value).strip(), TIME_FORMAT).strftime(TIME_FORMAT)


def _check_day(day_of_week) -> int:
    day = int(day_of_week)
    if not 0 <= day <= 6:
        raise ValueError(f"day_of_week must be between 0 (Sunday) and 6 (Saturday), got {day_of_week!r}")
    return day


def _check_status(status: str) -> str:
    if status not in CLASS_STATUSES:
        raise ValueError(f"Unknown class status: {status!r}")
    return status


def _from_row(row) -> ScheduledClass:
    duration = row["class_duration"]
    return ScheduledClass(
        id=row["id"],
        student_id=row["student_id"],
        student_name=row["student_name"],
        day_of_week=row["day_of_week"],
        start_time=row["start_time"],
        status=row["status"],
        duration_hours=normalize_duration(duration) if duration is not None else None,
    )


def create_schedule(student_id: int, day_of_week: int, start_time: str, status: str = ACTIVE) -> int:
    day = _check_day(day_of_week)
    start = normalize_start_time(start_time)
    _check_status(status)

    now = datetime.now().isoformat(timespec="seconds")
    schedule_id = db.execute(
        """
        INSERT INTO schedules(student_id, day_of_week, start_time, status, created_at, updated_at)
        VALUES(?,?,?,?,?,?)
        """,
        (student_id, day, start, status, now, now),
    )
    logger.info("Scheduled student %s on %s at %s", student_id, DAY_LABELS[day], start)
    return schedule_id


def get_schedule(schedule_id: int) -> ScheduledClass | None:
    row = db.fetch_one(_SELECT + " WHERE sc.id = ?", (schedule_id,))
    return _from_row(row) if row else None


def list_schedules(student_id: int | None = None) -> list[ScheduledClass]:
    sql = _SELECT
    params = []
    if student_id is not None:
        sql += " WHERE sc.student_id = ?"
        params.append(student_id)
    sql += " ORDER BY sc.day_of_week ASC, sc.start_time ASC, st.name ASC"
    return [_from_row(r) for r in db.fetch_all(sql, tuple(params))]


def update_schedule(
    schedule_id: int,
    day_of_week: int | None = None,
    start_time: str | None = None,
    status: str | None = None,
) -> ScheduledClass | None:
    """
    Change only the given fields. Returns the updated slot, or None when it does not exist.
    """
    fields = []
    params = []
    if day_of_week is not None:
        fields.append("day_of_week=?")
        params.append(_check_day(day_of_week))
    if start_time is not None:
        fields.append("start_time=?")
        params.append(normalize_start_time(start_time))
    if status is not None:
        fields.append("status=?")
        params.append(_check_status(status))

    if get_schedule(schedule_id) is None:
        logger.warning("No schedule %s to update", schedule_id)
        return None
    if fields:
        fields.append("updated_at=?")
        params.append(datetime.now().isoformat(timespec="seconds"))
        db.execute(f"UPDATE schedules SET {', '.join(fields)} WHERE id=?", (*params, schedule_id))
    return get_schedule(schedule_id)


def delete_schedule(schedule_id: int) -> bool:
    return db.execute_rowcount("DELETE FROM schedules WHERE id = ?", (schedule_id,)) > 0


def students_by_day(schedules: list[ScheduledClass]) -> dict[int, list[ScheduledClass]]:
    """
    Slots grouped by day of week; every day 0..6 is present, in time order.
    """
    days: dict[int, list[ScheduledClass]] = {day: [] for day in range(7)}
    for slot in sorted(schedules, key=lambda s: (s.day_of_week, s.start_time)):
        days[slot.day_of_week].append(slot)
    return days


def schedule_to_frame(schedules: list[ScheduledClass]) -> pd.DataFrame:
    columns = ["day", "start_time", "end_time", "student", "status"]
    records = [
        {
            "day": s.day_label,
            "start_time": s.start_time,
            "end_time": s.end_time,
            "student": s.student_name,
            "status": s.status,
        }
        for day_slots in students_by_day(schedules).values()
        for s in day_slots
    ]
    return pd.DataFrame(records, columns=columns)
