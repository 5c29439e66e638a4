"""
attendance.py
Per-student attendance progress (weeks attended in the current course).

Mutating operations return a ProgressResult instead of raising: the only error
is "not_found". Going past the ends of the course is not an error, the counter
just saturates.
"""

from __future__ import annotations

import logging
from datetime import datetime

import db
from models import (
    COURSE_CONFIGS,
    AttendanceProgress,
    AttendanceStats,
    ProgressResult,
    StudentWithClass,
    course_type_for_cadence,
    round_half_up,
)

logger = logging.getLogger(__name__)

INCREMENT = "increment"
DECREMENT = "decrement"
RESET = "reset"
ACTIONS = (INCREMENT, DECREMENT, RESET)


def _from_row(row) -> AttendanceProgress:
    last = row["last_activity_at"]
    return AttendanceProgress(
        student_id=row["student_id"],
        current_week=row["current_week"],
        total_weeks=row["total_weeks"],
        course_type=row["course_type"],
        last_activity_at=datetime.fromisoformat(last) if last else None,
    )


def _save(progress: AttendanceProgress) -> None:
    db.execute(
        """
        UPDATE attendance_progress
        SET current_week=?, total_weeks=?, course_type=?, last_activity_at=?, updated_at=?
        WHERE student_id=?
        """,
        (
            progress.current_week,
            progress.total_weeks,
            progress.course_type,
            progress.last_activity_at.isoformat(timespec="seconds") if progress.last_activity_at else None,
            datetime.now().isoformat(timespec="seconds"),
            progress.student_id,
        ),
    )


def insert_progress(conn, student_id: int, course_type: str) -> AttendanceProgress:
    """
    Week-0 record for `student_id`, written on the caller's connection
    (enrollment inserts it in the same transaction as the student).
    """
    config = COURSE_CONFIGS[course_type]
    conn.execute(
        """
        INSERT INTO attendance_progress(student_id, current_week, total_weeks, course_type, last_activity_at, updated_at)
        VALUES(?,?,?,?,?,?)
        """,
        (student_id, 0, config.total_weeks, course_type, None, datetime.now().isoformat(timespec="seconds")),
    )
    return AttendanceProgress(student_id=student_id, current_week=0, total_weeks=config.total_weeks, course_type=course_type)


def create_progress(student_id: int, course_type: str) -> AttendanceProgress:
    with db.get_conn() as conn:
        return insert_progress(conn, student_id, course_type)


def get_progress(student_id: int) -> ProgressResult:
    row = db.fetch_one("SELECT * FROM attendance_progress WHERE student_id = ?", (student_id,))
    if row is None:
        return ProgressResult.not_found()
    return ProgressResult.ok(_from_row(row))


def list_progress() -> list[AttendanceProgress]:
    rows = db.fetch_all("SELECT * FROM attendance_progress ORDER BY student_id ASC")
    return [_from_row(r) for r in rows]


def apply_action(progress: AttendanceProgress, action: str, now: datetime) -> AttendanceProgress:
    if action == INCREMENT:
        return progress.increment(now)
    if action == DECREMENT:
        return progress.decrement()
    if action == RESET:
        return progress.reset()
    raise ValueError(f"Unknown attendance action: {action!r}")


def update_progress(student_id: int, action: str, now: datetime | None = None) -> ProgressResult:
    if action not in ACTIONS:
        raise ValueError(f"Unknown attendance action: {action!r}")

    current = get_progress(student_id)
    if not current.success:
        logger.warning("No attendance progress for student %s (%s)", student_id, action)
        return current

    updated = apply_action(current.data, action, now or datetime.now())
    _save(updated)
    return ProgressResult.ok(updated)


def set_progress_week(student_id: int, week: int) -> ProgressResult:
    current = get_progress(student_id)
    if not current.success:
        return current
    updated = current.data.set_week(week)
    _save(updated)
    return ProgressResult.ok(updated)


def adjust_progress_for_course_type(student_id: int, course_type: str) -> ProgressResult:
    current = get_progress(student_id)
    if not current.success:
        logger.warning("No attendance progress for student %s to adjust", student_id)
        return current

    updated = current.data.adjust_for_course_type(course_type)
    if updated != current.data:
        _save(updated)
        logger.info(
            "Adjusted progress for student %s: %s (%d weeks) -> %s (%d weeks), week %d",
            student_id, current.data.course_type, current.data.total_weeks,
            updated.course_type, updated.total_weeks, updated.current_week,
        )
    return ProgressResult.ok(updated)


def delete_progress(student_id: int) -> ProgressResult:
    deleted = db.execute_rowcount("DELETE FROM attendance_progress WHERE student_id = ?", (student_id,))
    if not deleted:
        return ProgressResult.not_found()
    return ProgressResult.ok()


def mark_class_present(student_ids: list[int], now: datetime | None = None) -> dict[int, ProgressResult]:
    """
    Increment every student in a class. Each update stands alone: a missing
    record only shows up as that student's not_found result.
    """
    now = now or datetime.now()
    return {sid: update_progress(sid, INCREMENT, now) for sid in student_ids}


def needs_adjustment(progress: AttendanceProgress, student: StudentWithClass) -> str | None:
    """
    Course type the record should be on, or None when it already matches
    the student's billing cadence.
    """
    student_class = student.primary_class
    if student_class is None:
        return None
    expected = course_type_for_cadence(student_class.payment_cadence)
    if progress.course_type == expected and progress.total_weeks == COURSE_CONFIGS[expected].total_weeks:
        return None
    return expected


def load_progress_for_display(students: list[StudentWithClass]) -> dict[int, AttendanceProgress]:
    """
    All progress records keyed by student id, after correcting any whose
    course length no longer matches the student's cadence.
    """
    by_student = {s.id: s for s in students}
    records: dict[int, AttendanceProgress] = {}
    for progress in list_progress():
        student = by_student.get(progress.student_id)
        expected = needs_adjustment(progress, student) if student else None
        if expected is not None:
            result = adjust_progress_for_course_type(progress.student_id, expected)
            if result.success:
                progress = result.data
        records[progress.student_id] = progress
    return records


def attendance_stats(records) -> AttendanceStats:
    records = list(records)
    if not records:
        return AttendanceStats()
    return AttendanceStats(
        total_students=len(records),
        completed_students=sum(1 for p in records if p.is_complete),
        feedback_period_students=sum(1 for p in records if p.is_feedback_period and not p.is_complete),
        average_progress=round_half_up(sum(p.progress_percentage for p in records) / len(records)),
    )
