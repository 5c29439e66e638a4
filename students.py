"""
students.py
Student roster data access (students + their class row + enrollment progress).
"""

from __future__ import annotations

import logging
from datetime import datetime

import attendance
import db
from models import (
    PAYMENT_CADENCES,
    StudentClass,
    StudentWithClass,
    course_type_for_cadence,
    normalize_class_type,
    normalize_duration,
)

logger = logging.getLogger(__name__)


def _class_params(class_type, class_duration, payment_type, payment_day, robotics_option, robotics_day) -> tuple:
    """
    Normalized student_classes values; raises ValueError before anything is written.
    """
    if payment_type not in PAYMENT_CADENCES:
        raise ValueError(f"Unknown payment type: {payment_type!r}")
    day = int(payment_day)
    if not 1 <= day <= 31:
        raise ValueError(f"payment_day must be between 1 and 31, got {payment_day!r}")
    return (
        normalize_class_type(class_type),
        str(normalize_duration(class_duration)),
        payment_type,
        day,
        1 if robotics_option else 0,
        robotics_day if robotics_option else None,
    )


def add_student(
    name: str,
    class_type: str,
    class_duration,
    payment_type: str,
    payment_day: int,
    robotics_option: bool = False,
    robotics_day: str | None = None,
    grade: str | None = None,
    parent_name: str | None = None,
    parent_phone: str | None = None,
    notes: str | None = None,
) -> int:
    """
    Enroll a student: roster row, class row and a fresh (week 0) attendance progress,
    all in one transaction. Invalid class data raises ValueError and writes nothing.
    """
    if not name.strip():
        raise ValueError("Student name is required")
    class_params = _class_params(class_type, class_duration, payment_type, payment_day, robotics_option, robotics_day)

    with db.get_conn() as conn:
        cur = conn.execute(
            """
            INSERT INTO students(name, grade, parent_name, parent_phone, notes, created_at)
            VALUES(?,?,?,?,?,?)
            """,
            (name.strip(), grade, parent_name, parent_phone, notes, datetime.now().isoformat(timespec="seconds")),
        )
        student_id = cur.lastrowid
        conn.execute(
            """
            INSERT INTO student_classes(student_id, class_type, class_duration, payment_type, payment_day, robotics_option, robotics_day)
            VALUES(?,?,?,?,?,?,?)
            """,
            (student_id, *class_params),
        )
        attendance.insert_progress(conn, student_id, course_type_for_cadence(payment_type))

    logger.info("Enrolled student %s (%s)", student_id, name.strip())
    return student_id


def update_student_class(
    student_id: int,
    class_type: str,
    class_duration,
    payment_type: str,
    payment_day: int,
    robotics_option: bool = False,
    robotics_day: str | None = None,
) -> None:
    class_params = _class_params(class_type, class_duration, payment_type, payment_day, robotics_option, robotics_day)
    # Progress is realigned with the new cadence the next time it is loaded for display
    db.execute(
        """
        UPDATE student_classes
        SET class_type=?, class_duration=?, payment_type=?, payment_day=?, robotics_option=?, robotics_day=?
        WHERE student_id=?
        """,
        (*class_params, student_id),
    )


def delete_student(student_id: int) -> None:
    # class row and attendance progress go with it (ON DELETE CASCADE)
    db.execute("DELETE FROM students WHERE id = ?", (student_id,))
    logger.info("Deleted student %s", student_id)


def _class_from_row(row) -> StudentClass:
    return StudentClass(
        class_type=normalize_class_type(row["class_type"]),
        duration_hours=normalize_duration(row["class_duration"]),
        payment_cadence=row["payment_type"],
        robotics_option=bool(row["robotics_option"]),
        payment_day=int(row["payment_day"]),
        robotics_day=row["robotics_day"],
    )


def fetch_students_with_class(search: str = "") -> list[StudentWithClass]:
    sql = "SELECT * FROM students WHERE 1=1"
    params = []
    if search.strip():
        sql += " AND (name LIKE ? OR parent_phone LIKE ?)"
        like = f"%{search.strip()}%"
        params.extend([like, like])
    sql += " ORDER BY name ASC"

    rows = db.fetch_all(sql, tuple(params))
    classes: dict[int, list[StudentClass]] = {}
    for c in db.fetch_all("SELECT * FROM student_classes ORDER BY id ASC"):
        classes.setdefault(c["student_id"], []).append(_class_from_row(c))

    return [
        StudentWithClass(
            id=r["id"],
            name=r["name"],
            grade=r["grade"],
            parent_name=r["parent_name"],
            parent_phone=r["parent_phone"],
            notes=r["notes"],
            student_classes=classes.get(r["id"], []),
        )
        for r in rows
    ]
