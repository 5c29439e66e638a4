from __future__ import annotations

import pytest

import db
from models import StudentClass, StudentWithClass


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    monkeypatch.setattr(db, "DB_FILE", tmp_path / "academy_test.db")
    db.init_db()
    return db.DB_FILE


def make_student(
    student_id=1,
    name="Test Student",
    class_type="individual",
    duration=1.0,
    cadence="monthly",
    robotics=False,
    payment_day=15,
) -> StudentWithClass:
    return StudentWithClass(
        id=student_id,
        name=name,
        student_classes=[
            StudentClass(
                class_type=class_type,
                duration_hours=duration,
                payment_cadence=cadence,
                robotics_option=robotics,
                payment_day=payment_day,
            )
        ],
    )
