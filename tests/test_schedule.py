from __future__ import annotations

import sqlite3

import pytest

import schedule
import students
from models import ScheduledClass


def enroll(name="Minji", duration="1.5 hours"):
    return students.add_student(name, "group", duration, "monthly", 5)


def test_create_and_get_schedule(temp_db):
    sid = enroll()

    slot_id = schedule.create_schedule(sid, 3, "9:30")
    slot = schedule.get_schedule(slot_id)

    assert slot == ScheduledClass(
        id=slot_id,
        student_id=sid,
        student_name="Minji",
        day_of_week=3,
        start_time="09:30",
        status="active",
        duration_hours=1.5,
    )
    assert slot.day_label == "Wednesday"
    assert slot.end_time == "11:00"


def test_get_missing_schedule_returns_none(temp_db):
    assert schedule.get_schedule(404) is None


@pytest.mark.parametrize(
    "day,start,status",
    [
        (7, "10:00", "active"),
        (-1, "10:00", "active"),
        (1, "25:00", "active"),
        (1, "ten", "active"),
        (1, "10:00", "cancelled"),
    ],
)
def test_invalid_slot_is_rejected_before_writing(temp_db, day, start, status):
    sid = enroll()

    with pytest.raises(ValueError):
        schedule.create_schedule(sid, day, start, status)

    assert schedule.list_schedules() == []


def test_slot_for_unknown_student_fails(temp_db):
    with pytest.raises(sqlite3.IntegrityError):
        schedule.create_schedule(999, 1, "10:00")


def test_list_orders_by_day_then_time(temp_db):
    a = enroll("Minji")
    b = enroll("Joon")
    schedule.create_schedule(a, 6, "10:00")
    schedule.create_schedule(b, 1, "17:00")
    schedule.create_schedule(a, 1, "09:00")

    slots = schedule.list_schedules()

    assert [(s.day_of_week, s.start_time, s.student_name) for s in slots] == [
        (1, "09:00", "Minji"),
        (1, "17:00", "Joon"),
        (6, "10:00", "Minji"),
    ]
    assert [s.day_of_week for s in schedule.list_schedules(student_id=b)] == [1]


def test_partial_update_keeps_other_fields(temp_db):
    sid = enroll()
    slot_id = schedule.create_schedule(sid, 2, "15:00")

    updated = schedule.update_schedule(slot_id, status="makeup")

    assert updated.status == "makeup"
    assert updated.day_of_week == 2
    assert updated.start_time == "15:00"

    moved = schedule.update_schedule(slot_id, day_of_week=4, start_time="16:30")
    assert (moved.day_of_week, moved.start_time, moved.status) == (4, "16:30", "makeup")


def test_update_missing_schedule_returns_none(temp_db):
    assert schedule.update_schedule(404, status="completed") is None


def test_update_with_bad_status_changes_nothing(temp_db):
    sid = enroll()
    slot_id = schedule.create_schedule(sid, 2, "15:00")

    with pytest.raises(ValueError):
        schedule.update_schedule(slot_id, status="cancelled")

    assert schedule.get_schedule(slot_id).status == "active"


def test_delete_schedule(temp_db):
    sid = enroll()
    slot_id = schedule.create_schedule(sid, 2, "15:00")

    assert schedule.delete_schedule(slot_id) is True
    assert schedule.delete_schedule(slot_id) is False
    assert schedule.get_schedule(slot_id) is None


def test_deleting_student_removes_their_slots(temp_db):
    sid = enroll()
    schedule.create_schedule(sid, 2, "15:00")

    students.delete_student(sid)

    assert schedule.list_schedules() == []


def test_students_by_day_has_every_day():
    slots = [
        ScheduledClass(1, 1, "Minji", 5, "17:00"),
        ScheduledClass(2, 2, "Joon", 5, "09:00"),
        ScheduledClass(3, 2, "Joon", 0, "11:00"),
    ]

    by_day = schedule.students_by_day(slots)

    assert sorted(by_day) == list(range(7))
    assert [s.id for s in by_day[5]] == [2, 1]
    assert [s.id for s in by_day[0]] == [3]
    assert by_day[3] == []


def test_schedule_frame(temp_db):
    sid = enroll(duration=2)
    schedule.create_schedule(sid, 6, "10:00", "planned")

    df = schedule.schedule_to_frame(schedule.list_schedules())

    assert list(df.columns) == ["day", "start_time", "end_time", "student", "status"]
    assert df.iloc[0].to_dict() == {
        "day": "Saturday",
        "start_time": "10:00",
        "end_time": "12:00",
        "student": "Minji",
        "status": "planned",
    }
