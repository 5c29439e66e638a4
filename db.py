"""
db.py
SQLite helpers + initialization (creates DB/tables for the roster, attendance progress and weekly schedule).
"""

from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

DB_FILE = Path(os.getenv("ACADEMY_DB_FILE") or Path(__file__).with_name("academy.db"))


@contextmanager
def get_conn():
    conn = sqlite3.connect(DB_FILE, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def execute(sql: str, params: tuple = ()) -> int:
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.lastrowid


def execute_rowcount(sql: str, params: tuple = ()) -> int:
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.rowcount


def fetch_one(sql: str, params: tuple = ()):
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.fetchone()


def fetch_all(sql: str, params: tuple = ()) -> list[sqlite3.Row]:
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.fetchall()


def _create_tables() -> None:
    execute(
        """
        CREATE TABLE IF NOT EXISTS students (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            grade TEXT,
            parent_name TEXT,
            parent_phone TEXT,
            notes TEXT,
            created_at TEXT NOT NULL
        )
        """
    )

    # One class row per student today; kept as its own table like the roster export
    execute(
        """
        CREATE TABLE IF NOT EXISTS student_classes (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            student_id INTEGER NOT NULL,
            class_type TEXT NOT NULL CHECK(class_type IN ('individual','group')),
            class_duration TEXT NOT NULL,
            payment_type TEXT NOT NULL CHECK(payment_type IN ('monthly','quarterly')),
            payment_day INTEGER NOT NULL CHECK(payment_day BETWEEN 1 AND 31),
            robotics_option INTEGER NOT NULL DEFAULT 0,
            robotics_day TEXT,
            FOREIGN KEY(student_id) REFERENCES students(id) ON DELETE CASCADE
        )
        """
    )

    execute(
        """
        CREATE TABLE IF NOT EXISTS attendance_progress (
            student_id INTEGER PRIMARY KEY,
            current_week INTEGER NOT NULL DEFAULT 0 CHECK(current_week >= 0),
            total_weeks INTEGER NOT NULL,
            course_type TEXT NOT NULL CHECK(course_type IN ('one_month','three_month')),
            last_activity_at TEXT,
            updated_at TEXT NOT NULL,
            FOREIGN KEY(student_id) REFERENCES students(id) ON DELETE CASCADE
        )
        """
    )

    # Weekly slots; day_of_week 0 = Sunday, start_time 'HH:MM'
    execute(
        """
        CREATE TABLE IF NOT EXISTS schedules (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            student_id INTEGER NOT NULL,
            day_of_week INTEGER NOT NULL CHECK(day_of_week BETWEEN 0 AND 6),
            start_time TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'active' CHECK(status IN ('active','planned','completed','makeup')),
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY(student_id) REFERENCES students(id) ON DELETE CASCADE
        )
        """
    )


def init_db() -> None:
    """
    Initialize the database (idempotent: tables are only created when missing).
    """
    _create_tables()
    logger.debug("Database ready at %s", DB_FILE)
