"""
utils.py
Validation, exports, sample data.
"""

from __future__ import annotations

import pandas as pd

import students
from models import CLASS_TYPES, PAYMENT_CADENCES, PaymentRow


def validate_student_inputs(name: str, class_type: str, payment_type: str, payment_day) -> list[str]:
    errors: list[str] = []
    if not name.strip():
        errors.append("Student name is required.")
    if class_type not in CLASS_TYPES:
        errors.append("Class type must be individual or group.")
    if payment_type not in PAYMENT_CADENCES:
        errors.append("Payment type must be monthly or quarterly.")
    try:
        day = int(payment_day)
        if not 1 <= day <= 31:
            errors.append("Payment day must be between 1 and 31.")
    except (TypeError, ValueError):
        errors.append("Payment day must be a whole number.")
    return errors


def payment_rows_to_frame(rows: list[PaymentRow]) -> pd.DataFrame:
    columns = [
        "student_id", "name", "class_type", "duration_hours", "payment_cadence",
        "robotics_included", "gross_amount", "discount_rate_percent", "discount_amount",
        "net_amount", "next_payment_date", "status", "days_until_due",
    ]
    records = []
    for r in rows:
        calc = r.calculation
        records.append({
            "student_id": calc.student_id,
            "name": calc.student_name,
            "class_type": calc.class_type,
            "duration_hours": calc.duration_hours,
            "payment_cadence": calc.payment_cadence,
            "robotics_included": calc.robotics_included,
            "gross_amount": calc.gross_amount,
            "discount_rate_percent": calc.discount_rate_percent,
            "discount_amount": calc.discount_amount,
            "net_amount": calc.net_amount,
            "next_payment_date": r.next_payment_date.isoformat(),
            "status": r.payment_status.status,
            "days_until_due": r.payment_status.days_until_due,
        })
    return pd.DataFrame(records, columns=columns)


def payments_to_csv_bytes(rows: list[PaymentRow]) -> bytes:
    return payment_rows_to_frame(rows).to_csv(index=False).encode("utf-8")


def progress_to_csv_bytes(records) -> bytes:
    df = pd.DataFrame([
        {
            "student_id": p.student_id,
            "course_type": p.course_type,
            "current_week": p.current_week,
            "total_weeks": p.total_weeks,
            "progress_percentage": p.progress_percentage,
            "status": p.status_text,
        }
        for p in records
    ])
    return df.to_csv(index=False).encode("utf-8")


def insert_sample_data() -> list[int]:
    """
    Insert 4 sample students covering both class types and cadences
    (adds new rows each time it runs).
    """
    samples = [
        dict(name="Minji Kim", grade="Grade 5", class_type="individual", class_duration="1 hour",
             payment_type="monthly", payment_day=5, robotics_option=True, robotics_day="wed"),
        dict(name="Joon Park", grade="Grade 7", class_type="group", class_duration="2 hours",
             payment_type="quarterly", payment_day=20, robotics_option=False),
        dict(name="Seoyeon Lee", grade="Grade 3", class_type="group", class_duration="1.5 hours",
             payment_type="monthly", payment_day=31, robotics_option=False),
        dict(name="Hyun Choi", grade="Grade 9", class_type="individual", class_duration="1.5 hours",
             payment_type="quarterly", payment_day=12, robotics_option=True, robotics_day="sat"),
    ]
    return [students.add_student(**s) for s in samples]
