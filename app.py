"""
app.py
Streamlit admin console for the coding academy (roster, attendance, schedule, tuition, stats).
Run: streamlit run app.py
"""

from __future__ import annotations

from datetime import date
import pandas as pd
import streamlit as st

import attendance
import db
import log_config
import schedule
import stats
import students
import tuition
import utils
from models import CLASS_STATUSES, CLASS_TYPES, COURSE_CONFIGS, DAY_LABELS, DURATIONS, PAYMENT_CADENCES

st.set_page_config(page_title="Academy Admin", layout="wide")


def init_once():
    log_config.configure_logging()
    db.init_db()


def load_roster():
    roster = students.fetch_students_with_class()
    progress = attendance.load_progress_for_display(roster)
    return roster, progress


def won(amount: int) -> str:
    return f"₩{amount:,}"


def dashboard_page():
    st.header("📊 Dashboard")

    roster, progress = load_roster()
    summary = tuition.generate_payment_summary(roster)
    att = attendance.attendance_stats(progress.values())

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Students", summary.total_students)
    c2.metric("Monthly revenue", won(summary.total_monthly_revenue))
    c3.metric("Payments due this week", summary.payments_due_this_week)
    c4.metric("Feedback due", att.feedback_period_students)

    st.divider()

    st.subheader("Feedback period")
    by_id = {s.id: s for s in roster}
    due = [
        {"name": by_id[p.student_id].name, "week": f"{p.current_week}/{p.total_weeks}", "status": p.status_text}
        for p in progress.values()
        if p.is_feedback_period and p.student_id in by_id
    ]
    if due:
        st.dataframe(pd.DataFrame(due), use_container_width=True, hide_index=True)
    else:
        st.caption("No students in their feedback week.")


def student_form():
    st.subheader("➕ Add Student")

    col1, col2, col3 = st.columns(3)
    with col1:
        name = st.text_input("Name")
        grade = st.text_input("Grade")
        parent_phone = st.text_input("Parent phone")
    with col2:
        class_type = st.selectbox("Class type", options=list(CLASS_TYPES))
        duration = st.selectbox("Duration (hours)", options=list(DURATIONS))
        payment_type = st.selectbox("Payment type", options=list(PAYMENT_CADENCES))
    with col3:
        payment_day = st.number_input("Payment day", min_value=1, max_value=31, value=1, step=1)
        robotics = st.checkbox("Robotics option")
        robotics_day = st.selectbox("Robotics day", ["wed", "sat"], disabled=not robotics)

    errors = utils.validate_student_inputs(name, class_type, payment_type, payment_day)
    if name and errors:
        for e in errors:
            st.error(e)

    if st.button("Save", type="primary", disabled=bool(errors)):
        students.add_student(
            name=name,
            class_type=class_type,
            class_duration=duration,
            payment_type=payment_type,
            payment_day=int(payment_day),
            robotics_option=robotics,
            robotics_day=robotics_day,
            grade=grade.strip() or None,
            parent_phone=parent_phone.strip() or None,
        )
        st.success("Student added.")
        st.rerun()


def students_page():
    st.header("👥 Students")

    with st.sidebar:
        st.subheader("Search")
        search = st.text_input("Search (name/phone)")

    roster = students.fetch_students_with_class(search=search)
    rows = []
    for s in roster:
        c = s.primary_class
        rows.append({
            "id": s.id,
            "name": s.name,
            "grade": s.grade,
            "class_type": c.class_type if c else None,
            "duration_hours": c.duration_hours if c else None,
            "payment_type": c.payment_cadence if c else None,
            "payment_day": c.payment_day if c else None,
            "robotics": c.robotics_option if c else None,
        })
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    st.divider()

    if roster:
        options = {f"{s.name} - ID {s.id}": s for s in roster}
        chosen = options[st.selectbox("Student", list(options.keys()))]
        c = chosen.primary_class
        col1, col2 = st.columns(2)
        with col1:
            new_cadence = st.selectbox(
                "Change payment type",
                options=list(PAYMENT_CADENCES),
                index=list(PAYMENT_CADENCES).index(c.payment_cadence) if c else 0,
            )
            if st.button("Update payment type", disabled=c is None):
                students.update_student_class(
                    chosen.id, c.class_type, c.duration_hours, new_cadence, c.payment_day,
                    c.robotics_option, c.robotics_day,
                )
                st.success("Class updated.")
                st.rerun()
        with col2:
            confirm = st.checkbox("Confirm delete", value=False, key="del_confirm")
            if st.button("Delete", type="secondary", disabled=not confirm):
                students.delete_student(chosen.id)
                st.success("Student deleted.")
                st.rerun()

    st.divider()
    student_form()


def attendance_page():
    st.header("✅ Attendance")

    roster, progress = load_roster()
    if not roster:
        st.info("No students yet. Add a student first.")
        return

    if st.button("Mark everyone present", type="primary"):
        results = attendance.mark_class_present([s.id for s in roster])
        missing = [sid for sid, r in results.items() if not r.success]
        if missing:
            st.warning(f"No progress record for: {', '.join(str(m) for m in missing)}")
        st.rerun()

    for s in roster:
        p = progress.get(s.id)
        col1, col2, col3, col4, col5 = st.columns([3, 4, 1, 1, 1])
        col1.write(f"**{s.name}**")
        if p is None:
            col2.caption("No progress record")
            continue
        col2.progress(p.progress_percentage / 100, text=f"{p.config.label}: {p.status_text} ({p.progress_percentage}%)")
        if col3.button("+1", key=f"inc_{s.id}", disabled=p.is_complete):
            attendance.update_progress(s.id, attendance.INCREMENT)
            st.rerun()
        if col4.button("-1", key=f"dec_{s.id}", disabled=p.current_week == 0):
            attendance.update_progress(s.id, attendance.DECREMENT)
            st.rerun()
        if col5.button("Reset", key=f"reset_{s.id}"):
            attendance.update_progress(s.id, attendance.RESET)
            st.rerun()


def schedule_page():
    st.header("🗓️ Schedule")

    roster = students.fetch_students_with_class()
    slots = schedule.list_schedules()

    by_day = schedule.students_by_day(slots)
    cols = st.columns(7)
    for day, col in zip(range(7), cols):
        col.markdown(f"**{DAY_LABELS[day]}**")
        for s in by_day[day]:
            col.caption(f"{s.start_time} {s.student_name} ({s.status})")

    st.divider()

    if not roster:
        st.info("No students yet. Add a student first.")
        return

    st.subheader("➕ Add class slot")
    options = {f"{s.name} - ID {s.id}": s for s in roster}
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        chosen = options[st.selectbox("Student", list(options.keys()), key="sched_student")]
    with col2:
        day = st.selectbox("Day", options=list(range(7)), format_func=lambda d: DAY_LABELS[d])
    with col3:
        start = st.text_input("Start time (HH:MM)", value="16:00")
    with col4:
        status = st.selectbox("Status", options=list(CLASS_STATUSES))

    if st.button("Add slot", type="primary"):
        try:
            schedule.create_schedule(chosen.id, day, start, status)
        except ValueError as e:
            st.error(str(e))
        else:
            st.success("Slot added.")
            st.rerun()

    if slots:
        st.divider()
        st.subheader("Edit slot")
        slot_options = {f"{s.day_label} {s.start_time} - {s.student_name} (#{s.id})": s for s in slots}
        slot = slot_options[st.selectbox("Slot", list(slot_options.keys()))]
        col1, col2 = st.columns(2)
        with col1:
            new_status = st.selectbox(
                "Change status",
                options=list(CLASS_STATUSES),
                index=list(CLASS_STATUSES).index(slot.status),
                key="sched_status",
            )
            if st.button("Update status"):
                schedule.update_schedule(slot.id, status=new_status)
                st.success("Slot updated.")
                st.rerun()
        with col2:
            confirm = st.checkbox("Confirm delete", value=False, key="sched_del_confirm")
            if st.button("Delete slot", type="secondary", disabled=not confirm):
                schedule.delete_schedule(slot.id)
                st.success("Slot deleted.")
                st.rerun()

        st.dataframe(schedule.schedule_to_frame(slots), use_container_width=True, hide_index=True)


def payments_page():
    st.header("💳 Payments")

    roster = students.fetch_students_with_class()
    summary = tuition.generate_payment_summary(roster)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Monthly revenue", won(summary.total_monthly_revenue))
    c2.metric("Upcoming", summary.upcoming_payments)
    c3.metric("Due this week", summary.payments_due_this_week)
    c4.metric("Overdue", summary.overdue_payments)

    st.divider()

    rows = tuition.calculate_payment_rows(roster)
    if rows:
        st.dataframe(utils.payment_rows_to_frame(rows), use_container_width=True, hide_index=True)
    else:
        st.caption("No students with a class yet.")


def statistics_page():
    st.header("📈 Statistics")

    roster, progress = load_roster()
    counts = stats.calculate_student_count(roster)
    revenue = stats.revenue_overview(roster)
    att = attendance.attendance_stats(progress.values())

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Students", counts.actual_students)
    c2.metric("Weighted count", counts.weighted_count)
    c3.metric("Weekly revenue", won(revenue.weekly_revenue))
    c4.metric("Average progress", f"{att.average_progress}%")

    st.subheader("Breakdown")
    st.dataframe(
        pd.DataFrame([
            {"group": "1:1", "students": counts.individual_students},
            {"group": "Group", "students": counts.group_students},
            {"group": "Robotics", "students": counts.robotics_participants},
            {"group": "Monthly", "students": counts.monthly_payment_students},
            {"group": "Quarterly", "students": counts.quarterly_payment_students},
        ]),
        use_container_width=True,
        hide_index=True,
    )

    st.subheader("Revenue by class type")
    st.dataframe(stats.revenue_by_class_type(tuition.calculate_payment_rows(roster)), use_container_width=True, hide_index=True)


def reports_page():
    st.header("🧾 Reports")

    roster, progress = load_roster()

    st.subheader("Export payments to CSV")
    rows = tuition.calculate_payment_rows(roster)
    if rows:
        st.download_button(
            "Download payments.csv",
            data=utils.payments_to_csv_bytes(rows),
            file_name=f"payments_{date.today().isoformat()}.csv",
            mime="text/csv",
        )
    else:
        st.caption("No payments to export.")

    st.divider()

    st.subheader("Export attendance progress to CSV")
    if progress:
        st.download_button(
            "Download attendance.csv",
            data=utils.progress_to_csv_bytes(progress.values()),
            file_name="attendance.csv",
            mime="text/csv",
        )
    else:
        st.caption("No attendance records to export.")


def settings_page():
    st.header("⚙️ Settings")

    st.subheader("Courses")
    st.dataframe(
        pd.DataFrame([
            {"course": c.label, "total_weeks": c.total_weeks, "feedback_week": c.feedback_week}
            for c in COURSE_CONFIGS.values()
        ]),
        use_container_width=True,
        hide_index=True,
    )

    st.divider()

    st.subheader("Sample data")
    st.caption("Insert 4 sample students (adds new rows each run).")
    if st.button("Insert sample data"):
        utils.insert_sample_data()
        st.success("Sample data inserted.")
        st.rerun()


def main_app():
    st.sidebar.title("🎓 Academy Admin")

    pages = ["Dashboard", "Students", "Attendance", "Schedule", "Payments", "Statistics", "Reports", "Settings"]
    if "page" not in st.session_state:
        st.session_state.page = "Dashboard"
    st.session_state.page = st.sidebar.radio("Navigate", pages, index=pages.index(st.session_state.page))

    if st.session_state.page == "Dashboard":
        dashboard_page()
    elif st.session_state.page == "Students":
        students_page()
    elif st.session_state.page == "Attendance":
        attendance_page()
    elif st.session_state.page == "Schedule":
        schedule_page()
    elif st.session_state.page == "Payments":
        payments_page()
    elif st.session_state.page == "Statistics":
        statistics_page()
    elif st.session_state.page == "Reports":
        reports_page()
    elif st.session_state.page == "Settings":
        settings_page()


# --------- App entry ---------

def run():
    init_once()
    main_app()


if __name__ == "__main__":
    run()
