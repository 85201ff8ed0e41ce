import logging

import streamlit as st

from gpa_suite.backend_logic import *
from gpa_suite.config import (
    DEFAULT_COURSE_CREDITS,
    DEFAULT_COURSE_GRADE,
    configure_logging,
)
from gpa_suite.grade_scale import GRADE_OPTIONS, GRADE_SCALE
from gpa_suite.io_csv import *
from gpa_suite.models import Semester
from gpa_suite.records import *
from gpa_suite.storage import RecordStore

configure_logging()
logger = logging.getLogger("gpa_suite.app")

# ------------------------
# Streamlit UI
# ------------------------

st.set_page_config(
    page_title="GPA Suite | Semester GPA, CGPA & Retake Calculator",
    page_icon="🎓",
    layout="wide",
)

st.title("🎓 GPA Suite")
st.write(
    "Track your semesters, see semester GPA and cumulative CGPA, and preview how "
    "retaken courses change your standing. Paste your course report or add semesters by hand."
)


# ------------------------
# State (loaded once, saved on every change)
# ------------------------

store = RecordStore()

if "semesters" not in st.session_state:
    st.session_state["semesters"] = store.load()
    st.session_state["editor_version"] = 0
    st.session_state["confirm_reset"] = False
    st.session_state["save_error"] = None


def commit(semesters) -> None:
    """Replace the record, persist it and redraw."""
    st.session_state["semesters"] = semesters
    st.session_state["editor_version"] += 1
    if not store.save(semesters):
        st.session_state["save_error"] = "Could not save your record to disk. Changes are kept for this session only."
    st.rerun()


# st.rerun() drops anything drawn before it, so storage errors are shown on the next run
if st.session_state["save_error"]:
    st.error(st.session_state["save_error"])
    st.session_state["save_error"] = None


semesters = st.session_state["semesters"]
summary = analyse_record(semesters)
superseded = summary["superseded"]
semester_stats = summary["semester_stats"]
result = summary["result"]


# ------------------------
# Import / export
# ------------------------

with st.expander("📋 Import course report", expanded=not semesters):
    st.markdown(
        "Paste your **course report** content. Toggle **Retake** on courses afterwards "
        "to replace previous attempts."
    )
    with st.form("import_form"):
        pasted_text = st.text_area("Course report text", height=220)
        parse_clicked = st.form_submit_button("Parse report", type="primary")

    if parse_clicked:
        if not pasted_text.strip():
            st.warning("Paste some text first.")
        else:
            updated, imported = import_transcript(semesters, pasted_text)
            if imported:
                logger.info("Imported %d semester(s) from pasted text", len(imported))
                commit(updated)
            else:
                st.warning("No valid courses found.")

    up1, up2 = st.columns(2)
    with up1:
        record_csv = st.file_uploader(
            "Or upload a CSV (Semester, Course, Grade, Credits, Retake)",
            type=["csv"],
            key="record_csv",
        )
        if record_csv is not None and st.button("Append CSV semesters"):
            try:
                csv_semesters = parse_record(validate_record_csv(read_csv_upload(record_csv)))
            except Exception as e:
                st.error(f"CSV error: {e}")
            else:
                if csv_semesters:
                    commit(list(semesters) + csv_semesters)
                else:
                    st.warning("No valid courses found in the CSV.")
    with up2:
        if semesters:
            st.download_button(
                "Download record as CSV",
                record_to_frame(semesters).to_csv(index=False).encode("utf-8"),
                file_name="gpa_record.csv",
                mime="text/csv",
            )


# ------------------------
# Academic standing
# ------------------------

st.markdown("---")
st.subheader("Academic standing")

col1, col2, col3 = st.columns(3)
with col1:
    st.metric("Cumulative GPA", f"{round_half_up(result.gpa, 2):.2f}")
with col2:
    st.metric("Total credits", f"{result.total_credits:g}")
with col3:
    st.metric("Grade points", f"{round_half_up(result.total_points, 1):.1f}")

if semesters:
    st.dataframe(stats_to_frame(semesters, semester_stats), use_container_width=True, hide_index=True)


# ------------------------
# Course history
# ------------------------

st.markdown("---")
head1, head2, head3 = st.columns([6, 1, 1])
with head1:
    st.subheader("Course history")
with head2:
    if st.button("➕ Add semester", use_container_width=True):
        commit(add_semester(semesters))
with head3:
    reset_label = "⚠️ Confirm reset?" if st.session_state["confirm_reset"] else "Reset"
    if st.button(reset_label, use_container_width=True):
        if st.session_state["confirm_reset"]:
            st.session_state["confirm_reset"] = False
            if not store.clear():
                st.session_state["save_error"] = "Could not clear the saved record on disk. It will load again next time."
            st.session_state["semesters"] = []
            st.session_state["editor_version"] += 1
            st.rerun()
        else:
            st.session_state["confirm_reset"] = True
            st.rerun()

if not semesters:
    st.info("Your records are empty. Import your course report or add semesters manually.")

term_options = semester_name_options()

for semester, stats in zip(semesters, semester_stats):
    version = st.session_state["editor_version"]
    with st.container(border=True):
        with st.form(f"semester_{semester.id}_{version}"):
            name_col, term_col = st.columns([3, 2])
            with name_col:
                new_name = st.text_input("Semester", value=semester.name, key=f"name_{semester.id}_{version}")
            with term_col:
                picked_term = st.selectbox(
                    "Pick a term",
                    [""] + term_options,
                    index=0,
                    key=f"term_{semester.id}_{version}",
                )

            edited_df = st.data_editor(
                courses_to_frame(semester.courses, superseded),
                key=f"courses_{semester.id}_{version}",
                num_rows="dynamic",
                use_container_width=True,
                hide_index=True,
                column_order=["Course", "Grade", "Credits", "Retake", "Status"],
                disabled=["Status"],
                column_config={
                    "Course": st.column_config.TextColumn("Course", width="large"),
                    "Grade": st.column_config.SelectboxColumn(
                        "Grade", options=[""] + GRADE_OPTIONS, default=DEFAULT_COURSE_GRADE
                    ),
                    "Credits": st.column_config.NumberColumn(
                        "Credits", min_value=0.0, step=0.5, default=DEFAULT_COURSE_CREDITS
                    ),
                    "Retake": st.column_config.CheckboxColumn("Retake", default=False),
                    "Status": st.column_config.TextColumn("Status"),
                },
            )

            save_col, add_col, remove_col = st.columns(3)
            with save_col:
                saved = st.form_submit_button("Save changes", type="primary")
            with add_col:
                course_added = st.form_submit_button("➕ Add course")
            with remove_col:
                removed = st.form_submit_button("Remove semester")

        if saved or course_added:
            name = picked_term or new_name.strip() or semester.name
            edited = Semester(id=semester.id, name=name, courses=frame_to_courses(edited_df))
            if course_added:
                edited = add_course(edited)
            commit(update_semester(semesters, edited))
        if removed:
            commit(remove_semester(semesters, semester.id))

        m1, m2, m3, m4 = st.columns(4)
        with m1:
            st.metric("Semester GPA", f"{round_half_up(stats.semester_gpa, 2):.2f}")
        with m2:
            st.metric("Credits earned", f"{stats.semester_credits:g}")
        with m3:
            st.metric("Running CGPA", f"{round_half_up(stats.running_cgpa, 2):.2f}")
        with m4:
            if has_improvement(stats):
                st.metric(
                    "Revised CGPA",
                    f"{round_half_up(stats.revised_cgpa, 2):.2f}",
                    delta=f"{stats.revised_cgpa - stats.running_cgpa:+.2f}",
                )

        if any(c.id in superseded for c in semester.courses):
            st.caption("Superseded attempts stay in your history but count zero points and credits toward CGPA.")


# ------------------------
# FAQ
# ------------------------

st.header("FAQ")

st.subheader("What grading scale is used?")
st.write(
    "A 4.0 scale: "
    + ", ".join(f"{grade}={points:.1f}" for grade, points in GRADE_SCALE if points is not None)
    + ". P, NP, W and INC are neutral and are excluded from GPA points and credits entirely."
)

st.subheader("Which credits count as earned?")
st.write("Credits are earned for any grade of D- or higher, and for P grades.")

st.subheader("What is the difference between semester GPA, running CGPA and revised CGPA?")
st.write(
    "Semester GPA only looks at the courses in that semester. Running CGPA is your cumulative GPA "
    "using what was known by that semester, so a later retake cannot change an earlier snapshot. "
    "Revised CGPA applies every recorded retake, including ones taken later, and shows what that "
    "semester's CGPA becomes once those retakes count."
)

st.subheader("How do retakes work?")
st.write(
    "Tick **Retake** on the newer attempt. Courses are linked by title, ignoring case and surrounding "
    "spaces, so spell the title identically across semesters. Among linked attempts only the best "
    "grade counts; lower attempts get a **Superseded** label but stay in your history."
)

st.subheader("Where is my data stored?")
st.write(
    "Only on this machine, in a local JSON file. Nothing is uploaded. Use **Reset** to clear it."
)
