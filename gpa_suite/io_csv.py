import logging
from typing import Any, List, Optional, Sequence, Set

import pandas as pd

from .backend_logic import round_half_up
from .models import Course, Semester, SemesterStats, coerce_credits, new_id

logger = logging.getLogger(__name__)

RECORD_COLUMNS = ["Semester", "Course", "Grade", "Credits", "Retake"]
EDITOR_COLUMNS = ["id", "Course", "Grade", "Credits", "Retake", "Status"]
SUPERSEDED_LABEL = "Superseded"

TRUE_STRINGS = {"true", "yes", "y", "1", "x", "retake"}

# ------------------------
# CSV helpers (UI-side)
# ------------------------

def _normalise_cols(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]
    aliases = {"credit": "credits", "name": "course", "title": "course", "term": "semester"}
    for alias, column in aliases.items():
        if alias in df.columns and column not in df.columns:
            df = df.rename(columns={alias: column})
    return df


def _text(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return _text(value).lower() in TRUE_STRINGS


def read_csv_upload(uploaded_file) -> pd.DataFrame:
    df = pd.read_csv(uploaded_file, dtype=str)
    return _normalise_cols(df)


def validate_record_csv(df: pd.DataFrame) -> pd.DataFrame:
    required = {"semester", "course", "grade", "credits"}
    missing = required - set(df.columns)
    if missing:
        raise ValueError(
            f"Missing columns: {sorted(missing)}. Expected: Semester, Course, Grade, Credits[, Retake]."
        )
    out = df[["semester", "course", "grade", "credits"]].copy()
    out["retake"] = df["retake"] if "retake" in df.columns else False
    out = out.rename(columns={c.lower(): c for c in RECORD_COLUMNS})
    return out


def parse_record(df: pd.DataFrame) -> List[Semester]:
    """
    Turn validated rows into semesters in row order.

    Only consecutive rows with the same semester name share a semester, so a
    name that appears again later starts a new one.
    """
    semesters: List[Semester] = []
    skipped = 0
    for _, row in df.iterrows():
        semester_name = _text(row.get("Semester"))
        course_name = _text(row.get("Course"))
        if not semester_name or not course_name:
            skipped += 1
            continue
        if not semesters or semesters[-1].name != semester_name:
            semesters.append(Semester(name=semester_name))
        semesters[-1].courses.append(
            Course(
                name=course_name,
                grade=_text(row.get("Grade")).upper(),
                credits=coerce_credits(row.get("Credits")),
                is_retake=_as_bool(row.get("Retake")),
            )
        )
    if skipped:
        logger.info("Skipped %d CSV row(s) without a semester or course name", skipped)
    return semesters


def record_to_frame(semesters: Sequence[Semester]) -> pd.DataFrame:
    rows = [
        {
            "Semester": semester.name,
            "Course": course.name,
            "Grade": course.grade,
            "Credits": course.credits,
            "Retake": course.is_retake,
        }
        for semester in semesters
        for course in semester.courses
    ]
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


# ------------------------
# Editor tables
# ------------------------

def courses_to_frame(courses: Sequence[Course], superseded: Optional[Set[str]] = None) -> pd.DataFrame:
    superseded = superseded or set()
    rows = [
        {
            "id": c.id,
            "Course": c.name,
            "Grade": c.grade,
            "Credits": c.credits,
            "Retake": c.is_retake,
            "Status": SUPERSEDED_LABEL if c.id in superseded else "",
        }
        for c in courses
    ]
    return pd.DataFrame(rows, columns=EDITOR_COLUMNS)


def frame_to_courses(df: pd.DataFrame) -> List[Course]:
    """
    Read the editor table back. Rows added in the editor have no id and get
    a fresh one; completely blank rows are dropped.
    """
    courses = []
    for _, row in df.iterrows():
        name = _text(row.get("Course"))
        grade = _text(row.get("Grade"))
        credits = row.get("Credits")
        if not name and not grade and (credits is None or pd.isna(credits)):
            continue
        courses.append(
            Course(
                id=_text(row.get("id")) or new_id(),
                name=name,
                grade=grade,
                credits=coerce_credits(credits),
                is_retake=_as_bool(row.get("Retake")),
            )
        )
    return courses


def stats_to_frame(semesters: Sequence[Semester], stats: Sequence[SemesterStats]) -> pd.DataFrame:
    rows = [
        {
            "Semester": semester.name,
            "Credits": s.semester_credits,
            "Semester GPA": round_half_up(s.semester_gpa, 2),
            "Running CGPA": round_half_up(s.running_cgpa, 2),
            "Revised CGPA": round_half_up(s.revised_cgpa, 2),
        }
        for semester, s in zip(semesters, stats)
    ]
    return pd.DataFrame(
        rows, columns=["Semester", "Credits", "Semester GPA", "Running CGPA", "Revised CGPA"]
    )
