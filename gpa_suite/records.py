import datetime
import re
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from .config import (
    DEFAULT_COURSE_CREDITS,
    DEFAULT_COURSE_GRADE,
    FIRST_TERM,
    SELECTABLE_TERMS,
)
from .models import Course, Semester
from .transcript_parser import parse_transcript_locally

TERM_NAME_RE = re.compile(r"(Monsoon|Spring|Summer|Winter)\s*\(?(\d{4})\)?", re.IGNORECASE)

# term -> (next term, year offset)
NEXT_TERM = {
    "monsoon": ("Spring", 1),
    "spring": ("Summer", 0),
    "summer": ("Monsoon", 0),
    "winter": ("Spring", 0),
}


def _this_year() -> int:
    return datetime.date.today().year


# ------------------------
# Semester naming
# ------------------------
def suggest_semester_name(
    last_name: Optional[str],
    semester_count: int,
    current_year: Optional[int] = None,
) -> str:
    """
    Guess the label for the next semester from the previous one.

    "Monsoon (2023)" -> "Spring (2024)", "Spring 2024" -> "Summer (2024)".
    Anything unrecognised falls back to "Semester <n>".
    """
    if semester_count == 0:
        year = current_year if current_year is not None else _this_year()
        return f"{FIRST_TERM} ({year})"

    match = TERM_NAME_RE.search(last_name or "")
    if not match:
        return f"Semester {semester_count + 1}"

    term, offset = NEXT_TERM[match.group(1).lower()]
    return f"{term} ({int(match.group(2)) + offset})"


def semester_name_options(current_year: Optional[int] = None) -> List[str]:
    year = current_year if current_year is not None else _this_year()
    years = range(year - 4, year + 4)
    return [f"{term} ({y})" for y in years for term in SELECTABLE_TERMS]


# ------------------------
# Semester operations
# ------------------------
def add_semester(semesters: Sequence[Semester], current_year: Optional[int] = None) -> List[Semester]:
    last_name = semesters[-1].name if semesters else None
    name = suggest_semester_name(last_name, len(semesters), current_year)
    return list(semesters) + [Semester(name=name)]


def update_semester(semesters: Sequence[Semester], updated: Semester) -> List[Semester]:
    return [updated if s.id == updated.id else s for s in semesters]


def rename_semester(semesters: Sequence[Semester], semester_id: str, name: str) -> List[Semester]:
    return [replace(s, name=name) if s.id == semester_id else s for s in semesters]


def remove_semester(semesters: Sequence[Semester], semester_id: str) -> List[Semester]:
    return [s for s in semesters if s.id != semester_id]


# ------------------------
# Course operations
# ------------------------
def new_course() -> Course:
    return Course(name="", grade=DEFAULT_COURSE_GRADE, credits=DEFAULT_COURSE_CREDITS)


def add_course(semester: Semester, course: Optional[Course] = None) -> Semester:
    course = course if course is not None else new_course()
    return replace(semester, courses=list(semester.courses) + [course])


def update_course(semester: Semester, updated: Course) -> Semester:
    return replace(
        semester,
        courses=[updated if c.id == updated.id else c for c in semester.courses],
    )


def remove_course(semester: Semester, course_id: str) -> Semester:
    return replace(semester, courses=[c for c in semester.courses if c.id != course_id])


def toggle_retake(semester: Semester, course_id: str) -> Semester:
    return replace(
        semester,
        courses=[
            replace(c, is_retake=not c.is_retake) if c.id == course_id else c
            for c in semester.courses
        ],
    )


# ------------------------
# Transcript import
# ------------------------
def import_transcript(
    semesters: Sequence[Semester], raw_text: str
) -> Tuple[List[Semester], List[Semester]]:
    """
    Append the semesters parsed from raw_text.

    Returns (record, imported). When nothing is recognised the record comes
    back unchanged and imported is empty.
    """
    if not (raw_text or "").strip():
        return list(semesters), []

    imported = parse_transcript_locally(raw_text)
    if not imported:
        return list(semesters), []
    return list(semesters) + imported, imported
