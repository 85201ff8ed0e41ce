"""
Transcript parsing.

Turns a pasted "My Course Report" block into Semester objects. The report is
line-oriented: a term heading such as "Monsoon 2023" followed by course rows

    [index] [code] [title ...] [registered cr] [grade] [earned cr] [points]

Lines that fit neither shape are skipped; parsing never raises.
"""

import logging
import math
import re
from typing import List, Optional

from .models import Course, Semester

logger = logging.getLogger(__name__)

SEMESTER_HEADING_RE = re.compile(r"^(Monsoon|Spring|Summer|Winter)\s+(\d{4})$", re.IGNORECASE)
GRADE_TOKEN_RE = re.compile(r"^[A-DFP][+-]?$|^--$|^P$|^NP$|^INC$|^W$", re.IGNORECASE)
ROW_INDEX_RE = re.compile(r"^\d+$", re.ASCII)

MIN_ROW_TOKENS = 6
UNGRADED_TOKEN = "--"


def _parse_credits(token: str) -> Optional[float]:
    try:
        value = float(token)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _parse_course_row(line: str) -> Optional[Course]:
    parts = line.split()
    if len(parts) < MIN_ROW_TOKENS or not ROW_INDEX_RE.match(parts[0]):
        return None

    # earned credits and points (the last two tokens) are not kept
    reg_cr_token, grade_token = parts[-4], parts[-3]
    reg_cr = _parse_credits(reg_cr_token)
    if reg_cr is None or not GRADE_TOKEN_RE.match(grade_token):
        return None

    name = " ".join(parts[1:-4]).strip()
    grade = "" if grade_token == UNGRADED_TOKEN else grade_token.upper()
    return Course(name=name, grade=grade, credits=reg_cr, is_retake=False)


def parse_transcript_locally(raw_text: str) -> List[Semester]:
    semesters: List[Semester] = []
    current: Optional[Semester] = None
    dropped = 0

    for line in (raw_text or "").split("\n"):
        trimmed = line.strip()
        if not trimmed:
            continue

        if SEMESTER_HEADING_RE.match(trimmed):
            current = Semester(name=trimmed)
            semesters.append(current)
            continue

        course = _parse_course_row(trimmed)
        if course is None:
            continue
        if current is None or not course.name:
            dropped += 1
            logger.debug("Dropping course row outside any semester: %r", trimmed)
            continue
        current.courses.append(course)

    parsed = [s for s in semesters if s.courses]
    logger.info(
        "Parsed %d semester(s), %d course(s) from transcript text (%d row(s) dropped)",
        len(parsed),
        sum(len(s.courses) for s in parsed),
        dropped,
    )
    return parsed


async def parse_text_transcript(raw_text: str) -> List[Semester]:
    """Awaitable form of parse_transcript_locally; it never suspends."""
    return parse_transcript_locally(raw_text)
