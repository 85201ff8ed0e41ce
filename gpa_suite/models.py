"""
Record data models.

A record is an ordered list of Semester objects; the order is chronological
and is never re-sorted. SemesterStats and GPAResult are derived values and
are never persisted.
"""

import math
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List


def new_id() -> str:
    return uuid.uuid4().hex[:9]


def normalise_name(name: Any) -> str:
    """Key used to match attempts of the same course: trimmed, lowercased, exact."""
    if name is None:
        return ""
    return str(name).strip().lower()


def coerce_credits(value: Any) -> float:
    """
    Turn a credits value into a usable number.

    Non-numeric, non-finite and negative values become 0.0, which keeps the
    course out of every point/credit sum.
    """
    if isinstance(value, bool):
        return 0.0
    try:
        credits = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(credits) or credits < 0:
        return 0.0
    return credits


@dataclass
class Course:
    """One attempt at one course within one semester."""

    id: str = field(default_factory=new_id)
    name: str = ""
    grade: str = ""
    credits: float = 0.0
    is_retake: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "grade": self.grade,
            "credits": self.credits,
            "isRetake": self.is_retake,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Course":
        if not isinstance(data, dict):
            raise ValueError(f"Course entry must be a mapping, got {type(data).__name__}")
        course_id = data.get("id") or new_id()
        return cls(
            id=str(course_id),
            name=str(data.get("name") or ""),
            grade=str(data.get("grade") or ""),
            credits=coerce_credits(data.get("credits", 0)),
            is_retake=bool(data.get("isRetake", data.get("is_retake", False))),
        )


@dataclass
class Semester:
    """An ordered container of courses with a display name."""

    id: str = field(default_factory=new_id)
    name: str = ""
    courses: List[Course] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "courses": [course.to_dict() for course in self.courses],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Semester":
        if not isinstance(data, dict):
            raise ValueError(f"Semester entry must be a mapping, got {type(data).__name__}")
        courses = data.get("courses", [])
        if not isinstance(courses, list):
            raise ValueError("Semester 'courses' must be a list")
        return cls(
            id=str(data.get("id") or new_id()),
            name=str(data.get("name") or ""),
            courses=[Course.from_dict(c) for c in courses],
        )


@dataclass
class SemesterStats:
    semester_credits: float
    semester_gpa: float
    running_cgpa: float
    revised_cgpa: float  # cumulative GPA once every recorded retake is applied


@dataclass
class GPAResult:
    gpa: float
    total_credits: float
    total_points: float
