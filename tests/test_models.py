import math

import pytest

from gpa_suite.grade_scale import GRADE_OPTIONS, grade_points, ranking_points
from gpa_suite.models import Course, Semester, coerce_credits, normalise_name


def test_course_defaults():
    course = Course()

    assert len(course.id) == 9
    assert course.name == ""
    assert course.grade == ""
    assert course.credits == 0.0
    assert course.is_retake is False


def test_semester_defaults():
    semester = Semester(name="Monsoon (2024)")

    assert semester.courses == []
    assert semester.id != Semester().id


def test_course_dict_uses_persisted_keys():
    course = Course(id="abc", name="Calc", grade="B+", credits=3, is_retake=True)
    assert course.to_dict() == {
        "id": "abc",
        "name": "Calc",
        "grade": "B+",
        "credits": 3,
        "isRetake": True,
    }
    assert Course.from_dict({"id": "abc", "name": "Calc", "is_retake": True}).is_retake is True


def test_from_dict_rejects_non_mappings():
    with pytest.raises(ValueError):
        Course.from_dict(["not", "a", "dict"])
    with pytest.raises(ValueError):
        Semester.from_dict({"courses": {"a": 1}})


@pytest.mark.parametrize(
    "value, expected",
    [(4, 4.0), ("3.5", 3.5), ("abc", 0.0), (None, 0.0), (-2, 0.0), (math.inf, 0.0), (True, 0.0)],
)
def test_coerce_credits(value, expected):
    assert coerce_credits(value) == expected


def test_normalise_name():
    assert normalise_name("  Intro to Psych ") == "intro to psych"
    assert normalise_name(None) == ""
    # no fuzzy matching: punctuation and inner spacing still matter
    assert normalise_name("Intro  to Psych") != normalise_name("Intro to Psych")


def test_grade_scale_lookups():
    assert GRADE_OPTIONS[0] == "A"
    assert GRADE_OPTIONS[-1] == "W"
    assert grade_points("B-") == 2.7
    assert grade_points("F") == 0.0
    assert grade_points("P") is None
    assert grade_points("") is None
    assert grade_points("a") is None
    assert ranking_points("NP") == -1.0
    assert ranking_points("F") == 0.0
