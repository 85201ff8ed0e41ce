from typing import Dict, List, Optional, Tuple

# ------------------------
# Fixed 4.0 grade table
# ------------------------
# None marks a neutral grade: no points, no GPA credits.
GRADE_SCALE: List[Tuple[str, Optional[float]]] = [
    ("A", 4.0),
    ("A-", 3.7),
    ("B+", 3.3),
    ("B", 3.0),
    ("B-", 2.7),
    ("C+", 2.3),
    ("C", 2.0),
    ("C-", 1.7),
    ("D+", 1.3),
    ("D", 1.0),
    ("D-", 0.7),
    ("F", 0.0),
    ("P", None),
    ("NP", None),
    ("INC", None),
    ("W", None),
]

GRADE_POINTS: Dict[str, Optional[float]] = dict(GRADE_SCALE)
GRADE_OPTIONS: List[str] = [grade for grade, _ in GRADE_SCALE]

FAIL_GRADE = "F"
PASS_GRADE = "P"


def grade_points(grade: str) -> Optional[float]:
    """Honor points for a grade symbol; None for neutral, empty or unknown grades."""
    return GRADE_POINTS.get(grade)


def ranking_points(grade: str) -> float:
    points = grade_points(grade)
    return -1.0 if points is None else points
