from collections import OrderedDict
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence, Set, Tuple

import numpy as np

from .config import IMPROVEMENT_TOLERANCE
from .grade_scale import FAIL_GRADE, PASS_GRADE, grade_points, ranking_points
from .models import Course, GPAResult, Semester, SemesterStats, coerce_credits, normalise_name

NameIndex = Dict[str, List[Tuple[int, Course]]]


# ------------------------
# Core logic
# ------------------------
def round_half_up(x: float, places: int = 2) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(x)).quantize(quantum, rounding=ROUND_HALF_UP))


def weighted_gpa(pc: Sequence[Tuple[float, float]]) -> Tuple[float, float, float]:
    """
    pc: list of (points, credits) pairs
    returns: (credit-weighted GPA, total credits, total honor points)

    An empty list or zero total credits gives a GPA of exactly 0.0.
    """
    if len(pc) == 0:
        return 0.0, 0.0, 0.0

    arr = np.asarray(pc, dtype=float)
    points = arr[:, 0]
    credits = arr[:, 1]
    total_credits = float(credits.sum())
    total_points = float(np.dot(points, credits))
    if total_credits <= 0:
        return 0.0, 0.0, total_points

    return total_points / total_credits, total_credits, total_points


def eligible_points(course: Course) -> Optional[Tuple[float, float]]:
    """(points, credits) if the course counts toward GPA, else None."""
    points = grade_points(course.grade)
    credits = coerce_credits(course.credits)
    if points is None or credits <= 0:
        return None
    return points, credits


def build_name_index(semesters: Sequence[Semester]) -> NameIndex:
    """normalised name -> [(semester index, course), ...] in record order."""
    index: NameIndex = OrderedDict()
    for sem_idx, semester in enumerate(semesters):
        for course in semester.courses:
            name = normalise_name(course.name)
            if not name:
                continue
            index.setdefault(name, []).append((sem_idx, course))
    return index


def best_attempt(attempts: Sequence[Course]) -> Course:
    """
    Reduce a name cluster to its best attempt.

    The cluster is the first non-retake attempt (or the very first attempt if
    all are retakes) plus every retake attempt. Ties keep the earlier member.
    """
    first = next((c for c in attempts if not c.is_retake), attempts[0])
    cluster = [first] + [c for c in attempts if c.is_retake]

    best = cluster[0]
    for course in cluster[1:]:
        if ranking_points(course.grade) > ranking_points(best.grade):
            best = course
    return best


# ------------------------
# Retake supersession
# ------------------------
def analyze_retakes(semesters: Sequence[Semester]) -> Set[str]:
    """
    Ids of course attempts that are superseded by a better attempt.

    Only retake-flagged courses form clusters, and only with same-name
    attempts at the same or an earlier semester.
    """
    superseded: Set[str] = set()
    index = build_name_index(semesters)

    for sem_idx, semester in enumerate(semesters):
        for course in semester.courses:
            if not course.is_retake:
                continue
            name = normalise_name(course.name)
            if not name:
                continue

            previous = [
                other
                for other_idx, other in index[name]
                if other_idx <= sem_idx and other.id != course.id
            ]
            if not previous:
                continue

            # sorted() is stable, so equal grades keep record order
            cluster = sorted(
                [course] + previous,
                key=lambda c: ranking_points(c.grade),
                reverse=True,
            )
            superseded.update(c.id for c in cluster[1:])

    return superseded


# ------------------------
# Per-semester statistics
# ------------------------
def _semester_only(semester: Semester) -> Tuple[float, float]:
    """(semester GPA, earned credits) ignoring supersession."""
    pairs = []
    earned = 0.0
    for course in semester.courses:
        credits = coerce_credits(course.credits)
        if credits <= 0:
            continue
        points = grade_points(course.grade)
        if points is not None:
            pairs.append((points, credits))
            if course.grade != FAIL_GRADE:
                earned += credits
        elif course.grade == PASS_GRADE:
            earned += credits

    gpa, _, _ = weighted_gpa(pairs)
    return gpa, earned


def compute_semester_stats(semesters: Sequence[Semester]) -> List[SemesterStats]:
    index = build_name_index(semesters)
    global_best = {name: best_attempt([c for _, c in attempts]) for name, attempts in index.items()}

    # Both maps only ever grow with the semester index, so they carry over
    # from one iteration to the next.
    best_so_far: Dict[str, Tuple[float, float]] = OrderedDict()
    names_seen: Dict[str, None] = OrderedDict()

    stats = []
    for semester in semesters:
        for course in semester.courses:
            name = normalise_name(course.name)
            if not name:
                continue
            names_seen[name] = None

            attempt = eligible_points(course)
            if attempt is None:
                continue
            kept = best_so_far.get(name)
            if kept is None or (course.is_retake and attempt[0] > kept[0]):
                best_so_far[name] = attempt

        running_cgpa, _, _ = weighted_gpa(list(best_so_far.values()))

        revised_pairs = []
        for name in names_seen:
            attempt = eligible_points(global_best[name])
            if attempt is not None:
                revised_pairs.append(attempt)
        revised_cgpa, _, _ = weighted_gpa(revised_pairs)

        semester_gpa, semester_credits = _semester_only(semester)

        stats.append(
            SemesterStats(
                semester_credits=semester_credits,
                semester_gpa=semester_gpa,
                running_cgpa=running_cgpa,
                revised_cgpa=revised_cgpa,
            )
        )

    return stats


# ------------------------
# Whole-record result
# ------------------------
def compute_gpa_result(
    semesters: Sequence[Semester],
    superseded: Set[str],
    semester_stats: Sequence[SemesterStats],
) -> GPAResult:
    if len(semester_stats) == 0:
        return GPAResult(gpa=0.0, total_credits=0.0, total_points=0.0)

    index = build_name_index(semesters)

    pairs = []
    earned = 0.0
    for attempts in index.values():
        best = best_attempt([c for _, c in attempts])
        attempt = eligible_points(best)
        if attempt is None:
            continue
        pairs.append(attempt)
        if best.grade != FAIL_GRADE:
            earned += attempt[1]

    # P courses bypass clustering: every one not superseded counts once,
    # so two unlinked P attempts of the same course both count.
    for semester in semesters:
        for course in semester.courses:
            if course.grade == PASS_GRADE and course.id not in superseded:
                earned += coerce_credits(course.credits)

    gpa, _, total_points = weighted_gpa(pairs)
    return GPAResult(gpa=gpa, total_credits=earned, total_points=total_points)


def analyse_record(semesters: Sequence[Semester]) -> dict:
    superseded = analyze_retakes(semesters)
    semester_stats = compute_semester_stats(semesters)
    result = compute_gpa_result(semesters, superseded, semester_stats)

    return {
        "superseded": superseded,
        "semester_stats": semester_stats,
        "result": result,
    }


def has_improvement(stats: SemesterStats, tolerance: float = IMPROVEMENT_TOLERANCE) -> bool:
    return abs(stats.revised_cgpa - stats.running_cgpa) > tolerance
