"""
Academic Calculator Module
Derives letter grades, credit load and GPA
Pure functions of record snapshots; nothing here writes to the registry
"""

from typing import Dict, Iterable, List
import numpy as np

from models.enums import Grade
from models.entities import Course, Enrollment


# Closed lower bounds, checked in descending order
GRADE_BANDS = (
    (97.0, Grade.A_PLUS),
    (93.0, Grade.A),
    (90.0, Grade.A_MINUS),
    (87.0, Grade.B_PLUS),
    (83.0, Grade.B),
    (80.0, Grade.B_MINUS),
    (77.0, Grade.C_PLUS),
    (73.0, Grade.C),
    (70.0, Grade.C_MINUS),
    (67.0, Grade.D_PLUS),
    (60.0, Grade.D),
)


def letter_grade(score: float) -> Grade:
    """
    Map a numeric score to its letter grade

    Args:
        score: Numeric score (0-100)

    Returns:
        The first band whose lower bound the score reaches, else F
    """
    for lower_bound, grade in GRADE_BANDS:
        if score >= lower_bound:
            return grade
    return Grade.F


def credit_load(enrollments: Iterable[Enrollment], courses: Dict[str, Course]) -> int:
    """
    Sum the credit hours behind active enrollments

    Args:
        enrollments: One student's enrollments
        courses: Course lookup by id

    Returns:
        Total credit hours; enrollments whose course is gone count as 0
    """
    credits = [
        courses[e.course_id].credit_hours
        for e in enrollments
        if e.active and e.course_id in courses
    ]
    return int(np.sum(credits, dtype=int))


def _graded_credits(enrollments: Iterable[Enrollment],
                    courses: Dict[str, Course]) -> List[tuple]:
    """(grade points, credit hours) for each completed enrollment with a known course"""
    graded = []
    for enrollment in enrollments:
        if not enrollment.completed:
            continue

        course = courses.get(enrollment.course_id)
        if course is None:
            continue

        grade = enrollment.letter_grade or letter_grade(enrollment.numeric_grade)
        graded.append((grade.points, course.credit_hours))

    return graded


def calculate_gpa(enrollments: Iterable[Enrollment], courses: Dict[str, Course]) -> float:
    """
    Credit-weighted grade point average over completed enrollments

    Args:
        enrollments: One student's enrollments
        courses: Course lookup by id

    Returns:
        Unrounded GPA, 0.0 when nothing has been graded
    """
    graded = _graded_credits(enrollments, courses)

    if not graded:
        return 0.0

    points = np.array([p for p, _ in graded], dtype=float)
    weights = np.array([c for _, c in graded], dtype=float)

    if weights.sum() <= 0:
        return 0.0

    return float(np.average(points, weights=weights))


def academic_summary(enrollments: Iterable[Enrollment],
                     courses: Dict[str, Course]) -> Dict:
    """
    Aggregate figures for one student's record

    Returns:
        Dictionary with course counts, credit totals and GPA
    """
    enrollments = list(enrollments)
    graded = _graded_credits(enrollments, courses)

    return {
        'total_courses': len(enrollments),
        'active_courses': sum(1 for e in enrollments if e.active),
        'completed_courses': sum(1 for e in enrollments if e.completed),
        'credit_load': credit_load(enrollments, courses),
        'graded_credits': int(np.sum([c for _, c in graded], dtype=int)),
        'gpa': calculate_gpa(enrollments, courses),
    }


def format_gpa(gpa: float) -> str:
    """Two-decimal display form; the stored value stays unrounded"""
    return f"{gpa:.2f}"
