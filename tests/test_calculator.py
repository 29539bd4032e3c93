from datetime import date

import pytest

from academics.calculator import (
    letter_grade, credit_load, calculate_gpa, academic_summary, format_gpa
)
from models.enums import Semester, Department, Grade
from models.entities import Course, Enrollment


def _course(course_id, credits):
    return Course(course_id, course_id.upper(), "Title", credits,
                  Semester.FALL, Department.MATHEMATICS)


def _graded(enrollment_id, course_id, score, active=True):
    return Enrollment(
        enrollment_id, "s1", course_id, date(2024, 1, 1),
        completion_date=date(2024, 5, 1), numeric_grade=score,
        letter_grade=letter_grade(score), completed=True, active=active
    )


@pytest.mark.parametrize("score, expected", [
    (100.0, Grade.A_PLUS),
    (97.0, Grade.A_PLUS),
    (96.9, Grade.A),
    (93.0, Grade.A),
    (90.0, Grade.A_MINUS),
    (89.99, Grade.B_PLUS),
    (83.0, Grade.B),
    (80.0, Grade.B_MINUS),
    (77.0, Grade.C_PLUS),
    (73.0, Grade.C),
    (70.0, Grade.C_MINUS),
    (67.0, Grade.D_PLUS),
    (60.0, Grade.D),
    (59.9, Grade.F),
    (0.0, Grade.F),
])
def test_letter_grade_bands(score, expected):
    assert letter_grade(score) is expected


def test_grade_points():
    assert Grade.A_PLUS.points == Grade.A.points == 4.0
    assert Grade.B_MINUS.points == 2.7
    assert Grade.F.points == 0.0
    assert str(Grade.C_PLUS) == "C+"


def test_gpa_weighted_by_credit_hours():
    courses = {"a": _course("a", 3), "b": _course("b", 4)}
    enrollments = [_graded("e1", "a", 95.0), _graded("e2", "b", 85.0)]

    gpa = calculate_gpa(enrollments, courses)

    # (4.0*3 + 3.0*4) / 7, stored unrounded
    assert gpa == pytest.approx(24.0 / 7.0)
    assert gpa != 3.43
    assert format_gpa(gpa) == "3.43"


def test_gpa_is_zero_without_completed_enrollments():
    courses = {"a": _course("a", 3)}
    ungraded = Enrollment("e1", "s1", "a")

    assert calculate_gpa([], courses) == 0.0
    assert calculate_gpa([ungraded], courses) == 0.0


def test_gpa_skips_enrollments_for_missing_courses():
    courses = {"a": _course("a", 3)}
    enrollments = [_graded("e1", "a", 85.0), _graded("e2", "gone", 10.0)]

    assert calculate_gpa(enrollments, courses) == pytest.approx(3.0)


def test_gpa_counts_graded_then_withdrawn_enrollments():
    courses = {"a": _course("a", 3), "b": _course("b", 3)}
    enrollments = [_graded("e1", "a", 100.0), _graded("e2", "b", 50.0, active=False)]

    assert calculate_gpa(enrollments, courses) == pytest.approx(2.0)


def test_gpa_derives_missing_letter_from_numeric_grade():
    courses = {"a": _course("a", 3)}
    enrollment = _graded("e1", "a", 91.0)
    enrollment.letter_grade = None

    assert calculate_gpa([enrollment], courses) == pytest.approx(3.7)


def test_credit_load_counts_only_active_enrollments():
    courses = {"a": _course("a", 3), "b": _course("b", 4), "c": _course("c", 5)}
    enrollments = [
        Enrollment("e1", "s1", "a"),
        Enrollment("e2", "s1", "b", active=False),
        Enrollment("e3", "s1", "c"),
        Enrollment("e4", "s1", "gone"),
    ]

    assert credit_load(enrollments, courses) == 8
    assert credit_load([], courses) == 0


def test_academic_summary():
    courses = {"a": _course("a", 3), "b": _course("b", 4)}
    enrollments = [_graded("e1", "a", 95.0), Enrollment("e2", "s1", "b")]

    summary = academic_summary(enrollments, courses)

    assert summary['total_courses'] == 2
    assert summary['active_courses'] == 2
    assert summary['completed_courses'] == 1
    assert summary['credit_load'] == 7
    assert summary['graded_credits'] == 3
    assert summary['gpa'] == pytest.approx(4.0)
