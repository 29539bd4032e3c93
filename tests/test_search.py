import pytest

from models.entities import Student, Course
from search.filters import (
    StudentField, CourseField, EnrollmentField,
    SearchOperator, SearchCriteria,
    search, search_by_field, filter_records, field_text
)


@pytest.fixture
def roster(admissions, engine, make_course):
    ada = admissions.admit_student("REG-001", "Ada Lovelace", "ada@example.edu", phone_number="555-0100")
    alan = admissions.admit_student("REG-002", "Alan Turing", "alan@example.edu")
    grace = admissions.admit_student("REG-010", "Grace Hopper", "grace@navy.mil")
    admissions.deactivate_student(grace.id)

    algebra = make_course(3, code="MATH201", title="Linear Algebra", department="MATHEMATICS")
    compilers = make_course(4, code="CS420", title="Compilers", semester="SPRING")

    engine.enroll(ada.id, algebra.id)
    engine.enroll(ada.id, compilers.id)
    engine.enroll(alan.id, compilers.id)
    engine.record_grade(ada.id, algebra.id, 92)
    engine.record_grade(alan.id, compilers.id, 71)

    return {'ada': ada, 'alan': alan, 'grace': grace, 'algebra': algebra, 'compilers': compilers}


def _ids(records):
    return {r.id for r in records}


def test_contains_ignores_case(registry, roster):
    found = search(registry, SearchCriteria(StudentField.FULL_NAME, "LOVE"))

    assert _ids(found) == {roster['ada'].id}


def test_all_criteria_must_match(registry, roster):
    found = search(
        registry,
        SearchCriteria(StudentField.EMAIL, "example.edu"),
        SearchCriteria(StudentField.REGISTRATION_NUMBER, "REG-002", SearchOperator.EQUALS),
    )

    assert _ids(found) == {roster['alan'].id}


@pytest.mark.parametrize("operator, value, expected", [
    (SearchOperator.STARTS_WITH, "cs", {"compilers"}),
    (SearchOperator.ENDS_WITH, "201", {"algebra"}),
    (SearchOperator.EQUALS, "cs42", set()),
])
def test_text_operators_on_course_code(registry, roster, operator, value, expected):
    found = search(registry, SearchCriteria(CourseField.CODE, value, operator))

    assert _ids(found) == {roster[name].id for name in expected}


def test_enum_fields_compare_by_symbolic_name(registry, roster):
    found = search(registry, SearchCriteria(CourseField.DEPARTMENT, "mathematics", SearchOperator.EQUALS))
    assert _ids(found) == {roster['algebra'].id}

    found = search(registry, SearchCriteria(CourseField.SEMESTER, "SPRING", SearchOperator.EQUALS))
    assert _ids(found) == {roster['compilers'].id}


def test_numeric_operators(registry, roster):
    heavy = search(registry, SearchCriteria(CourseField.CREDIT_HOURS, "3", SearchOperator.GREATER_THAN))
    assert _ids(heavy) == {roster['compilers'].id}

    honours = search(registry, SearchCriteria(StudentField.GPA, 3.5, SearchOperator.GREATER_THAN))
    assert _ids(honours) == {roster['ada'].id}

    weak = search(registry, SearchCriteria(EnrollmentField.NUMERIC_GRADE, "80", SearchOperator.LESS_THAN))
    assert {e.student_id for e in weak} == {roster['ada'].id, roster['alan'].id}


def test_numeric_operator_skips_unparsable_values(registry, roster):
    found = search(registry, SearchCriteria(StudentField.PHONE_NUMBER, "0", SearchOperator.GREATER_THAN))

    assert found == []


def test_search_by_field_uses_exact_match_for_flags(registry, roster):
    inactive = search_by_field(registry, StudentField.ACTIVE, "false")
    assert _ids(inactive) == {roster['grace'].id}

    completed = search_by_field(registry, EnrollmentField.COMPLETED, "true")
    assert len(completed) == 2

    named = search_by_field(registry, StudentField.FULL_NAME, "a")
    assert len(named) == 3


def test_letter_grade_selector(registry, roster):
    found = search_by_field(registry, EnrollmentField.LETTER_GRADE, "C_MINUS")

    assert [e.student_id for e in found] == [roster['alan'].id]


def test_search_requires_consistent_criteria(registry, roster):
    with pytest.raises(ValueError):
        search(registry)

    with pytest.raises(ValueError):
        search(
            registry,
            SearchCriteria(StudentField.FULL_NAME, "Ada"),
            SearchCriteria(CourseField.TITLE, "Algebra"),
        )


def test_filter_records_with_predicate(registry, roster):
    found = filter_records(registry, Course, lambda c: c.credit_hours == 4)
    assert _ids(found) == {roster['compilers'].id}

    found = filter_records(registry, Student, lambda s: not s.enrolled_course_ids)
    assert _ids(found) == {roster['grace'].id}


def test_field_text():
    assert field_text(None) == ""
    assert field_text(True) == "true"
    assert field_text(CourseField.ID) == "ID"
    assert field_text(3) == "3"
