"""
Search Module
Field selectors and comparison operators for filtering registry records
Each selector maps to a typed accessor instead of a field-name string
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, List

from database.db import Registry
from models.entities import Student, Course, Enrollment


def field_text(value) -> str:
    """Text form used for comparisons"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class _FieldSelector(Enum):
    def __init__(self, label: str, accessor: Callable):
        self.label = label
        self.accessor = accessor

    def read(self, entity) -> str:
        return field_text(self.accessor(entity))


class StudentField(_FieldSelector):
    ID = ("id", lambda s: s.id)
    REGISTRATION_NUMBER = ("registration_number", lambda s: s.registration_number)
    FULL_NAME = ("full_name", lambda s: s.person.full_name)
    EMAIL = ("email", lambda s: s.person.email)
    PHONE_NUMBER = ("phone_number", lambda s: s.person.phone_number)
    ENROLLMENT_DATE = ("enrollment_date", lambda s: s.enrollment_date)
    ACTIVE = ("active", lambda s: s.active)
    GPA = ("gpa", lambda s: s.current_gpa)


class CourseField(_FieldSelector):
    ID = ("id", lambda c: c.id)
    CODE = ("code", lambda c: c.code)
    TITLE = ("title", lambda c: c.title)
    CREDIT_HOURS = ("credit_hours", lambda c: c.credit_hours)
    INSTRUCTOR_ID = ("instructor_id", lambda c: c.instructor_id)
    SEMESTER = ("semester", lambda c: c.semester)
    DEPARTMENT = ("department", lambda c: c.department)
    DESCRIPTION = ("description", lambda c: c.description)
    ACTIVE = ("active", lambda c: c.active)


class EnrollmentField(_FieldSelector):
    ID = ("id", lambda e: e.id)
    STUDENT_ID = ("student_id", lambda e: e.student_id)
    COURSE_ID = ("course_id", lambda e: e.course_id)
    ACTIVE = ("active", lambda e: e.active)
    COMPLETED = ("completed", lambda e: e.completed)
    LETTER_GRADE = ("letter_grade", lambda e: e.letter_grade)
    NUMERIC_GRADE = ("numeric_grade", lambda e: e.numeric_grade)


SELECTOR_ENTITIES = {
    StudentField: Student,
    CourseField: Course,
    EnrollmentField: Enrollment,
}

# Selectors compared with EQUALS by search_by_field
FLAG_FIELDS = {StudentField.ACTIVE, CourseField.ACTIVE, EnrollmentField.ACTIVE, EnrollmentField.COMPLETED}


def _as_number(text: str):
    try:
        return float(text)
    except ValueError:
        return None


class SearchOperator(Enum):
    EQUALS = "equals"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"

    def test(self, field_value: str, search_value: str) -> bool:
        """
        Compare a field's text form with the search value

        Text operators ignore case; numeric operators never match a value
        that does not parse as a number.
        """
        if self in (SearchOperator.GREATER_THAN, SearchOperator.LESS_THAN):
            left, right = _as_number(field_value), _as_number(search_value)
            if left is None or right is None:
                return False
            return left > right if self is SearchOperator.GREATER_THAN else left < right

        field_value, search_value = field_value.lower(), search_value.lower()

        if self is SearchOperator.EQUALS:
            return field_value == search_value
        if self is SearchOperator.CONTAINS:
            return search_value in field_value
        if self is SearchOperator.STARTS_WITH:
            return field_value.startswith(search_value)
        return field_value.endswith(search_value)


@dataclass(frozen=True)
class SearchCriteria:
    field: _FieldSelector
    value: str
    operator: SearchOperator = SearchOperator.CONTAINS

    def matches(self, entity) -> bool:
        return self.operator.test(self.field.read(entity), str(self.value))


def search(registry: Registry, *criteria: SearchCriteria) -> List:
    """
    Records matching every criterion

    Args:
        registry: Registry to read
        criteria: One or more criteria over the same entity type

    Returns:
        Matching records (copies)
    """
    if not criteria:
        raise ValueError("At least one search criterion is required")

    selector_types = {type(c.field) for c in criteria}
    if len(selector_types) > 1:
        raise ValueError("Search criteria must all target the same entity type")

    entity_type = SELECTOR_ENTITIES[selector_types.pop()]
    return registry.list_where(entity_type, lambda e: all(c.matches(e) for c in criteria))


def search_by_field(registry: Registry, field: _FieldSelector, value: str) -> List:
    """Substring match, or exact match for true/false flags"""
    operator = SearchOperator.EQUALS if field in FLAG_FIELDS else SearchOperator.CONTAINS
    return search(registry, SearchCriteria(field, value, operator))


def filter_records(registry: Registry, entity_type: type, predicate: Callable) -> List:
    return registry.list_where(entity_type, predicate)
