"""
Search module
Typed field selectors and operators over registry records
"""

from .filters import (
    StudentField, CourseField, EnrollmentField, SearchOperator, SearchCriteria,
    search, search_by_field, filter_records
)

__all__ = [
    'StudentField', 'CourseField', 'EnrollmentField', 'SearchOperator',
    'SearchCriteria', 'search', 'search_by_field', 'filter_records',
]
