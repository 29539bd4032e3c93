"""
Records data model
Entity records and the fixed enumerations they reference
"""

from .enums import Semester, Department, Grade
from .entities import PersonInfo, Student, Instructor, Course, Enrollment

__all__ = [
    'Semester', 'Department', 'Grade',
    'PersonInfo', 'Student', 'Instructor', 'Course', 'Enrollment',
]
