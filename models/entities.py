"""
Entity records
Plain value records owned by the registry; cross-entity links are
identifiers only, never object references
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Set

from models.enums import Semester, Department, Grade


@dataclass
class PersonInfo:
    """Fields shared by students and instructors"""
    full_name: str
    email: str
    date_of_birth: Optional[date] = None
    phone_number: Optional[str] = None


@dataclass
class Student:
    id: str
    registration_number: str
    person: PersonInfo
    enrollment_date: date = field(default_factory=date.today)
    active: bool = True
    current_gpa: float = 0.0
    # Mirrors the course ids of this student's active enrollments
    enrolled_course_ids: Set[str] = field(default_factory=set)

    role = "Student"


@dataclass
class Instructor:
    id: str
    employee_id: str
    person: PersonInfo
    department: Department
    hire_date: date = field(default_factory=date.today)
    active: bool = True
    assigned_course_ids: Set[str] = field(default_factory=set)

    role = "Instructor"


@dataclass
class Course:
    id: str
    code: str
    title: str
    credit_hours: int
    semester: Semester
    department: Department
    instructor_id: Optional[str] = None
    description: Optional[str] = None
    active: bool = True


@dataclass
class Enrollment:
    """
    A student's registration in a course

    `active` is cleared once by a withdrawal, `completed` is set once a
    grade has been recorded; the two flags are independent.
    """
    id: str
    student_id: str
    course_id: str
    enrollment_date: date = field(default_factory=date.today)
    completion_date: Optional[date] = None
    numeric_grade: float = 0.0
    letter_grade: Optional[Grade] = None
    completed: bool = False
    active: bool = True
