"""
Admissions Module
Creates, edits and deactivates students, instructors and courses
Records are never hard-deleted; deactivation clears the active flag
"""

import uuid
import threading
import logging
from datetime import date
from typing import List, Optional

import config
from database.db import Registry
from enrollment.student_locks import StudentLocks
from models.enums import Semester, Department
from models.entities import PersonInfo, Student, Instructor, Course
from errors import NotFoundError


STUDENT_EDITABLE_FIELDS = {
    'registration_number', 'full_name', 'email', 'date_of_birth', 'phone_number'
}
COURSE_EDITABLE_FIELDS = {
    'code', 'title', 'credit_hours', 'semester', 'department', 'description'
}


def _require_text(value: str, name: str) -> str:
    if value is None or not str(value).strip():
        raise ValueError(f"{name} is required")
    return str(value).strip()


def _coerce_enum(enum_type, value):
    """Accept an enum member or its symbolic name"""
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type[str(value).strip().upper()]
    except KeyError:
        raise ValueError(f"Unknown {enum_type.__name__}: {value}") from None


def _require_credit_hours(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"Credit hours must be a positive integer, got {value!r}")
    return value


class AdmissionsOffice:
    """
    Lifecycle operations for the registry's entities
    Student edits share the enrollment engine's per-student locks
    """

    def __init__(self, registry: Registry, locks: StudentLocks):
        self.registry = registry
        self.locks = locks

        # Course/instructor updates touch two records at once
        self._catalog_lock = threading.Lock()

        self._setup_logging()

        print("[Admissions] Initialized")

    def _setup_logging(self):
        """Setup admissions logging"""
        self.logger = logging.getLogger('Admissions')
        self.logger.setLevel(config.LOG_LEVEL)

        if config.LOG_TO_FILE and not self.logger.handlers:
            handler = logging.FileHandler(config.ADMISSIONS_LOG)
            formatter = logging.Formatter(
                config.LOG_FORMAT,
                datefmt=config.LOG_DATE_FORMAT
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    # ===========================
    # STUDENT OPERATIONS
    # ===========================

    def admit_student(self, registration_number: str, full_name: str, email: str,
                      date_of_birth: date = None, phone_number: str = None) -> Student:
        """
        Admit a new student

        Args:
            registration_number: Institution registration number
            full_name: Student name
            email: Contact email
            date_of_birth: Optional birth date
            phone_number: Optional phone number

        Returns:
            The stored student record
        """
        student = Student(
            id=str(uuid.uuid4()),
            registration_number=_require_text(registration_number, "Registration number"),
            person=PersonInfo(
                full_name=_require_text(full_name, "Full name"),
                email=_require_text(email, "Email"),
                date_of_birth=date_of_birth,
                phone_number=phone_number or None
            )
        )

        self.registry.put(student)
        self.logger.info(f"Student admitted: {student.person.full_name} ({student.registration_number})")

        return student

    def get_student(self, student_id: str) -> Student:
        student = self.registry.get_student(student_id)
        if student is None:
            raise NotFoundError("Student", student_id)
        return student

    def update_student(self, student_id: str, **changes) -> Student:
        """Edit profile fields; enrollment-derived fields are not editable here"""
        unknown = set(changes) - STUDENT_EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        self.get_student(student_id)
        with self.locks.hold(student_id):
            student = self.get_student(student_id)

            if 'registration_number' in changes:
                student.registration_number = _require_text(
                    changes['registration_number'], "Registration number"
                )
            if 'full_name' in changes:
                student.person.full_name = _require_text(changes['full_name'], "Full name")
            if 'email' in changes:
                student.person.email = _require_text(changes['email'], "Email")
            if 'date_of_birth' in changes:
                student.person.date_of_birth = changes['date_of_birth']
            if 'phone_number' in changes:
                student.person.phone_number = changes['phone_number'] or None

            self.registry.put(student)

        self.logger.info(f"Student updated: {student_id} ({', '.join(sorted(changes))})")
        return student

    def deactivate_student(self, student_id: str) -> Student:
        self.get_student(student_id)
        with self.locks.hold(student_id):
            student = self.get_student(student_id)
            student.active = False
            self.registry.put(student)

        self.logger.info(f"Student deactivated: {student_id}")
        return student

    def active_students(self) -> List[Student]:
        return self.registry.list_where(Student, lambda s: s.active)

    # ===========================
    # INSTRUCTOR OPERATIONS
    # ===========================

    def hire_instructor(self, employee_id: str, full_name: str, email: str,
                        department, hire_date: date = None) -> Instructor:
        instructor = Instructor(
            id=str(uuid.uuid4()),
            employee_id=_require_text(employee_id, "Employee id"),
            person=PersonInfo(
                full_name=_require_text(full_name, "Full name"),
                email=_require_text(email, "Email")
            ),
            department=_coerce_enum(Department, department),
            hire_date=hire_date or date.today()
        )

        self.registry.put(instructor)
        self.logger.info(f"Instructor hired: {instructor.person.full_name} ({instructor.employee_id})")

        return instructor

    def get_instructor(self, instructor_id: str) -> Instructor:
        instructor = self.registry.get_instructor(instructor_id)
        if instructor is None:
            raise NotFoundError("Instructor", instructor_id)
        return instructor

    def deactivate_instructor(self, instructor_id: str) -> Instructor:
        with self._catalog_lock:
            instructor = self.get_instructor(instructor_id)
            instructor.active = False
            self.registry.put(instructor)

        self.logger.info(f"Instructor deactivated: {instructor_id}")
        return instructor

    # ===========================
    # COURSE OPERATIONS
    # ===========================

    def create_course(self, code: str, title: str, credit_hours: int,
                      semester, department, instructor_id: str = None,
                      description: str = None) -> Course:
        """
        Create a course, optionally assigned to an existing instructor

        Raises:
            ValueError: Blank text, unknown enum name or non-positive credit hours
            NotFoundError: Unknown instructor
        """
        course = Course(
            id=str(uuid.uuid4()),
            code=_require_text(code, "Course code"),
            title=_require_text(title, "Title"),
            credit_hours=_require_credit_hours(credit_hours),
            semester=_coerce_enum(Semester, semester),
            department=_coerce_enum(Department, department),
            instructor_id=instructor_id,
            description=description or None
        )

        with self._catalog_lock:
            if instructor_id is None:
                self.registry.put(course)
            else:
                instructor = self.get_instructor(instructor_id)
                instructor.assigned_course_ids.add(course.id)
                self.registry.put_all(course, instructor)

        self.logger.info(f"Course created: {course.code} - {course.title} ({course.credit_hours} credits)")
        return course

    def get_course(self, course_id: str) -> Course:
        course = self.registry.get_course(course_id)
        if course is None:
            raise NotFoundError("Course", course_id)
        return course

    def update_course(self, course_id: str, **changes) -> Course:
        unknown = set(changes) - COURSE_EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        with self._catalog_lock:
            course = self.get_course(course_id)

            if 'code' in changes:
                course.code = _require_text(changes['code'], "Course code")
            if 'title' in changes:
                course.title = _require_text(changes['title'], "Title")
            if 'credit_hours' in changes:
                course.credit_hours = _require_credit_hours(changes['credit_hours'])
            if 'semester' in changes:
                course.semester = _coerce_enum(Semester, changes['semester'])
            if 'department' in changes:
                course.department = _coerce_enum(Department, changes['department'])
            if 'description' in changes:
                course.description = changes['description'] or None

            self.registry.put(course)

        self.logger.info(f"Course updated: {course_id} ({', '.join(sorted(changes))})")
        return course

    def assign_instructor(self, course_id: str, instructor_id: str) -> Course:
        """Move a course to another instructor"""
        with self._catalog_lock:
            course = self.get_course(course_id)
            instructor = self.get_instructor(instructor_id)
            updates = [course, instructor]

            previous_id = course.instructor_id
            if previous_id and previous_id != instructor_id:
                previous = self.registry.get_instructor(previous_id)
                if previous is not None:
                    previous.assigned_course_ids.discard(course_id)
                    updates.append(previous)

            course.instructor_id = instructor_id
            instructor.assigned_course_ids.add(course_id)
            self.registry.put_all(*updates)

        self.logger.info(f"Course {course_id} assigned to instructor {instructor_id}")
        return course

    def deactivate_course(self, course_id: str) -> Course:
        with self._catalog_lock:
            course = self.get_course(course_id)
            course.active = False
            self.registry.put(course)

        self.logger.info(f"Course deactivated: {course_id}")
        return course

    def active_courses(self) -> List[Course]:
        return self.registry.list_where(Course, lambda c: c.active)

    def courses_by_department(self, department) -> List[Course]:
        department = _coerce_enum(Department, department)
        return self.registry.list_where(Course, lambda c: c.department is department)

    def courses_by_semester(self, semester) -> List[Course]:
        semester = _coerce_enum(Semester, semester)
        return self.registry.list_where(Course, lambda c: c.semester is semester)

    def courses_by_instructor(self, instructor_id: Optional[str]) -> List[Course]:
        return self.registry.list_where(Course, lambda c: c.instructor_id == instructor_id)
