"""
Enrollment Rule Engine Module
Decides whether enroll, withdraw and grade operations are admissible
Owns the one-active-enrollment-per-pair and credit cap rules
"""

import uuid
import threading
import logging
from collections import Counter
from datetime import date
from typing import Callable, Dict, List, Optional

import config
from database.db import Registry
from models.entities import Student, Course, Enrollment
from academics.calculator import letter_grade, credit_load, calculate_gpa
from enrollment.student_locks import StudentLocks
from errors import (
    RecordsError, NotFoundError, InactiveError, AlreadyEnrolledError,
    CreditLimitExceededError, InvalidGradeError
)


class EnrollmentEngine:
    """
    Central enrollment rule engine
    Every multi-record update runs inside the student's critical section
    """

    def __init__(self, registry: Registry, locks: StudentLocks,
                 today: Callable[[], date] = date.today):
        self.registry = registry
        self.locks = locks
        self._today = today

        # Statistics
        self._stats = Counter()
        self._stats_lock = threading.Lock()

        # Setup logging
        self._setup_logging()

        print("[EnrollmentEngine] Initialized")
        print(f"[EnrollmentEngine] Max credits: {config.MAX_CREDITS_PER_SEMESTER}")

    def _setup_logging(self):
        """Setup enrollment logging"""
        self.logger = logging.getLogger('EnrollmentEngine')
        self.logger.setLevel(config.LOG_LEVEL)

        if config.LOG_TO_FILE and not self.logger.handlers:
            handler = logging.FileHandler(config.ENROLLMENT_LOG)
            formatter = logging.Formatter(
                config.LOG_FORMAT,
                datefmt=config.LOG_DATE_FORMAT
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def _bump(self, key: str):
        with self._stats_lock:
            self._stats[key] += 1

    def _reject(self, operation: str, student_id: str, course_id: str, error: RecordsError):
        self._bump('total_rejected')
        self.logger.warning(
            f"{operation} rejected: student {student_id} | course {course_id} | {error}"
        )

    # ===========================
    # LOOKUPS
    # ===========================

    def _require_student(self, student_id: str) -> Student:
        student = self.registry.get_student(student_id)
        if student is None:
            raise NotFoundError("Student", student_id)
        return student

    def _require_course(self, course_id: str) -> Course:
        course = self.registry.get_course(course_id)
        if course is None:
            raise NotFoundError("Course", course_id)
        return course

    def _hold_student(self, operation: str, student_id: str, course_id: str):
        """
        Enter a student's critical section, rejecting unknown students first

        Locks are only created for students that exist, so typed-in ids that
        match nobody do not accumulate in the lock map.
        """
        try:
            self._require_student(student_id)
        except RecordsError as e:
            self._reject(operation, student_id, course_id, e)
            raise
        return self.locks.hold(student_id)

    def _find_active_enrollment(self, student_id: str, course_id: str) -> Optional[Enrollment]:
        for enrollment in self.registry.enrollments_for_student(student_id):
            if enrollment.course_id == course_id and enrollment.active:
                return enrollment
        return None

    def _require_active_enrollment(self, student_id: str, course_id: str) -> Enrollment:
        enrollment = self._find_active_enrollment(student_id, course_id)
        if enrollment is None:
            raise NotFoundError(
                "Enrollment", f"{student_id}/{course_id}",
                f"No active enrollment found for student {student_id} in course {course_id}"
            )
        return enrollment

    def _check_admissible(self, student: Student, course: Course):
        """
        Raise if the student may not enroll in the course

        Args:
            student: Current student record
            course: Current course record
        """
        if not student.active:
            raise InactiveError("Student", student.id)

        if not course.active:
            raise InactiveError("Course", course.id)

        if self._find_active_enrollment(student.id, course.id) is not None:
            raise AlreadyEnrolledError(student.id, course.id)

        current = credit_load(
            self.registry.enrollments_for_student(student.id),
            self.registry.courses_by_id()
        )
        attempted = current + course.credit_hours

        if attempted > config.MAX_CREDITS_PER_SEMESTER:
            raise CreditLimitExceededError(attempted, config.MAX_CREDITS_PER_SEMESTER)

    # ===========================
    # RULE OPERATIONS
    # ===========================

    def enroll(self, student_id: str, course_id: str) -> Enrollment:
        """
        Enroll a student in a course

        Args:
            student_id: Student identifier
            course_id: Course identifier

        Returns:
            The new active enrollment

        Raises:
            NotFoundError, InactiveError, AlreadyEnrolledError,
            CreditLimitExceededError
        """
        with self._hold_student("Enrollment", student_id, course_id):
            try:
                student = self._require_student(student_id)
                course = self._require_course(course_id)
                self._check_admissible(student, course)
            except RecordsError as e:
                self._reject("Enrollment", student_id, course_id, e)
                raise

            enrollment = Enrollment(
                id=str(uuid.uuid4()),
                student_id=student_id,
                course_id=course_id,
                enrollment_date=self._today()
            )
            student.enrolled_course_ids.add(course_id)

            self.registry.put_all(enrollment, student)

        self._bump('total_enrollments')
        self.logger.info(
            f"Enrolled: student {student_id} | course {course.code} ({course_id}) | "
            f"enrollment {enrollment.id}"
        )

        return enrollment

    def withdraw(self, student_id: str, course_id: str) -> Enrollment:
        """
        Withdraw a student's active enrollment

        Grade fields and the completed flag are left as they are.

        Returns:
            The withdrawn enrollment
        """
        with self._hold_student("Withdrawal", student_id, course_id):
            try:
                student = self._require_student(student_id)
                enrollment = self._require_active_enrollment(student_id, course_id)
            except RecordsError as e:
                self._reject("Withdrawal", student_id, course_id, e)
                raise

            enrollment.active = False
            enrollment.completion_date = self._today()
            student.enrolled_course_ids.discard(course_id)

            self.registry.put_all(enrollment, student)

        self._bump('total_withdrawals')
        self.logger.info(f"Withdrawn: student {student_id} | course {course_id}")

        return enrollment

    def record_grade(self, student_id: str, course_id: str, numeric_grade: float) -> Enrollment:
        """
        Record (or overwrite) the grade of an active enrollment

        Args:
            student_id: Student identifier
            course_id: Course identifier
            numeric_grade: Score in [0, 100]

        Returns:
            The graded enrollment; the student's cached GPA is refreshed
        """
        with self._hold_student("Grade", student_id, course_id):
            try:
                student = self._require_student(student_id)
                enrollment = self._require_active_enrollment(student_id, course_id)

                grade = float(numeric_grade)
                if not config.MIN_GRADE <= grade <= config.MAX_GRADE:
                    raise InvalidGradeError(grade)
            except RecordsError as e:
                self._reject("Grade", student_id, course_id, e)
                raise

            enrollment.numeric_grade = grade
            enrollment.letter_grade = letter_grade(grade)
            enrollment.completed = True
            enrollment.completion_date = self._today()

            enrollments = [
                enrollment if e.id == enrollment.id else e
                for e in self.registry.enrollments_for_student(student_id)
            ]
            student.current_gpa = calculate_gpa(enrollments, self.registry.courses_by_id())

            self.registry.put_all(enrollment, student)

        self._bump('total_grades_recorded')
        self.logger.info(
            f"Grade recorded: student {student_id} | course {course_id} | "
            f"{grade} ({enrollment.letter_grade.letter}) | GPA {student.current_gpa:.3f}"
        )

        return enrollment

    def refresh_gpa(self, student_id: str) -> float:
        """Recompute and store a student's cached GPA"""
        self._require_student(student_id)
        with self.locks.hold(student_id):
            student = self._require_student(student_id)
            student.current_gpa = self.gpa(student_id)
            self.registry.put(student)
        return student.current_gpa

    # ===========================
    # QUERIES
    # ===========================

    def credit_load(self, student_id: str) -> int:
        """Credit hours behind a student's active enrollments"""
        self._require_student(student_id)
        return credit_load(
            self.registry.enrollments_for_student(student_id),
            self.registry.courses_by_id()
        )

    def gpa(self, student_id: str) -> float:
        """Freshly computed GPA (does not touch the cached value)"""
        self._require_student(student_id)
        return calculate_gpa(
            self.registry.enrollments_for_student(student_id),
            self.registry.courses_by_id()
        )

    def can_enroll(self, student_id: str, course_id: str) -> bool:
        """Same checks as enroll, without side effects"""
        try:
            self._check_admissible(
                self._require_student(student_id),
                self._require_course(course_id)
            )
        except RecordsError:
            return False
        return True

    def can_enroll_additional_credits(self, student_id: str, additional_credits: int) -> bool:
        current = self.credit_load(student_id)
        return current + additional_credits <= config.MAX_CREDITS_PER_SEMESTER

    def student_enrollments(self, student_id: str) -> List[Enrollment]:
        self._require_student(student_id)
        return self.registry.enrollments_for_student(student_id)

    def active_enrollments(self, student_id: str) -> List[Enrollment]:
        return [e for e in self.student_enrollments(student_id) if e.active]

    def completed_enrollments(self, student_id: str) -> List[Enrollment]:
        return [e for e in self.student_enrollments(student_id) if e.completed]

    def course_enrollments(self, course_id: str) -> List[Enrollment]:
        self._require_course(course_id)
        return self.registry.enrollments_for_course(course_id)

    def get_statistics(self) -> Dict:
        """Get engine statistics"""
        with self._stats_lock:
            stats = {
                'total_enrollments': self._stats['total_enrollments'],
                'total_withdrawals': self._stats['total_withdrawals'],
                'total_grades_recorded': self._stats['total_grades_recorded'],
                'total_rejected': self._stats['total_rejected'],
            }
        stats['max_credits'] = config.MAX_CREDITS_PER_SEMESTER
        return stats
