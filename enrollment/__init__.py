"""
Enrollment rule module
Admissibility checks and side effects for enroll, withdraw and grading
"""

from .student_locks import StudentLocks
from .rule_engine import EnrollmentEngine

__all__ = ['StudentLocks', 'EnrollmentEngine']
