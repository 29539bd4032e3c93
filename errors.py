"""
Error types for the records core
Rule engine failures are raised to the caller, codec row failures are
recovered by the decoder, file failures abort the import/export
"""


class RecordsError(Exception):
    """Base class for all records errors"""


class NotFoundError(RecordsError):
    """Unknown student, course, instructor or enrollment"""

    def __init__(self, kind: str, identifier: str, message: str = None):
        self.kind = kind
        self.identifier = identifier
        super().__init__(message or f"{kind} not found: {identifier}")


class InactiveError(RecordsError):
    """Operation target has been deactivated"""

    def __init__(self, kind: str, identifier: str):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} is inactive: {identifier}")


class AlreadyEnrolledError(RecordsError):
    def __init__(self, student_id: str, course_id: str):
        self.student_id = student_id
        self.course_id = course_id
        super().__init__(
            f"Student {student_id} is already enrolled in course {course_id}"
        )


class CreditLimitExceededError(RecordsError):
    def __init__(self, attempted: int, maximum: int):
        self.attempted = attempted
        self.maximum = maximum
        super().__init__(
            f"Credit limit exceeded: attempted {attempted} credits, "
            f"but maximum allowed is {maximum}"
        )


class InvalidGradeError(RecordsError):
    def __init__(self, grade: float):
        self.grade = grade
        super().__init__(
            f"Invalid grade: {grade}. Grade must be between 0.0 and 100.0"
        )


class MalformedRecordError(RecordsError):
    """A single interchange row could not be decoded"""

    def __init__(self, kind: str, row: list, reason: str):
        self.kind = kind
        self.row = row
        self.reason = reason
        super().__init__(f"Malformed {kind} row ({reason}): {row}")


class InterchangeIOError(RecordsError):
    """An interchange file is missing, unreadable or unwritable"""

    def __init__(self, path, reason: str):
        self.path = path
        super().__init__(f"Cannot access {path}: {reason}")
