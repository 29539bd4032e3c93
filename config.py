"""
Configuration file for Campus Course & Records Manager
Central configuration for all system parameters
"""

import os
from pathlib import Path

# ===========================
# PATH CONFIGURATION
# ===========================
BASE_DIR = Path(__file__).parent
DATA_DIR = Path(os.getenv("CCRM_DATA_DIR", BASE_DIR / "data"))
LOGS_DIR = BASE_DIR / "logs"

# Create directories if they don't exist
LOGS_DIR.mkdir(exist_ok=True)

# ===========================
# ENROLLMENT CONFIGURATION
# ===========================
MAX_CREDITS_PER_SEMESTER = 18  # Credit cap across active enrollments
MIN_GRADE = 0.0
MAX_GRADE = 100.0

# ===========================
# INTERCHANGE CONFIGURATION
# ===========================
CSV_DELIMITER = ","
CSV_QUOTE = '"'
CSV_FIELD_SIZE_LIMIT = 2**31 - 1  # Largest value a C long holds on every platform
DATE_FORMAT = "%Y-%m-%d"  # CLI date input; files always hold ISO dates

STUDENTS_FILE = "students.csv"
COURSES_FILE = "courses.csv"
ENROLLMENTS_FILE = "enrollments.csv"

STUDENT_HEADER = (
    "ID", "RegistrationNumber", "FullName", "Email", "DateOfBirth",
    "PhoneNumber", "EnrollmentDate", "IsActive", "CurrentGPA",
)
COURSE_HEADER = (
    "CourseID", "CourseCode", "Title", "CreditHours", "InstructorID",
    "Semester", "Department", "Description", "IsActive",
)
ENROLLMENT_HEADER = (
    "EnrollmentID", "StudentID", "CourseID", "EnrollmentDate", "CompletionDate",
    "NumericGrade", "LetterGrade", "IsCompleted", "IsActive",
)

# Rows shorter than this are dropped on import
STUDENT_MIN_COLUMNS = 8
COURSE_MIN_COLUMNS = 8
ENROLLMENT_MIN_COLUMNS = 6

# ===========================
# LOGGING CONFIGURATION
# ===========================
LOG_LEVEL = "INFO"  # Options: "DEBUG", "INFO", "WARNING", "ERROR"
LOG_TO_FILE = True
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Log file paths
REGISTRY_LOG = LOGS_DIR / "registry.log"
ENROLLMENT_LOG = LOGS_DIR / "enrollment.log"
ADMISSIONS_LOG = LOGS_DIR / "admissions.log"
INTERCHANGE_LOG = LOGS_DIR / "interchange.log"

# ===========================
# SYSTEM CONFIGURATION
# ===========================
SYSTEM_NAME = "Campus Course & Records Manager"
VERSION = "1.0.0"
