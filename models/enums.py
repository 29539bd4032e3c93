"""
Fixed enumerations used by courses and enrollments
Stored in interchange files by symbolic name
"""

from enum import Enum


class Semester(Enum):
    SPRING = ("Spring", 1)
    SUMMER = ("Summer", 2)
    FALL = ("Fall", 3)

    def __init__(self, display_name: str, order: int):
        self.display_name = display_name
        self.order = order

    def __str__(self):
        return self.display_name


class Department(Enum):
    COMPUTER_SCIENCE = ("Computer Science", "CS")
    MATHEMATICS = ("Mathematics", "MATH")
    PHYSICS = ("Physics", "PHYS")
    CHEMISTRY = ("Chemistry", "CHEM")
    BIOLOGY = ("Biology", "BIO")
    ENGLISH = ("English", "ENG")
    HISTORY = ("History", "HIST")
    BUSINESS = ("Business", "BUS")
    ENGINEERING = ("Engineering", "ENG")
    PSYCHOLOGY = ("Psychology", "PSYC")

    def __init__(self, full_name: str, abbreviation: str):
        self.full_name = full_name
        self.abbreviation = abbreviation

    def __str__(self):
        return self.full_name


class Grade(Enum):
    """Letter grade with its grade points"""

    A_PLUS = ("A+", 4.0)
    A = ("A", 4.0)
    A_MINUS = ("A-", 3.7)
    B_PLUS = ("B+", 3.3)
    B = ("B", 3.0)
    B_MINUS = ("B-", 2.7)
    C_PLUS = ("C+", 2.3)
    C = ("C", 2.0)
    C_MINUS = ("C-", 1.7)
    D_PLUS = ("D+", 1.3)
    D = ("D", 1.0)
    F = ("F", 0.0)

    def __init__(self, letter: str, points: float):
        self.letter = letter
        self.points = points

    def __str__(self):
        return self.letter
