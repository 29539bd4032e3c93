"""
Academic calculator module
Letter grades, credit load and GPA derived from registry records
"""

from .calculator import (
    letter_grade, credit_load, calculate_gpa, academic_summary, format_gpa
)

__all__ = [
    'letter_grade', 'credit_load', 'calculate_gpa', 'academic_summary', 'format_gpa'
]
