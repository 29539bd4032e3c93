"""
Student registration module
Admission and catalogue lifecycle operations
"""

from .admissions import AdmissionsOffice

__all__ = ['AdmissionsOffice']
