import sys
import os
from datetime import date

import pytest

# Ensure repo root on sys.path for imports like `database...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import config

config.LOG_TO_FILE = False

from database.db import Registry
from enrollment.student_locks import StudentLocks
from enrollment.rule_engine import EnrollmentEngine
from registration.admissions import AdmissionsOffice


TODAY = date(2024, 9, 2)


@pytest.fixture
def registry():
    return Registry()


@pytest.fixture
def locks():
    return StudentLocks()


@pytest.fixture
def engine(registry, locks):
    return EnrollmentEngine(registry, locks, today=lambda: TODAY)


@pytest.fixture
def admissions(registry, locks):
    return AdmissionsOffice(registry, locks)


@pytest.fixture
def student(admissions):
    return admissions.admit_student("REG-001", "Ada Lovelace", "ada@example.edu")


@pytest.fixture
def make_course(admissions):
    counter = {'n': 0}

    def _make(credit_hours=3, code=None, **kwargs):
        counter['n'] += 1
        return admissions.create_course(
            code or f"CS{100 + counter['n']}",
            kwargs.pop('title', f"Course {counter['n']}"),
            credit_hours,
            kwargs.pop('semester', "FALL"),
            kwargs.pop('department', "COMPUTER_SCIENCE"),
            **kwargs
        )

    return _make
