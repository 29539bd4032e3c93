"""
Student Locks Module
Per-student critical sections for multi-record updates
Different students never block each other
"""

import threading
from contextlib import contextmanager
from typing import Dict


class StudentLocks:
    """
    Hands out one re-entrant lock per student identifier
    Check-then-act sequences on a student's records run while holding it
    """

    def __init__(self):
        # {student_id: RLock}
        self._locks: Dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def lock_for(self, student_id: str) -> threading.RLock:
        """Get (creating on first use) the lock for a student"""
        with self._guard:
            lock = self._locks.get(student_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[student_id] = lock
            return lock

    @contextmanager
    def hold(self, student_id: str):
        """Run a block as the only writer for this student"""
        lock = self.lock_for(student_id)
        with lock:
            yield

    def __len__(self):
        with self._guard:
            return len(self._locks)
