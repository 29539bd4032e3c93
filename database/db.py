"""
Registry Module
Holds the canonical student, course, instructor and enrollment records
Thread-safe keyed storage with copy-in/copy-out semantics
"""

import copy
import threading
import logging
from typing import Callable, Dict, List, Optional, Type

import config
from models.entities import Student, Instructor, Course, Enrollment


ENTITY_TYPES = (Student, Instructor, Course, Enrollment)


class Registry:
    """
    Thread-safe in-memory registry of entity records
    Every read returns a copy and every write replaces the stored record
    whole, so callers never observe a partially-written entity
    """

    def __init__(self):
        self.lock = threading.RLock()
        self._collections: Dict[type, Dict[str, object]] = {
            entity_type: {} for entity_type in ENTITY_TYPES
        }

        self._setup_logging()

        print("[Registry] Initialized")

    def _setup_logging(self):
        """Setup registry logging"""
        self.logger = logging.getLogger('Registry')
        self.logger.setLevel(config.LOG_LEVEL)

        if config.LOG_TO_FILE and not self.logger.handlers:
            handler = logging.FileHandler(config.REGISTRY_LOG)
            formatter = logging.Formatter(
                config.LOG_FORMAT,
                datefmt=config.LOG_DATE_FORMAT
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def _collection(self, entity_type: type) -> Dict[str, object]:
        try:
            return self._collections[entity_type]
        except KeyError:
            raise TypeError(f"Unsupported entity type: {entity_type.__name__}") from None

    # ===========================
    # WRITE OPERATIONS
    # ===========================

    def put(self, entity):
        """Insert or replace an entity by its identifier (no merge)"""
        self.put_all(entity)

    def put_all(self, *entities):
        """
        Insert or replace several entities as one step

        Readers see either none or all of the given records.

        Args:
            entities: Entity records of any registered type
        """
        staged = [(self._collection(type(e)), e.id, copy.deepcopy(e)) for e in entities]

        with self.lock:
            for collection, entity_id, stored in staged:
                collection[entity_id] = stored

        for _, entity_id, stored in staged:
            self.logger.debug(f"Stored {type(stored).__name__} {entity_id}")

    def clear(self):
        """Drop every record"""
        with self.lock:
            for collection in self._collections.values():
                collection.clear()

        self.logger.info("Registry cleared")

    # ===========================
    # READ OPERATIONS
    # ===========================

    def get(self, entity_type: Type, entity_id: str):
        """
        Get a copy of one entity

        Returns:
            The entity, or None if the identifier is unknown
        """
        with self.lock:
            entity = self._collection(entity_type).get(entity_id)
            return copy.deepcopy(entity) if entity is not None else None

    def list_all(self, entity_type: Type) -> List:
        """Snapshot of every entity of a type"""
        with self.lock:
            return copy.deepcopy(list(self._collection(entity_type).values()))

    def list_where(self, entity_type: Type, predicate: Callable[[object], bool]) -> List:
        """Snapshot of the entities of a type matching a predicate"""
        return [entity for entity in self.list_all(entity_type) if predicate(entity)]

    def snapshot(self) -> Dict[type, List]:
        """Copy every collection under one lock acquisition"""
        with self.lock:
            return {
                entity_type: copy.deepcopy(list(collection.values()))
                for entity_type, collection in self._collections.items()
            }

    def counts(self) -> Dict[str, int]:
        """Get record counts per collection"""
        with self.lock:
            return {
                'students': len(self._collections[Student]),
                'instructors': len(self._collections[Instructor]),
                'courses': len(self._collections[Course]),
                'enrollments': len(self._collections[Enrollment]),
            }

    # ===========================
    # CONVENIENCE LOOKUPS
    # ===========================

    def get_student(self, student_id: str) -> Optional[Student]:
        return self.get(Student, student_id)

    def get_course(self, course_id: str) -> Optional[Course]:
        return self.get(Course, course_id)

    def get_instructor(self, instructor_id: str) -> Optional[Instructor]:
        return self.get(Instructor, instructor_id)

    def get_enrollment(self, enrollment_id: str) -> Optional[Enrollment]:
        return self.get(Enrollment, enrollment_id)

    def enrollments_for_student(self, student_id: str) -> List[Enrollment]:
        return self.list_where(Enrollment, lambda e: e.student_id == student_id)

    def enrollments_for_course(self, course_id: str) -> List[Enrollment]:
        return self.list_where(Enrollment, lambda e: e.course_id == course_id)

    def courses_by_id(self) -> Dict[str, Course]:
        """Course lookup table used by the calculator"""
        return {course.id: course for course in self.list_all(Course)}
