"""
Interchange Files Module
Whole-registry export and load, one file per entity type
These are the hook points used by the CLI and by backup tooling
"""

import os
from pathlib import Path
from typing import Dict, List, Union

import config
from database.db import Registry
from models.entities import Student, Course, Enrollment
from interchange.csv_codec import CsvCodec
from errors import InterchangeIOError


FILE_NAMES = {
    Student: config.STUDENTS_FILE,
    Course: config.COURSES_FILE,
    Enrollment: config.ENROLLMENTS_FILE,
}


def write_text(path: Path, text: str):
    """Write through a temporary file so a failed export leaves the old file intact"""
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, 'w', encoding='utf-8', newline='') as f:
            f.write(text)
        os.replace(tmp_path, path)
    except OSError as e:
        raise InterchangeIOError(path, e.strerror or str(e)) from e


def read_text(path: Path) -> str:
    path = Path(path)

    try:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            return f.read()
    except FileNotFoundError as e:
        raise InterchangeIOError(path, "file not found") from e
    except (OSError, UnicodeDecodeError) as e:
        raise InterchangeIOError(path, str(e)) from e


def rebuild_enrolled_courses(students: List[Student], enrollments: List[Enrollment]) -> List[Student]:
    """
    Recompute each student's enrolled-course set from active enrollments

    The set is not stored in the files, so it is derived after a load.

    Returns:
        The students whose set changed
    """
    active_by_student: Dict[str, set] = {}
    for enrollment in enrollments:
        if enrollment.active:
            active_by_student.setdefault(enrollment.student_id, set()).add(enrollment.course_id)

    changed = []
    for student in students:
        course_ids = active_by_student.get(student.id, set())
        if student.enrolled_course_ids != course_ids:
            student.enrolled_course_ids = course_ids
            changed.append(student)

    return changed


class InterchangeStore:
    """
    Moves registry contents to and from interchange files
    Reads and writes go straight to the registry, bypassing the rule engine
    """

    def __init__(self, registry: Registry, codec: CsvCodec = None):
        self.registry = registry
        self.codec = codec or CsvCodec()
        self.logger = self.codec.logger

    # ===========================
    # SINGLE COLLECTIONS
    # ===========================

    def export_collection(self, entity_type: type, records: List, path: Union[str, Path]):
        """Write one collection to a file"""
        write_text(Path(path), self.codec.encode(entity_type, records))
        self.logger.info(f"Exported {len(records)} {entity_type.__name__} records to {path}")

    def read_collection(self, entity_type: type, path: Union[str, Path]) -> List:
        """Decode one file without touching the registry"""
        records = self.codec.decode(entity_type, read_text(Path(path)))
        self.logger.info(f"Read {len(records)} {entity_type.__name__} records from {path}")
        return records

    def import_collection(self, entity_type: type, path: Union[str, Path]) -> List:
        """
        Decode one file and store its records (insert-or-replace)

        Student enrolled-course sets are refreshed afterwards.
        """
        records = self.read_collection(entity_type, path)

        with self.registry.lock:
            self.registry.put_all(*records)
            self._refresh_enrolled_courses()

        return records

    # ===========================
    # WHOLE REGISTRY
    # ===========================

    def export_registry(self, data_dir: Union[str, Path] = None) -> Dict[str, Path]:
        """
        Export students, courses and enrollments from one stable snapshot

        Returns:
            {file name: path written}
        """
        data_dir = Path(data_dir or config.DATA_DIR)
        snapshot = self.registry.snapshot()

        written = {}
        for entity_type, file_name in FILE_NAMES.items():
            path = data_dir / file_name
            self.export_collection(entity_type, snapshot[entity_type], path)
            written[file_name] = path

        print(f"[Interchange] Exported registry to {data_dir}")
        return written

    def load_registry(self, data_dir: Union[str, Path] = None,
                      required: bool = True) -> Dict[str, int]:
        """
        Load every interchange file into the registry

        All files are read and decoded before anything is stored, so a
        missing or unreadable file leaves the registry untouched.

        Args:
            data_dir: Directory holding the files
            required: If False, missing files count as empty

        Returns:
            Records loaded per file name
        """
        data_dir = Path(data_dir or config.DATA_DIR)
        loaded = {}

        for entity_type, file_name in FILE_NAMES.items():
            path = data_dir / file_name
            if not required and not path.exists():
                loaded[entity_type] = []
                continue
            loaded[entity_type] = self.read_collection(entity_type, path)

        with self.registry.lock:
            self.registry.put_all(
                *loaded[Student], *loaded[Course], *loaded[Enrollment]
            )
            self._refresh_enrolled_courses()

        counts = {FILE_NAMES[t]: len(records) for t, records in loaded.items()}
        print(f"[Interchange] Loaded registry from {data_dir}: {counts}")
        return counts

    def _refresh_enrolled_courses(self):
        snapshot = self.registry.snapshot()
        changed = rebuild_enrolled_courses(snapshot[Student], snapshot[Enrollment])
        if changed:
            self.registry.put_all(*changed)
