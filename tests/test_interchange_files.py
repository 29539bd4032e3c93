import pytest

import config
from database.db import Registry
from interchange.files import InterchangeStore, rebuild_enrolled_courses
from models.entities import Student, Course, Enrollment
from errors import InterchangeIOError


def _populate(engine, admissions, make_course):
    ada = admissions.admit_student("REG-001", "Lovelace, Ada", "ada@example.edu")
    alan = admissions.admit_student("REG-002", "Alan Turing", "alan@example.edu")
    algebra = make_course(3, title="Algebra, Linear")
    physics = make_course(4)

    engine.enroll(ada.id, algebra.id)
    engine.enroll(ada.id, physics.id)
    engine.record_grade(ada.id, algebra.id, 95)
    engine.enroll(alan.id, physics.id)
    engine.withdraw(alan.id, physics.id)

    return ada, alan, algebra, physics


def test_export_then_load_restores_registry(tmp_path, registry, engine, admissions, make_course):
    ada, alan, algebra, physics = _populate(engine, admissions, make_course)

    written = InterchangeStore(registry).export_registry(tmp_path)

    assert set(written) == {config.STUDENTS_FILE, config.COURSES_FILE, config.ENROLLMENTS_FILE}
    assert all(path.exists() for path in written.values())

    restored = Registry()
    counts = InterchangeStore(restored).load_registry(tmp_path)

    assert counts == {config.STUDENTS_FILE: 2, config.COURSES_FILE: 2, config.ENROLLMENTS_FILE: 3}
    assert restored.list_all(Course) == registry.list_all(Course)
    assert restored.list_all(Enrollment) == registry.list_all(Enrollment)
    assert restored.get_student(ada.id) == registry.get_student(ada.id)
    assert restored.get_student(ada.id).enrolled_course_ids == {algebra.id, physics.id}
    assert restored.get_student(alan.id).enrolled_course_ids == set()


def test_missing_file_aborts_load_and_leaves_registry_untouched(tmp_path, registry, engine,
                                                                admissions, make_course):
    _populate(engine, admissions, make_course)
    InterchangeStore(registry).export_registry(tmp_path)
    (tmp_path / config.ENROLLMENTS_FILE).unlink()

    target = Registry()
    with pytest.raises(InterchangeIOError) as exc:
        InterchangeStore(target).load_registry(tmp_path)

    assert exc.value.path == tmp_path / config.ENROLLMENTS_FILE
    assert target.counts() == {'students': 0, 'instructors': 0, 'courses': 0, 'enrollments': 0}


def test_optional_load_treats_missing_files_as_empty(tmp_path, registry):
    counts = InterchangeStore(registry).load_registry(tmp_path, required=False)

    assert counts == {config.STUDENTS_FILE: 0, config.COURSES_FILE: 0, config.ENROLLMENTS_FILE: 0}


def test_import_bypasses_credit_cap_and_uniqueness(tmp_path, registry, engine):
    (tmp_path / config.STUDENTS_FILE).write_text(
        ",".join(config.STUDENT_HEADER) + "\n"
        "s1,R1,Ann,ann@example.edu,,,2024-09-01,true,0.0\n"
    )
    (tmp_path / config.COURSES_FILE).write_text(
        ",".join(config.COURSE_HEADER) + "\n"
        "c1,BIG1,Big One,12,,FALL,ENGINEERING,,true\n"
        "c2,BIG2,Big Two,12,,FALL,ENGINEERING,,true\n"
    )
    (tmp_path / config.ENROLLMENTS_FILE).write_text(
        ",".join(config.ENROLLMENT_HEADER) + "\n"
        "e1,s1,c1,2024-09-01,,0.0,,false,true\n"
        "e2,s1,c2,2024-09-01,,0.0,,false,true\n"
        "e3,s1,c2,2024-09-01,,0.0,,false,true\n"
    )

    InterchangeStore(registry).load_registry(tmp_path)

    assert engine.credit_load("s1") == 36
    assert len(engine.active_enrollments("s1")) == 3
    assert registry.get_student("s1").enrolled_course_ids == {"c1", "c2"}


def test_import_collection_merges_into_registry(tmp_path, registry, engine, admissions, make_course):
    ada, _, algebra, _ = _populate(engine, admissions, make_course)
    store = InterchangeStore(registry)
    path = tmp_path / "ada_only.csv"
    store.export_collection(Student, [registry.get_student(ada.id)], path)

    fresh = Registry()
    fresh.put_all(*registry.list_all(Enrollment))
    imported = InterchangeStore(fresh).import_collection(Student, path)

    assert [s.id for s in imported] == [ada.id]
    assert algebra.id in fresh.get_student(ada.id).enrolled_course_ids


def test_unwritable_export_surfaces_error(tmp_path, registry):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x")

    with pytest.raises(InterchangeIOError):
        InterchangeStore(registry).export_registry(blocker / "data")


def test_rebuild_enrolled_courses_reports_changes():
    from models.entities import PersonInfo

    stale = Student("s1", "R1", PersonInfo("Ann", "ann@example.edu"), enrolled_course_ids={"old"})
    current = Student("s2", "R2", PersonInfo("Ben", "ben@example.edu"), enrolled_course_ids={"c1"})
    enrollments = [
        Enrollment("e1", "s1", "c2"),
        Enrollment("e2", "s1", "c3", active=False),
        Enrollment("e3", "s2", "c1"),
    ]

    changed = rebuild_enrolled_courses([stale, current], enrollments)

    assert changed == [stale]
    assert stale.enrolled_course_ids == {"c2"}
