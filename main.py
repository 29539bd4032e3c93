"""
Campus Course & Records Manager - Main Entry Point
CLI front end over the registry, enrollment engine and interchange files
"""

import sys
import signal
from datetime import datetime
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

import config
from database.db import Registry
from enrollment.student_locks import StudentLocks
from enrollment.rule_engine import EnrollmentEngine
from registration.admissions import AdmissionsOffice
from interchange.files import InterchangeStore
from academics.calculator import academic_summary, format_gpa
from search.filters import StudentField, search_by_field
from errors import RecordsError


class CampusRecordsSystem:
    """
    Main records system controller
    Wires one registry into every component and runs the CLI menu
    """

    def __init__(self, data_dir: Path = None):
        self.data_dir = Path(data_dir or config.DATA_DIR)

        self.registry = Registry()
        self.locks = StudentLocks()
        self.engine = EnrollmentEngine(self.registry, self.locks)
        self.admissions = AdmissionsOffice(self.registry, self.locks)
        self.store = InterchangeStore(self.registry)

    def install_signal_handlers(self):
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum, frame):
        """Handle interrupt signals"""
        print("\n\n[System] Interrupt received, shutting down...")
        sys.exit(0)

    def initialize(self):
        """Load existing data files, if any"""
        print("\n" + "=" * 60)
        print(f"{config.SYSTEM_NAME} v{config.VERSION}")
        print("=" * 60)

        try:
            self.store.load_registry(self.data_dir, required=False)
        except RecordsError as e:
            print(f"[ERROR] Could not load data: {e}")

        print(f"✓ Registry ready: {self.registry.counts()}")

    def _run(self, action):
        """Run one menu action, reporting domain errors instead of crashing"""
        try:
            action()
        except (RecordsError, ValueError) as e:
            print(f"[ERROR] {e}")

    def show_menu(self):
        """Show main menu"""
        actions = {
            '1': self.admit_student,
            '2': self.add_course,
            '3': self.enroll_student,
            '4': self.withdraw_student,
            '5': self.record_grade,
            '6': self.student_summary,
            '7': self.search_students,
            '8': self.export_data,
            '9': self.import_data,
        }

        while True:
            print("\n" + "=" * 60)
            print("CAMPUS RECORDS - MAIN MENU")
            print("=" * 60)
            print("1. Admit Student")
            print("2. Add Course")
            print("3. Enroll Student in Course")
            print("4. Withdraw Student from Course")
            print("5. Record Grade")
            print("6. Student Summary")
            print("7. Search Students by Name")
            print("8. Export Data")
            print("9. Import Data")
            print("0. Exit")
            print("=" * 60)

            choice = input("\nEnter choice (0-9): ").strip()

            if choice == '0':
                print("\n[System] Exiting...")
                break
            elif choice in actions:
                self._run(actions[choice])
            else:
                print("[ERROR] Invalid choice")

    def admit_student(self):
        registration_number = input("Registration Number: ").strip()
        full_name = input("Full Name: ").strip()
        email = input("Email: ").strip()
        dob_text = input("Date of Birth (YYYY-MM-DD, optional): ").strip()
        phone = input("Phone (optional): ").strip() or None

        date_of_birth = datetime.strptime(dob_text, config.DATE_FORMAT).date() if dob_text else None

        student = self.admissions.admit_student(
            registration_number, full_name, email, date_of_birth, phone
        )
        print(f"[SUCCESS] Student admitted with ID: {student.id}")

    def add_course(self):
        code = input("Course Code: ").strip()
        title = input("Title: ").strip()
        credit_hours = int(input("Credit Hours: ").strip())
        semester = input("Semester (SPRING/SUMMER/FALL): ").strip()
        department = input("Department (e.g. COMPUTER_SCIENCE): ").strip()
        description = input("Description (optional): ").strip() or None

        course = self.admissions.create_course(
            code, title, credit_hours, semester, department, description=description
        )
        print(f"[SUCCESS] Course created with ID: {course.id}")

    def enroll_student(self):
        student_id = input("Student ID: ").strip()
        course_id = input("Course ID: ").strip()

        enrollment = self.engine.enroll(student_id, course_id)
        print(f"[SUCCESS] Enrollment created: {enrollment.id}")
        print(f"Current credit load: {self.engine.credit_load(student_id)}/{config.MAX_CREDITS_PER_SEMESTER}")

    def withdraw_student(self):
        student_id = input("Student ID: ").strip()
        course_id = input("Course ID: ").strip()

        self.engine.withdraw(student_id, course_id)
        print("[SUCCESS] Student withdrawn from course")

    def record_grade(self):
        student_id = input("Student ID: ").strip()
        course_id = input("Course ID: ").strip()
        numeric_grade = float(input("Numeric Grade (0-100): ").strip())

        enrollment = self.engine.record_grade(student_id, course_id, numeric_grade)
        student = self.registry.get_student(student_id)
        print(f"[SUCCESS] Grade recorded: {enrollment.letter_grade}")
        print(f"Updated GPA: {format_gpa(student.current_gpa)}")

    def student_summary(self):
        student_id = input("Student ID: ").strip()

        student = self.admissions.get_student(student_id)
        summary = academic_summary(
            self.engine.student_enrollments(student_id),
            self.registry.courses_by_id()
        )

        print("\n" + "=" * 60)
        print(f"{student.person.full_name} ({student.registration_number})")
        print("=" * 60)
        print(f"Active: {student.active}")
        print(f"Courses: {summary['total_courses']} "
              f"(active {summary['active_courses']}, completed {summary['completed_courses']})")
        print(f"Credit Load: {summary['credit_load']}/{config.MAX_CREDITS_PER_SEMESTER}")
        print(f"GPA: {format_gpa(summary['gpa'])}")
        print("=" * 60)

    def search_students(self):
        name = input("Name contains: ").strip()
        students = search_by_field(self.registry, StudentField.FULL_NAME, name)

        if not students:
            print("No matching students")
            return

        for i, student in enumerate(students, 1):
            print(f"{i:<4} {student.id}  {student.registration_number:<12} {student.person.full_name}")

    def export_data(self):
        written = self.store.export_registry(self.data_dir)
        for file_name, path in written.items():
            print(f"✓ {file_name} -> {path}")

    def import_data(self):
        counts = self.store.load_registry(self.data_dir)
        print(f"✓ Imported: {counts}")


def main():
    """Main entry point"""
    system = CampusRecordsSystem()
    system.install_signal_handlers()

    try:
        system.initialize()
        system.show_menu()

    except Exception as e:
        print(f"\n[ERROR] System error: {e}")
        import traceback
        traceback.print_exc()

    finally:
        print("\n[System] Goodbye!")


if __name__ == "__main__":
    main()
