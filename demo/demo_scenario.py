#!/usr/bin/env python3
"""
Demo scenario for the CCRM platform.
"""

import sys
import os
import tempfile

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ccrm.config import AppConfig
from ccrm.core.entities import CourseBuilder, Instructor, Student, render_profile
from ccrm.core.enums import CreditLimitScope, Semester
from ccrm.core.exceptions import CCRMException, CreditLimitExceededError, DuplicateEnrollmentError
from ccrm.main import CCRMPlatform
from ccrm.ui import (
    format_course_enrollments, format_department_summary, format_gpa_distribution,
    format_top_students, format_transcript
)


def run_demo():
    """Run a walkthrough of the CCRM platform."""
    print("=" * 60)
    print("CCRM ACADEMIC RECORDS PLATFORM - DEMO")
    print("=" * 60)

    backup_root = tempfile.mkdtemp(prefix="ccrm_demo_")
    config = AppConfig(
        max_credits_per_semester=12,
        credit_limit_scope=CreditLimitScope.PER_SEMESTER,
        backup_directory=os.path.join(backup_root, "backups"),
        export_directory=os.path.join(backup_root, "exports"),
        data_directory=os.path.join(backup_root, "data"),
    )
    platform = CCRMPlatform(config)

    try:
        print("\n1. Creating sample data...")
        create_sample_data(platform)

        print("\n2. Demonstrating enrollment rules...")
        demonstrate_enrollment(platform)

        print("\n3. Recording grades...")
        demonstrate_grading(platform)

        print("\n4. Transcripts...")
        demonstrate_transcripts(platform)

        print("\n5. Reports...")
        show_reports(platform)

        print("\n6. Backup...")
        demonstrate_backup(platform)

        print("\n" + "=" * 60)
        print("DEMO COMPLETED SUCCESSFULLY!")
        print("=" * 60)

    except CCRMException as e:
        print(f"\nDemo failed with error: {e.message}")
        import traceback
        traceback.print_exc()


def create_sample_data(platform):
    """Create instructors, courses and students."""
    print("  Creating courses...")

    turing = Instructor("E100", "Dr. Alan Turing", "turing@university.edu", department="Computer Science")
    noether = Instructor("E200", "Dr. Emmy Noether", "noether@university.edu", department="Mathematics")

    course_rows = [
        ("CS101", "Introduction to Computer Science", 4, turing, "Computer Science", Semester.FALL),
        ("CS201", "Data Structures and Algorithms", 4, turing, "Computer Science", Semester.FALL),
        ("CS301", "Software Engineering", 3, turing, "Computer Science", Semester.SPRING),
        ("MATH101", "Calculus I", 4, noether, "Mathematics", Semester.FALL),
        ("MATH201", "Linear Algebra", 3, noether, "Mathematics", Semester.SPRING),
        ("MATH110", "Discrete Mathematics", 3, noether, "Mathematics", Semester.FALL),
    ]
    for code, title, credits, instructor, department, semester in course_rows:
        course = (CourseBuilder()
                  .set_code(code)
                  .set_title(title)
                  .set_credits(credits)
                  .set_instructor(instructor)
                  .set_department(department)
                  .set_semester(semester)
                  .build())
        platform.course_store.add(course)

    print(render_profile(turing))

    print("  Creating students...")
    students = [
        Student("2024001", "Alice Johnson", "alice@university.edu", entity_id="S001"),
        Student("2024002", "Bob Smith", "bob@university.edu", entity_id="S002"),
        Student("2024003", "Carol Davis", "carol@university.edu", entity_id="S003"),
        Student("2024004", "David Wilson", "david@university.edu", entity_id="S004"),
        Student("2024005", "Eve Brown", "eve@university.edu", entity_id="S005"),
    ]
    for student in students:
        platform.student_store.add(student)

    print(render_profile(students[0]))
    print("  ✓ Sample data created successfully")


def demonstrate_enrollment(platform):
    """Enroll students and show the duplicate and credit-limit rules."""
    plan = {
        "S001": ["CS101", "MATH101", "CS301"],
        "S002": ["CS101", "CS201"],
        "S003": ["MATH101", "MATH201"],
        "S004": ["CS201", "CS301"],
        "S005": ["MATH201"],
    }
    for student_id, codes in plan.items():
        student = platform.student_store.find_by_key(student_id)
        for code in codes:
            platform.enrollment_service.enroll(student, platform.course_store.find_by_key(code))
            print(f"    {student_id} -> {code}: enrolled")

    alice = platform.student_store.find_by_key("S001")
    print("  Testing duplicate enrollment...")
    try:
        platform.enrollment_service.enroll(alice, platform.course_store.find_by_key("CS101"))
    except DuplicateEnrollmentError as e:
        print(f"    rejected: {e.message}")

    print("  Testing the credit ceiling (12 per semester)...")
    try:
        platform.enrollment_service.enroll(alice, platform.course_store.find_by_key("CS201"))
        print("    S001 -> CS201: enrolled")
        platform.enrollment_service.enroll(alice, platform.course_store.find_by_key("MATH110"))
    except CreditLimitExceededError as e:
        print(f"    rejected: {e.message} (details: {e.details})")

    print("  Unenrolling S005 from MATH201...")
    platform.enrollment_service.unenroll("S005", "MATH201")
    eve = platform.student_store.find_by_key("S005")
    print(f"    S005 enrolled courses now: {sorted(eve.enrolled_course_codes) or 'none'}")


def demonstrate_grading(platform):
    marks = {
        ("S001", "CS101"): 95, ("S001", "MATH101"): 88, ("S001", "CS301"): 79,
        ("S002", "CS101"): 67, ("S002", "CS201"): 72,
        ("S003", "MATH101"): 52, ("S003", "MATH201"): 90,
        ("S004", "CS201"): 35,
    }
    for (student_id, code), score in marks.items():
        enrollment = platform.enrollment_service.record_grade(student_id, code, None, score)
        print(f"    {student_id} {code}: {score} -> {enrollment.grade}")

    for student in platform.student_store.all():
        print(f"    GPA {student.full_name}: {platform.enrollment_service.gpa(student.id):.2f}")


def demonstrate_transcripts(platform):
    for student_id in ("S001", "S005"):
        transcript = platform.transcript_service.build(platform.student_store.find_by_key(student_id))
        print(format_transcript(transcript))
        print()


def show_reports(platform):
    students = platform.student_store.all()
    courses = platform.course_store.all()
    print(format_top_students(platform.report_service.top_students_by_gpa(students, 3)))
    print()
    print(format_gpa_distribution(platform.report_service.gpa_distribution(students)))
    print()
    print(format_course_enrollments(platform.report_service.course_enrollment_counts(courses)))
    print()
    print(format_department_summary(platform.report_service.department_summary(courses)))


def demonstrate_backup(platform):
    backup_dir = platform.file_service.create_backup(
        platform.student_store, platform.course_store, platform.enrollment_service)
    print(f"  Backup written to {backup_dir}")
    for path in platform.file_service.list_backup_files():
        print(f"    {path.name}")
    print(f"  Backup size: {platform.file_service.backup_directory_size()} bytes")


if __name__ == "__main__":
    run_demo()
