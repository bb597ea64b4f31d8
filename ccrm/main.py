"""
Main entry point for the CCRM platform.
"""

import threading
import time
from typing import Optional

from .api.rest_api import CCRMRestAPI
from .config import AppConfig
from .core.entities import CourseBuilder, Instructor, Student
from .core.enums import Semester
from .core.exceptions import CCRMException
from .persistence import FileOperationService
from .services import (
    CourseStore, EnrollmentService, ReportService, StudentStore, TranscriptService
)
from .ui import (
    format_course_table, format_department_summary, format_gpa_distribution,
    format_top_students, format_transcript
)


class CCRMPlatform:
    """Main platform class that wires the stores, services and API together."""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig()
        self._rest_thread = None
        self._running = False

        # Initialize platform
        self._initialize_platform()

    def _initialize_platform(self):
        """Initialize the platform with all services."""
        print("Initializing CCRM platform...")

        self.student_store = StudentStore()
        self.course_store = CourseStore()
        print("✓ Stores initialized")

        self.enrollment_service = EnrollmentService(self.student_store, self.course_store, self._config)
        self.transcript_service = TranscriptService(self.enrollment_service, self.course_store)
        self.report_service = ReportService(self.enrollment_service)
        self.file_service = FileOperationService(self._config)
        print(f"✓ Services initialized (credit ceiling: {self._config.max_credits_per_semester}, "
              f"scope: {self._config.credit_limit_scope.value})")

        self.rest_api = CCRMRestAPI(
            self.student_store,
            self.course_store,
            self.enrollment_service,
            self.transcript_service,
            self.report_service,
            self._config
        )
        print("✓ API initialized")

        print("✓ CCRM platform initialized successfully!")

    @property
    def config(self) -> AppConfig:
        return self._config

    def start_rest_server(self, host: str = "0.0.0.0", port: int = 8000):
        """Start the REST server."""
        if self._rest_thread is not None:
            print("REST server already running")
            return

        import uvicorn

        def run_server():
            uvicorn.run(
                self.rest_api.app,
                host=host,
                port=port,
                log_level="info"
            )

        # Start server in a separate thread
        self._rest_thread = threading.Thread(target=run_server, daemon=True)
        self._rest_thread.start()
        self._running = True

        print(f"✓ REST server started on {host}:{port}")
        print(f"  - REST API: http://localhost:{port}")
        print(f"  - API Docs: http://localhost:{port}/docs")

    def create_sample_data(self):
        """Create sample data for demonstration."""
        print("Creating sample data...")

        smith = Instructor("I001", "Dr. Alan Smith", "alan.smith@university.edu", department="Computer Science")
        jones = Instructor("I002", "Dr. Grace Jones", "grace.jones@university.edu", department="Mathematics")

        courses = [
            CourseBuilder().set_code("CS101").set_title("Introduction to Programming").set_credits(4)
            .set_instructor(smith).set_department("Computer Science").set_semester(Semester.FALL).build(),
            CourseBuilder().set_code("CS201").set_title("Data Structures").set_credits(3)
            .set_instructor(smith).set_department("Computer Science").set_semester(Semester.SPRING).build(),
            CourseBuilder().set_code("MATH101").set_title("Calculus I").set_credits(3)
            .set_instructor(jones).set_department("Mathematics").set_semester(Semester.FALL).build(),
        ]
        for course in courses:
            self.course_store.add(course)

        students = [
            Student("2024001", "Alice Johnson", "alice@university.edu", entity_id="S001"),
            Student("2024002", "Bob Smith", "bob@university.edu", entity_id="S002"),
            Student("2024003", "Carol Davis", "carol@university.edu", entity_id="S003"),
        ]
        for student in students:
            self.student_store.add(student)

        print("✓ Sample data created")

    def run_demo(self):
        """Run a demonstration of the platform."""
        print("Running CCRM platform demonstration...")

        self.create_sample_data()

        print("\n=== Courses ===")
        print(format_course_table(self.course_store.all()))

        print("\n=== Enrollment Demo ===")
        marks = {"S001": (92, 85), "S002": (74, 66), "S003": (58, 45)}
        for student in self.student_store.all():
            for course_code, score in zip(("CS101", "MATH101"), marks[student.id]):
                course = self.course_store.find_by_key(course_code)
                try:
                    self.enrollment_service.enroll(student, course)
                    self.enrollment_service.record_grade(student.id, course_code, None, score)
                    print(f"✓ {student.full_name} enrolled in {course_code} (marks {score})")
                except CCRMException as e:
                    print(f"✗ {student.full_name} could not enroll in {course_code}: {e.message}")

        print()
        print(format_transcript(self.transcript_service.build(self.student_store.find_by_key("S001"))))
        print()
        print(format_top_students(self.report_service.top_students_by_gpa(
            self.student_store.all(), self._config.top_students_limit)))
        print()
        print(format_gpa_distribution(self.report_service.gpa_distribution(self.student_store.all())))
        print()
        print(format_department_summary(self.report_service.department_summary(self.course_store.all())))

        print(f"\nEnrollment Service: {self.enrollment_service.get_statistics()}")
        print("\n✓ Demo completed")


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="CCRM Academic Records Platform")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="REST server host")
    parser.add_argument("--rest-port", type=int, default=8000, help="REST server port")
    parser.add_argument("--demo", action="store_true", help="Run demo mode")
    parser.add_argument("--config", type=str, help="Configuration file path")

    args = parser.parse_args()

    # Load configuration
    config = AppConfig.from_file(args.config) if args.config else AppConfig()

    platform = CCRMPlatform(config)

    try:
        if args.demo:
            platform.run_demo()
        else:
            platform.start_rest_server(host=args.host, port=args.rest_port)

            # Keep running
            print("\nPlatform is running. Press Ctrl+C to stop.")
            while True:
                time.sleep(1)

    except KeyboardInterrupt:
        print("\nShutting down...")


if __name__ == "__main__":
    main()
