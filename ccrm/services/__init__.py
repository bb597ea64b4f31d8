"""
Services module containing the stores, the enrollment engine and the read-only reports.
"""

from .student_service import StudentStore
from .course_service import CourseStore
from .enrollment_service import EnrollmentService
from .transcript_service import TranscriptService
from .report_service import (
    ReportService, StudentGPA, GPABucket, CourseEnrollmentCount, DepartmentSummary
)

__all__ = [
    "StudentStore",
    "CourseStore",
    "EnrollmentService",
    "TranscriptService",
    "ReportService",
    "StudentGPA",
    "GPABucket",
    "CourseEnrollmentCount",
    "DepartmentSummary",
]
