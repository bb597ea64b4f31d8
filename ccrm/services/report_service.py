"""
Read-only academic reports.

Every function works on the snapshots it is given and returns frozen
results. Nothing is cached, so each call reflects the current state of the
services.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from ..core.entities import Course, Student
from ..core.enums import StudentStatus
from .enrollment_service import EnrollmentService


@dataclass(frozen=True)
class StudentGPA:
    student_id: str
    reg_no: str
    full_name: str
    gpa: float


@dataclass(frozen=True)
class GPABucket:
    label: str
    lower: float
    upper: float  # exclusive, except for the top bucket
    count: int


@dataclass(frozen=True)
class CourseEnrollmentCount:
    course_code: str
    title: str
    department: str
    enrolled: int


@dataclass(frozen=True)
class DepartmentSummary:
    department: str
    course_count: int
    total_credits: int


# (label, lower bound inclusive, upper bound)
GPA_BUCKETS: Tuple[Tuple[str, float, float], ...] = (
    ("9.0 - 10.0 (Excellent)", 9.0, 10.0),
    ("8.0 - 8.9 (Very Good)", 8.0, 9.0),
    ("7.0 - 7.9 (Good)", 7.0, 8.0),
    ("6.0 - 6.9 (Average)", 6.0, 7.0),
    ("Below 6.0 (Poor)", 0.0, 6.0),
)


def gpa_bucket_label(gpa: float) -> str:
    """Name the distribution bucket a GPA falls into."""
    for label, lower, _ in GPA_BUCKETS:
        if gpa >= lower:
            return label
    return GPA_BUCKETS[-1][0]


class ReportService:
    """Aggregates over students, courses and enrollments."""

    def __init__(self, enrollment_service: EnrollmentService):
        self._enrollment_service = enrollment_service

    def _gpas(self, students: Iterable[Student]) -> List[StudentGPA]:
        return [
            StudentGPA(s.id, s.reg_no, s.full_name, self._enrollment_service.gpa(s.id))
            for s in students
        ]

    def top_students_by_gpa(self, students: Iterable[Student], limit: int = 10) -> Tuple[StudentGPA, ...]:
        """Students with a GPA above zero, best first; ties are ordered by name."""
        ranked = [entry for entry in self._gpas(students) if entry.gpa > 0.0]
        ranked.sort(key=lambda entry: entry.full_name.lower())
        ranked.sort(key=lambda entry: entry.gpa, reverse=True)
        return tuple(ranked[:max(limit, 0)])

    def gpa_distribution(self, students: Iterable[Student]) -> Tuple[GPABucket, ...]:
        """Count students per GPA bucket, highest bucket first. Zero GPAs are not counted."""
        counts: Dict[str, int] = {label: 0 for label, _, _ in GPA_BUCKETS}
        for entry in self._gpas(students):
            if entry.gpa > 0.0:
                counts[gpa_bucket_label(entry.gpa)] += 1
        return tuple(GPABucket(label, lower, upper, counts[label]) for label, lower, upper in GPA_BUCKETS)

    def course_enrollment_counts(self, courses: Iterable[Course]) -> Tuple[CourseEnrollmentCount, ...]:
        return tuple(
            CourseEnrollmentCount(
                course_code=course.code,
                title=course.title,
                department=course.department or "N/A",
                enrolled=len(self._enrollment_service.course_enrollments(course.code)),
            )
            for course in sorted(courses, key=lambda c: c.code)
        )

    @staticmethod
    def department_summary(courses: Iterable[Course]) -> Tuple[DepartmentSummary, ...]:
        """Course count and total credits per department, sorted by department."""
        totals: Dict[str, List[int]] = {}
        for course in courses:
            if course.department is None:
                continue
            bucket = totals.setdefault(course.department, [0, 0])
            bucket[0] += 1
            bucket[1] += course.credits
        return tuple(
            DepartmentSummary(department, count, credits)
            for department, (count, credits) in sorted(totals.items())
        )

    @staticmethod
    def student_status_summary(students: Iterable[Student]) -> Dict[StudentStatus, int]:
        counts = {status: 0 for status in StudentStatus}
        for student in students:
            counts[student.status] += 1
        return counts
