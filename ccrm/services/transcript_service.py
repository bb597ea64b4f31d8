"""
Transcript generation.
"""

from typing import List, Optional

from ..core.entities import Enrollment, Student
from ..core.exceptions import ResourceNotFoundError
from ..core.transcript import Transcript, TranscriptEntry
from .course_service import CourseStore
from .enrollment_service import EnrollmentService
from .student_service import StudentStore


class TranscriptService:
    """Builds transcript snapshots from enrollments and the course catalogue."""

    def __init__(self, enrollment_service: EnrollmentService, course_store: CourseStore):
        self._enrollment_service = enrollment_service
        self._course_store = course_store

    def build(self, student: Student) -> Transcript:
        """Build a fresh transcript; enrollments whose course is unknown are left out."""
        entries: List[TranscriptEntry] = []
        for enrollment in self._enrollment_service.student_enrollments(student.id):
            entry = self._create_entry(enrollment)
            if entry is not None:
                entries.append(entry)

        return Transcript(
            student_id=student.id,
            reg_no=student.reg_no,
            student_name=student.full_name,
            entries=tuple(entries),
        )

    def build_for(self, student_id: str, student_store: StudentStore) -> Transcript:
        student = student_store.find_by_key(student_id)
        if student is None:
            raise ResourceNotFoundError(f"Student with ID {student_id} not found")
        return self.build(student)

    def _create_entry(self, enrollment: Enrollment) -> Optional[TranscriptEntry]:
        course = self._course_store.find_by_key(enrollment.course_code)
        if course is None:
            return None
        return TranscriptEntry(
            course_code=course.code,
            course_title=course.title,
            credits=course.credits,
            grade=enrollment.grade,
            marks=enrollment.marks,
        )
