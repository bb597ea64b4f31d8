"""
Enrollment service: admission control, grade recording and GPA.

Enrollments are kept in one insertion-ordered list. Queries filter and sort
that list by enrollment date; Python's stable sort keeps insertion order for
equal dates. Every operation checks all of its preconditions before it
mutates anything.
"""

from typing import Any, Callable, Dict, List, Optional

from ..config import AppConfig
from ..core.entities import Course, Enrollment, Student
from ..core.enums import CreditLimitScope, Grade, Semester
from ..core.exceptions import (
    CreditLimitExceededError, DuplicateEnrollmentError, EnrollmentNotFoundError, InvalidDataError
)
from ..core.transcript import weighted_gpa
from ..core.validation import is_valid_marks
from .course_service import CourseStore
from .student_service import StudentStore


def _by_enrollment_date(enrollment: Enrollment):
    return enrollment.enrollment_date


class EnrollmentService:
    """Manages the enrollments that link students to courses."""

    def __init__(self, student_store: StudentStore, course_store: CourseStore,
                 config: Optional[AppConfig] = None):
        self._student_store = student_store
        self._course_store = course_store
        self._config = config or AppConfig()
        self._enrollments: List[Enrollment] = []

    @property
    def max_credits(self) -> int:
        return self._config.max_credits_per_semester

    @property
    def credit_limit_scope(self) -> CreditLimitScope:
        return self._config.credit_limit_scope

    def enroll(self, student: Student, course: Course) -> Enrollment:
        """Enroll a student in a course.

        Raises DuplicateEnrollmentError if the pair is already enrolled and
        CreditLimitExceededError if the course would take the student's load
        over the configured ceiling. Reaching the ceiling exactly is allowed.
        """
        if self.find_enrollment(student.id, course.code) is not None:
            raise DuplicateEnrollmentError(
                f"Student {student.id} is already enrolled in course {course.code}",
                error_code="DUPLICATE_ENROLLMENT",
                details={'student_id': student.id, 'course_code': course.code},
            )

        if self.credit_limit_scope == CreditLimitScope.PER_SEMESTER:
            current_credits = self._credits_where(student.id, lambda c: c.semester == course.semester)
        else:
            current_credits = self.current_credits(student.id)
        if current_credits + course.credits > self.max_credits:
            raise CreditLimitExceededError(
                f"Enrolling in {course.code} would exceed maximum credits per semester ({self.max_credits})",
                error_code="CREDIT_LIMIT_EXCEEDED",
                details={
                    'student_id': student.id,
                    'course_code': course.code,
                    'current_credits': current_credits,
                    'course_credits': course.credits,
                    'max_credits': self.max_credits,
                },
            )

        enrollment = Enrollment(student.id, course.code)
        self._enrollments.append(enrollment)
        student.enroll_in_course(course.code)
        return enrollment

    def unenroll(self, student_id: str, course_code: str) -> Enrollment:
        """Remove an enrollment and take the course off the student's enrolled set."""
        for index, enrollment in enumerate(self._enrollments):
            if enrollment.student_id == student_id and enrollment.course_code == course_code:
                break
        else:
            raise self._not_found(student_id, course_code)

        del self._enrollments[index]
        student = self._student_store.find_by_key(student_id)
        if student is not None:
            student.drop_course(course_code)
        return enrollment

    def record_grade(self, student_id: str, course_code: str,
                     grade: Optional[Grade], marks: float) -> Enrollment:
        """Overwrite the grade and marks of an enrollment.

        When ``grade`` is None it is derived from ``marks``.
        """
        enrollment = self.find_enrollment(student_id, course_code)
        if enrollment is None:
            raise self._not_found(student_id, course_code)
        if not is_valid_marks(marks):
            raise InvalidDataError(f"Marks must be between 0 and 100, got {marks!r}",
                                   error_code="MARKS_OUT_OF_RANGE")
        if grade is not None and not isinstance(grade, Grade):
            raise InvalidDataError(f"Unknown grade: {grade!r}")

        enrollment.set_grade(grade if grade is not None else Grade.from_marks(marks), marks)
        return enrollment

    def find_enrollment(self, student_id: str, course_code: str) -> Optional[Enrollment]:
        for enrollment in self._enrollments:
            if enrollment.student_id == student_id and enrollment.course_code == course_code:
                return enrollment
        return None

    def student_enrollments(self, student_id: str) -> List[Enrollment]:
        """A student's enrollments, oldest first."""
        return sorted((e for e in self._enrollments if e.student_id == student_id),
                      key=_by_enrollment_date)

    def course_enrollments(self, course_code: str) -> List[Enrollment]:
        """A course's enrollments, oldest first."""
        return sorted((e for e in self._enrollments if e.course_code == course_code),
                      key=_by_enrollment_date)

    def all_enrollments(self) -> List[Enrollment]:
        """Snapshot of every enrollment in insertion order."""
        return list(self._enrollments)

    def current_credits(self, student_id: str, semester: Optional[Semester] = None) -> int:
        """Credits the student currently carries.

        With ``semester`` given, only courses offered in that semester count.
        """
        if semester is None:
            return self._credits_where(student_id, lambda course: True)
        return self._credits_where(student_id, lambda course: course.semester == semester)

    def _credits_where(self, student_id: str, include: Callable[[Course], bool]) -> int:
        total = 0
        for enrollment in self._enrollments:
            if enrollment.student_id != student_id:
                continue
            course = self._course_store.find_by_key(enrollment.course_code)
            if course is not None and include(course):
                total += course.credits
        return total

    def gpa(self, student_id: str) -> float:
        """Credit-weighted GPA over graded enrollments, using each course's real credits."""
        pairs = []
        for enrollment in self.student_enrollments(student_id):
            if not enrollment.is_graded:
                continue
            course = self._course_store.find_by_key(enrollment.course_code)
            if course is None:
                continue
            pairs.append((enrollment.grade, course.credits))
        return weighted_gpa(pairs)

    def get_statistics(self) -> Dict[str, Any]:
        """Get enrollment statistics."""
        graded = sum(1 for e in self._enrollments if e.is_graded)
        return {
            'total_enrollments': len(self._enrollments),
            'graded_enrollments': graded,
            'ungraded_enrollments': len(self._enrollments) - graded,
            'max_credits_per_semester': self.max_credits,
            'credit_limit_scope': self.credit_limit_scope.value,
        }

    def __len__(self) -> int:
        return len(self._enrollments)

    @staticmethod
    def _not_found(student_id: str, course_code: str) -> EnrollmentNotFoundError:
        return EnrollmentNotFoundError(
            f"No enrollment found for student {student_id} in course {course_code}",
            error_code="ENROLLMENT_NOT_FOUND",
            details={'student_id': student_id, 'course_code': course_code},
        )
