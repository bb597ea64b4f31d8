"""
Core entities for the CCRM platform.

Students and instructors share the ``Person`` record and are told apart by
their ``person_type`` tag. Courses are only created from a validated
``CourseSpec``; enrollments are created by the enrollment service.
"""

import time
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Optional, Set

from .enums import Grade, PersonType, Semester, StudentStatus
from .exceptions import InvalidDataError
from .validation import is_not_empty, is_valid_marks


class AbstractEntity:
    """Base entity with a stable ID, creation/update timestamps and a version counter."""

    def __init__(self, entity_id: Optional[str] = None):
        self._id = entity_id or str(uuid.uuid4())
        self._created_at = datetime.now(timezone.utc)
        self._updated_at = self._created_at
        self._version = 1

    @property
    def id(self) -> str:
        """Get the entity ID."""
        return self._id

    @property
    def created_at(self) -> datetime:
        """Get creation timestamp."""
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        """Get last update timestamp."""
        return self._updated_at

    @property
    def version(self) -> int:
        """Get current version."""
        return self._version

    def touch(self) -> None:
        """Refresh the update timestamp after an in-place change."""
        self._updated_at = datetime.now(timezone.utc)
        self._version += 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary."""
        return {
            'id': self._id,
            'created_at': self._created_at.isoformat(),
            'updated_at': self._updated_at.isoformat(),
            'version': self._version,
        }

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(self) is not type(other):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id})"


class Person(AbstractEntity):
    """Fields shared by every person; ``person_type`` says which kind it is."""

    def __init__(self, reg_no: str, full_name: str, email: str, person_type: PersonType, **kwargs):
        super().__init__(**kwargs)
        self._reg_no = reg_no
        self._full_name = full_name
        self._email = email
        self._person_type = person_type

    @property
    def reg_no(self) -> str:
        return self._reg_no

    @property
    def full_name(self) -> str:
        return self._full_name

    @property
    def email(self) -> str:
        return self._email

    @property
    def person_type(self) -> PersonType:
        return self._person_type

    def set_full_name(self, full_name: str) -> None:
        if not is_not_empty(full_name):
            raise InvalidDataError("Full name is required")
        self._full_name = full_name
        self.touch()

    def set_email(self, email: str) -> None:
        """Change the email; format is checked by the store on add/update."""
        self._email = email
        self.touch()

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            'reg_no': self._reg_no,
            'full_name': self._full_name,
            'email': self._email,
            'person_type': self._person_type.value,
        })
        return base_dict

    def __str__(self) -> str:
        return f"[{self._person_type.name}] {self._full_name} ({self._reg_no}) - {self._email}"


class Student(Person):
    """Student entity; the enrolled-course set is maintained by the enrollment service."""

    def __init__(self, reg_no: str, full_name: str, email: str, **kwargs):
        super().__init__(reg_no, full_name, email, PersonType.STUDENT, **kwargs)
        self._status = StudentStatus.ACTIVE
        self._enrollment_date = date.today()
        self._enrolled_course_codes: Set[str] = set()

    @property
    def status(self) -> StudentStatus:
        return self._status

    @property
    def enrollment_date(self) -> date:
        return self._enrollment_date

    @property
    def enrolled_course_codes(self) -> Set[str]:
        return self._enrolled_course_codes.copy()

    def set_status(self, status: StudentStatus) -> None:
        self._status = status
        self.touch()

    def enroll_in_course(self, course_code: str) -> None:
        self._enrolled_course_codes.add(course_code)
        self.touch()

    def drop_course(self, course_code: str) -> None:
        self._enrolled_course_codes.discard(course_code)
        self.touch()

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            'status': self._status.value,
            'enrollment_date': self._enrollment_date.isoformat(),
            'enrolled_course_codes': sorted(self._enrolled_course_codes),
        })
        return base_dict


class Instructor(Person):
    """Instructor entity with a department and the courses assigned to them."""

    def __init__(self, reg_no: str, full_name: str, email: str,
                 department: Optional[str] = None, **kwargs):
        super().__init__(reg_no, full_name, email, PersonType.INSTRUCTOR, **kwargs)
        self._department = department
        self._assigned_course_codes: Set[str] = set()

    @property
    def department(self) -> Optional[str]:
        return self._department

    @property
    def assigned_course_codes(self) -> Set[str]:
        return self._assigned_course_codes.copy()

    def set_department(self, department: Optional[str]) -> None:
        self._department = department
        self.touch()

    def assign_course(self, course_code: str) -> None:
        if course_code not in self._assigned_course_codes:
            self._assigned_course_codes.add(course_code)
            self.touch()

    def unassign_course(self, course_code: str) -> None:
        self._assigned_course_codes.discard(course_code)
        self.touch()

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            'department': self._department,
            'assigned_course_codes': sorted(self._assigned_course_codes),
        })
        return base_dict


def _render_student_profile(student: Student) -> str:
    lines = [
        "=== STUDENT PROFILE ===",
        f"ID: {student.id}",
        f"Registration No: {student.reg_no}",
        f"Name: {student.full_name}",
        f"Email: {student.email}",
        f"Status: {student.status.name}",
        f"Enrollment Date: {student.enrollment_date.isoformat()}",
        f"Enrolled Courses: {len(student.enrolled_course_codes)}",
    ]
    return "\n".join(lines) + "\n"


def _render_instructor_profile(instructor: Instructor) -> str:
    lines = [
        "=== INSTRUCTOR PROFILE ===",
        f"ID: {instructor.id}",
        f"Employee No: {instructor.reg_no}",
        f"Name: {instructor.full_name}",
        f"Email: {instructor.email}",
        f"Department: {instructor.department or 'Not Assigned'}",
        f"Assigned Courses: {len(instructor.assigned_course_codes)}",
    ]
    return "\n".join(lines) + "\n"


PROFILE_RENDERERS: Dict[PersonType, Callable[[Any], str]] = {
    PersonType.STUDENT: _render_student_profile,
    PersonType.INSTRUCTOR: _render_instructor_profile,
}


def render_profile(person: Person) -> str:
    """Render the detailed profile for a person according to their type."""
    return PROFILE_RENDERERS[person.person_type](person)


@dataclass(frozen=True)
class CourseSpec:
    """Everything needed to construct a Course."""
    code: Optional[str] = None
    title: Optional[str] = None
    credits: int = 0
    instructor: Optional[Instructor] = None
    department: Optional[str] = None
    semester: Optional[Semester] = None


def validate_course_spec(spec: CourseSpec) -> None:
    """Reject an incomplete course specification."""
    if not is_not_empty(spec.code):
        raise InvalidDataError("Course code is required", error_code="COURSE_CODE_REQUIRED")
    if not is_not_empty(spec.title):
        raise InvalidDataError("Course title is required", error_code="COURSE_TITLE_REQUIRED")
    if isinstance(spec.credits, bool) or not isinstance(spec.credits, int) or spec.credits <= 0:
        raise InvalidDataError("Credits must be a positive integer", error_code="COURSE_CREDITS_INVALID")


def build_course(spec: CourseSpec) -> "Course":
    """Validate a specification and produce a Course, or raise InvalidDataError."""
    validate_course_spec(spec)
    return Course(spec)


class CourseBuilder:
    """Fluent front end for filling a CourseSpec."""

    def __init__(self):
        self._spec = CourseSpec()

    def set_code(self, code: str) -> "CourseBuilder":
        self._spec = replace(self._spec, code=code)
        return self

    def set_title(self, title: str) -> "CourseBuilder":
        self._spec = replace(self._spec, title=title)
        return self

    def set_credits(self, credits: int) -> "CourseBuilder":
        self._spec = replace(self._spec, credits=credits)
        return self

    def set_instructor(self, instructor: Optional[Instructor]) -> "CourseBuilder":
        self._spec = replace(self._spec, instructor=instructor)
        return self

    def set_department(self, department: Optional[str]) -> "CourseBuilder":
        self._spec = replace(self._spec, department=department)
        return self

    def set_semester(self, semester: Optional[Semester]) -> "CourseBuilder":
        self._spec = replace(self._spec, semester=semester)
        return self

    @property
    def spec(self) -> CourseSpec:
        return self._spec

    def build(self) -> "Course":
        return build_course(self._spec)


class Course(AbstractEntity):
    """Course entity keyed by its immutable code."""

    def __init__(self, spec: CourseSpec):
        validate_course_spec(spec)
        super().__init__(entity_id=spec.code)
        self._code = spec.code
        self._title = spec.title
        self._credits = spec.credits
        self._instructor = spec.instructor
        self._department = spec.department
        self._semester = spec.semester

    @staticmethod
    def builder() -> CourseBuilder:
        return CourseBuilder()

    @property
    def code(self) -> str:
        return self._code

    @property
    def title(self) -> str:
        return self._title

    @property
    def credits(self) -> int:
        return self._credits

    @property
    def instructor(self) -> Optional[Instructor]:
        return self._instructor

    @property
    def department(self) -> Optional[str]:
        return self._department

    @property
    def semester(self) -> Optional[Semester]:
        return self._semester

    def set_title(self, title: str) -> None:
        if not is_not_empty(title):
            raise InvalidDataError("Course title is required")
        self._title = title
        self.touch()

    def set_credits(self, credits: int) -> None:
        if isinstance(credits, bool) or not isinstance(credits, int) or credits <= 0:
            raise InvalidDataError("Credits must be a positive integer")
        self._credits = credits
        self.touch()

    def set_instructor(self, instructor: Optional[Instructor]) -> None:
        """Change the instructor; the previous one is released from this course."""
        previous = self._instructor
        if previous is not None and previous is not instructor:
            previous.unassign_course(self._code)
        self._instructor = instructor
        self.touch()

    def set_department(self, department: Optional[str]) -> None:
        self._department = department
        self.touch()

    def set_semester(self, semester: Optional[Semester]) -> None:
        self._semester = semester
        self.touch()

    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            'code': self._code,
            'title': self._title,
            'credits': self._credits,
            'instructor': self._instructor.full_name if self._instructor else None,
            'department': self._department,
            'semester': self._semester.value if self._semester else None,
        })
        return base_dict

    def __str__(self) -> str:
        return (f"[{self._code}] {self._title} ({self._credits} credits) - "
                f"{self._instructor.full_name if self._instructor else 'No Instructor'} | "
                f"{self._department or 'No Department'} | "
                f"{self._semester.name if self._semester else 'No Semester'}")


def generate_enrollment_id(student_id: str, course_code: str) -> str:
    millis = int(time.time() * 1000)
    return f"ENR_{student_id}_{course_code}_{millis}_{uuid.uuid4().hex[:8]}"


class Enrollment(AbstractEntity):
    """Links one student to one course; grade and marks are always set together."""

    def __init__(self, student_id: str, course_code: str):
        super().__init__(entity_id=generate_enrollment_id(student_id, course_code))
        self._student_id = student_id
        self._course_code = course_code
        self._grade: Optional[Grade] = None
        self._marks: Optional[float] = None

    @property
    def enrollment_id(self) -> str:
        return self._id

    @property
    def student_id(self) -> str:
        return self._student_id

    @property
    def course_code(self) -> str:
        return self._course_code

    @property
    def enrollment_date(self) -> datetime:
        return self._created_at

    @property
    def grade(self) -> Optional[Grade]:
        return self._grade

    @property
    def marks(self) -> Optional[float]:
        return self._marks

    @property
    def is_graded(self) -> bool:
        return self._grade is not None

    def set_grade(self, grade: Grade, marks: float) -> None:
        """Overwrite the grade/marks pair; nothing changes if either is invalid."""
        if not isinstance(grade, Grade):
            raise InvalidDataError("A grade is required when recording marks")
        if not is_valid_marks(marks):
            raise InvalidDataError(f"Marks must be between 0 and 100, got {marks!r}",
                                   error_code="MARKS_OUT_OF_RANGE")
        self._grade = grade
        self._marks = float(marks)
        self.touch()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'enrollment_id': self._id,
            'student_id': self._student_id,
            'course_code': self._course_code,
            'enrollment_date': self._created_at.isoformat(),
            'grade': self._grade.name if self._grade else None,
            'marks': self._marks,
        }

    def __str__(self) -> str:
        grade_info = (f" | Grade: {self._grade.name} ({self._marks:.2f})"
                      if self._grade else " | Not Graded")
        return f"Enrollment[{self._id}] Student: {self._student_id}, Course: {self._course_code}{grade_info}"
