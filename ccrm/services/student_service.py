"""
Student store: keyed by student ID, with registration numbers kept unique.
"""

from typing import Callable, Dict, List, Optional

from ..core.entities import Student
from ..core.enums import StudentStatus
from ..core.exceptions import DuplicateEntityError, InvalidDataError, ResourceNotFoundError
from ..core.interfaces import EntityStore, Searchable
from ..core.validation import is_not_empty, is_valid_email


def _name_key(student: Student) -> str:
    return student.full_name.lower()


class StudentStore(EntityStore[Student], Searchable[Student]):
    """In-memory collection of students."""

    def __init__(self):
        self._students: Dict[str, Student] = {}

    def add(self, student: Student) -> Student:
        """Add a student; ID and registration number must both be unused."""
        self._validate(student)
        if student.id in self._students:
            raise DuplicateEntityError(f"Student with ID {student.id} already exists",
                                       error_code="DUPLICATE_STUDENT_ID")
        if self.find_by_reg_no(student.reg_no) is not None:
            raise DuplicateEntityError(f"Student with registration number {student.reg_no} already exists",
                                       error_code="DUPLICATE_REG_NO")
        self._students[student.id] = student
        return student

    def find_by_key(self, student_id: str) -> Optional[Student]:
        return self._students.get(student_id)

    def find_by_reg_no(self, reg_no: str) -> Optional[Student]:
        for student in self._students.values():
            if student.reg_no == reg_no:
                return student
        return None

    def update(self, student: Student) -> Student:
        """Replace the stored student with the same ID."""
        if student.id not in self._students:
            raise ResourceNotFoundError(f"Student with ID {student.id} not found")
        self._validate(student)
        holder = self.find_by_reg_no(student.reg_no)
        if holder is not None and holder.id != student.id:
            raise DuplicateEntityError(f"Student with registration number {student.reg_no} already exists",
                                       error_code="DUPLICATE_REG_NO")
        self._students[student.id] = student
        return student

    def all(self) -> List[Student]:
        """All students sorted by full name, case-insensitively."""
        return sorted(self._students.values(), key=_name_key)

    def search(self, criteria: Callable[[Student], bool]) -> List[Student]:
        return [student for student in self.all() if criteria(student)]

    def search_by_name(self, name_pattern: str) -> List[Student]:
        pattern = name_pattern.lower()
        return self.search(lambda student: pattern in student.full_name.lower())

    def active_students(self) -> List[Student]:
        return self.search(lambda student: student.status == StudentStatus.ACTIVE)

    def deactivate(self, student_id: str) -> Student:
        student = self._students.get(student_id)
        if student is None:
            raise ResourceNotFoundError(f"Student with ID {student_id} not found")
        student.set_status(StudentStatus.INACTIVE)
        return student

    def count(self) -> int:
        return len(self._students)

    def count_by_status(self) -> Dict[StudentStatus, int]:
        counts = {status: 0 for status in StudentStatus}
        for student in self._students.values():
            counts[student.status] += 1
        return counts

    def __len__(self) -> int:
        return len(self._students)

    def __contains__(self, student_id: object) -> bool:
        return student_id in self._students

    @staticmethod
    def _validate(student: Student) -> None:
        if student is None:
            raise InvalidDataError("Student cannot be None")
        if not is_not_empty(student.id):
            raise InvalidDataError("Student ID is required")
        if not is_not_empty(student.reg_no):
            raise InvalidDataError("Registration number is required")
        if not is_not_empty(student.full_name):
            raise InvalidDataError("Full name is required")
        if not is_valid_email(student.email):
            raise InvalidDataError(f"Invalid email format: {student.email!r}", error_code="INVALID_EMAIL")
