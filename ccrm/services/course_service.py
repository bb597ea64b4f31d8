"""
Course store: keyed by course code.
"""

from typing import Callable, Dict, List, Optional

from ..core.entities import Course
from ..core.enums import Semester
from ..core.exceptions import DuplicateEntityError, InvalidDataError, ResourceNotFoundError
from ..core.interfaces import EntityStore, Searchable
from ..core.validation import is_valid_course_code


class CourseStore(EntityStore[Course], Searchable[Course]):
    """In-memory collection of courses."""

    def __init__(self):
        self._courses: Dict[str, Course] = {}

    def add(self, course: Course) -> Course:
        """Add a course and assign it to its instructor, if it has one."""
        if course is None:
            raise InvalidDataError("Course cannot be None")
        if not is_valid_course_code(course.code):
            raise InvalidDataError(f"Invalid course code format: {course.code!r}",
                                   error_code="INVALID_COURSE_CODE")
        if course.code in self._courses:
            raise DuplicateEntityError(f"Course with code {course.code} already exists",
                                       error_code="DUPLICATE_COURSE")
        self._courses[course.code] = course
        if course.instructor is not None:
            course.instructor.assign_course(course.code)
        return course

    def find_by_key(self, code: str) -> Optional[Course]:
        return self._courses.get(code)

    def update(self, course: Course) -> Course:
        if course.code not in self._courses:
            raise ResourceNotFoundError(f"Course with code {course.code} not found")
        previous = self._courses[course.code].instructor
        if previous is not None and previous is not course.instructor:
            previous.unassign_course(course.code)
        self._courses[course.code] = course
        if course.instructor is not None:
            course.instructor.assign_course(course.code)
        return course

    def all(self) -> List[Course]:
        """All courses sorted by code."""
        return sorted(self._courses.values(), key=lambda course: course.code)

    def search(self, criteria: Callable[[Course], bool]) -> List[Course]:
        return [course for course in self.all() if criteria(course)]

    def search_by_department(self, department: str) -> List[Course]:
        wanted = department.lower()
        return self.search(lambda course: course.department is not None
                           and course.department.lower() == wanted)

    def search_by_instructor(self, instructor_name: str) -> List[Course]:
        pattern = instructor_name.lower()
        return self.search(lambda course: course.instructor is not None
                           and pattern in course.instructor.full_name.lower())

    def search_by_semester(self, semester: Semester) -> List[Course]:
        return self.search(lambda course: course.semester == semester)

    def courses_by_credit_range(self, min_credits: int, max_credits: int) -> List[Course]:
        return self.search(lambda course: min_credits <= course.credits <= max_credits)

    def department_statistics(self) -> Dict[str, int]:
        """Number of courses per department; courses without one are left out."""
        stats: Dict[str, int] = {}
        for course in self._courses.values():
            if course.department is not None:
                stats[course.department] = stats.get(course.department, 0) + 1
        return stats

    def count(self) -> int:
        return len(self._courses)

    def __len__(self) -> int:
        return len(self._courses)

    def __contains__(self, code: object) -> bool:
        return code in self._courses
