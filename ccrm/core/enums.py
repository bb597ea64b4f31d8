"""
Enumerations and constants for the CCRM platform.
"""

from enum import Enum
from functools import total_ordering


class StudentStatus(Enum):
    """Lifecycle status of a student."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    GRADUATED = "graduated"


class PersonType(Enum):
    """Types of persons in the system."""
    STUDENT = "student"
    INSTRUCTOR = "instructor"


class Semester(Enum):
    """Academic terms a course can be offered in."""
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"


class CreditLimitScope(Enum):
    """How a student's committed credit load is summed for admission control."""
    GLOBAL = "global"  # every current enrollment counts
    PER_SEMESTER = "per_semester"  # only enrollments in the new course's semester


@total_ordering
class Grade(Enum):
    """Letter grades on a ten-point scale, ordered S > A > ... > F."""
    S = (10.0, "Outstanding")
    A = (9.0, "Excellent")
    B = (8.0, "Very Good")
    C = (7.0, "Good")
    D = (6.0, "Average")
    E = (5.0, "Pass")
    F = (0.0, "Fail")
    
    @property
    def grade_points(self) -> float:
        return self.value[0]
    
    @property
    def description(self) -> str:
        return self.value[1]
    
    @classmethod
    def from_marks(cls, marks: float) -> "Grade":
        """Map a numeric score to a letter; a boundary value takes the higher grade."""
        if marks >= 90:
            return cls.S
        if marks >= 80:
            return cls.A
        if marks >= 70:
            return cls.B
        if marks >= 60:
            return cls.C
        if marks >= 50:
            return cls.D
        if marks >= 40:
            return cls.E
        return cls.F
    
    def __lt__(self, other):
        if not isinstance(other, Grade):
            return NotImplemented
        return self.grade_points < other.grade_points
    
    def __str__(self) -> str:
        return f"{self.name} ({self.grade_points})"
