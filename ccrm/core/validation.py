"""
Field validation helpers shared by the stores and the API layer.
"""

import re
from typing import Any, Optional

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
COURSE_CODE_PATTERN = re.compile(r"^[A-Z]{2,4}\d{3,4}$")

MIN_COURSE_CREDITS = 1
MAX_COURSE_CREDITS = 6
MIN_MARKS = 0.0
MAX_MARKS = 100.0


def is_valid_email(email: Optional[str]) -> bool:
    """Check an email address against the accepted format."""
    return email is not None and EMAIL_PATTERN.match(email) is not None


def is_valid_course_code(course_code: Optional[str]) -> bool:
    """Check a course code: 2-4 uppercase letters followed by 3-4 digits (e.g. CS101, MATH1001)."""
    return course_code is not None and COURSE_CODE_PATTERN.match(course_code) is not None


def is_not_empty(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def is_valid_credit_range(credits: int) -> bool:
    return MIN_COURSE_CREDITS <= credits <= MAX_COURSE_CREDITS


def is_valid_marks(marks: Any) -> bool:
    """Marks must be a real number within [0, 100]."""
    if isinstance(marks, bool) or not isinstance(marks, (int, float)):
        return False
    return MIN_MARKS <= marks <= MAX_MARKS
