"""
Core module containing the entity model, validation and exceptions.
"""

from .entities import *
from .enums import *
from .exceptions import *
from .interfaces import *
from .transcript import *
from .validation import *

__all__ = [
    # Entities
    "AbstractEntity",
    "Person",
    "Student",
    "Instructor",
    "Course",
    "CourseSpec",
    "CourseBuilder",
    "Enrollment",
    "build_course",
    "render_profile",
    
    # Transcript
    "Transcript",
    "TranscriptEntry",
    "weighted_gpa",
    
    # Interfaces
    "EntityStore",
    "Searchable",
    
    # Enums
    "StudentStatus",
    "PersonType",
    "Semester",
    "Grade",
    "CreditLimitScope",
    
    # Validation
    "is_valid_email",
    "is_valid_course_code",
    "is_not_empty",
    "is_valid_marks",
    "is_valid_credit_range",
    
    # Exceptions
    "CCRMException",
    "InvalidDataError",
    "DuplicateEntityError",
    "DuplicateEnrollmentError",
    "ResourceNotFoundError",
    "EnrollmentNotFoundError",
    "EnrollmentError",
    "CreditLimitExceededError",
    "ConfigurationError",
    "PersistenceError",
]
