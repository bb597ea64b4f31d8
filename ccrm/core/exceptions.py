"""
Custom exceptions for the CCRM platform.
"""

from typing import Optional, Any, Dict


class CCRMException(Exception):
    """Base exception for all CCRM-related errors."""
    
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class InvalidDataError(CCRMException):
    """Raised when input data is missing or malformed."""
    pass


class DuplicateEntityError(CCRMException):
    """Raised when attempting to create a duplicate entity."""
    pass


class ResourceNotFoundError(CCRMException):
    """Raised when a requested resource is not found."""
    pass


class EnrollmentError(CCRMException):
    """Raised when enrollment operations fail."""
    pass


class DuplicateEnrollmentError(DuplicateEntityError, EnrollmentError):
    """Raised when a student is already enrolled in a course."""
    pass


class EnrollmentNotFoundError(ResourceNotFoundError, EnrollmentError):
    """Raised when no enrollment exists for a student/course pair."""
    pass


class CreditLimitExceededError(EnrollmentError):
    """Raised when an enrollment would exceed the credit ceiling."""
    pass


class ConfigurationError(CCRMException):
    """Raised when configuration is invalid."""
    pass


class PersistenceError(CCRMException):
    """Raised when import, export or backup operations fail."""
    pass
