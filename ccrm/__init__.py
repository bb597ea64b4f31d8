"""
CCRM: Campus Course & Records Manager

Keeps students, courses, enrollments and grades in memory, enforces the
enrollment rules, and derives GPAs, transcripts and academic reports.
"""

__version__ = "1.0.0"
__author__ = "CCRM Development Team"
__description__ = "Campus Course & Records Manager"
