"""
Text rendering for console output.
"""

from .console import (
    format_transcript,
    format_course_table,
    format_top_students,
    format_gpa_distribution,
    format_course_enrollments,
    format_department_summary,
)

__all__ = [
    "format_transcript",
    "format_course_table",
    "format_top_students",
    "format_gpa_distribution",
    "format_course_enrollments",
    "format_department_summary",
]
