"""
Plain-text renderers for transcripts and reports.

Each function takes a finished snapshot and returns a string; printing is
left to the caller.
"""

from typing import Iterable

from ..core.entities import Course
from ..core.transcript import Transcript, TranscriptEntry
from ..services.report_service import (
    CourseEnrollmentCount, DepartmentSummary, GPABucket, StudentGPA
)


def _truncate(text: str, width: int) -> str:
    return text if len(text) <= width else text[:width - 3] + "..."


def format_transcript_entry(entry: TranscriptEntry) -> str:
    if entry.grade is not None:
        grade_info = f"{entry.grade.name} ({entry.marks:.2f}) - {entry.grade.grade_points:.1f} points"
    else:
        grade_info = "Not Graded"
    return f"{entry.course_code:<10} | {entry.course_title:<30} | {entry.credits} credits | {grade_info}"


def format_transcript(transcript: Transcript) -> str:
    lines = [
        "=== TRANSCRIPT ===",
        f"Student: {transcript.student_name}",
        f"Registration No: {transcript.reg_no}",
        f"Generated: {transcript.generated_at.isoformat()}",
        f"Overall GPA: {transcript.overall_gpa:.2f}",
        f"Total Credits: {transcript.total_credits}",
        "",
        "Course Details:",
        "================",
    ]
    lines.extend(format_transcript_entry(entry) for entry in transcript.entries)
    return "\n".join(lines)


def format_course_table(courses: Iterable[Course]) -> str:
    lines = [f"{'Code':<10} {'Title':<30} {'Credits':<8} {'Department':<15} {'Semester':<10}", "=" * 75]
    for course in courses:
        lines.append(
            f"{course.code:<10} {_truncate(course.title, 30):<30} {course.credits:<8} "
            f"{course.department or 'N/A':<15} {course.semester.name if course.semester else 'N/A':<10}"
        )
    return "\n".join(lines)


def format_top_students(ranking: Iterable[StudentGPA]) -> str:
    lines = ["=== TOP STUDENTS BY GPA ==="]
    for entry in ranking:
        lines.append(f"{entry.full_name:<20} {entry.reg_no:<15} GPA: {entry.gpa:.2f}")
    return "\n".join(lines)


def format_gpa_distribution(buckets: Iterable[GPABucket]) -> str:
    lines = ["=== GPA DISTRIBUTION ==="]
    lines.extend(f"{bucket.label}: {bucket.count} students" for bucket in buckets)
    return "\n".join(lines)


def format_course_enrollments(counts: Iterable[CourseEnrollmentCount]) -> str:
    lines = [
        "=== COURSE ENROLLMENT STATISTICS ===",
        f"{'Code':<10} {'Title':<30} {'Department':<15} {'Enrolled':<10}",
        "=" * 70,
    ]
    for row in counts:
        lines.append(f"{row.course_code:<10} {_truncate(row.title, 30):<30} {row.department:<15} {row.enrolled:<10}")
    return "\n".join(lines)


def format_department_summary(summaries: Iterable[DepartmentSummary]) -> str:
    lines = ["=== DEPARTMENT SUMMARY ==="]
    for summary in summaries:
        lines.append(f"Department: {summary.department}")
        lines.append(f"  Courses: {summary.course_count}")
        lines.append(f"  Total Credits: {summary.total_credits}")
    return "\n".join(lines)
