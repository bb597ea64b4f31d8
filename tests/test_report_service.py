"""Tests for the academic reports and their text renderings."""

from __future__ import annotations

import pytest

from ccrm.core.enums import StudentStatus
from ccrm.services.report_service import GPA_BUCKETS, gpa_bucket_label
from ccrm.ui import format_gpa_distribution, format_top_students


@pytest.fixture
def graded(student_store, course_store, enrollment_service, course_factory, student_factory):
    course_store.add(course_factory("CS101", 4, "Intro", "Computer Science"))
    course_store.add(course_factory("MATH101", 3, "Calculus", "Mathematics"))
    course_store.add(course_factory("CS201", 2, "Structures", "Computer Science"))
    marks = {
        ("S1", "Alice"): {"CS101": 95, "MATH101": 92},
        ("S2", "Bob"): {"CS101": 85},
        ("S3", "Carol"): {"CS101": 85},
        ("S4", "Dave"): {"MATH101": 30},
        ("S5", "Eve"): {},
    }
    for (sid, name), courses in marks.items():
        student = student_store.add(student_factory(sid, full_name=name))
        for code, score in courses.items():
            enrollment_service.enroll(student, course_store.find_by_key(code))
            enrollment_service.record_grade(sid, code, None, score)
    return student_store


class TestTopStudents:
    def test_ranking_skips_zero_gpa(self, report_service, graded):
        ranking = report_service.top_students_by_gpa(graded.all())
        assert [r.full_name for r in ranking] == ["Alice", "Bob", "Carol"]
        assert ranking[0].gpa == pytest.approx(10.0)

    def test_limit(self, report_service, graded):
        assert len(report_service.top_students_by_gpa(graded.all(), limit=2)) == 2
        assert report_service.top_students_by_gpa(graded.all(), limit=0) == ()

    def test_ties_ordered_by_name(self, report_service, graded):
        ranking = report_service.top_students_by_gpa(reversed(graded.all()))
        assert [r.full_name for r in ranking[1:]] == ["Bob", "Carol"]


class TestDistribution:
    def test_buckets(self, report_service, graded):
        buckets = report_service.gpa_distribution(graded.all())
        assert [b.label for b in buckets] == [label for label, _, _ in GPA_BUCKETS]
        counts = {b.label: b.count for b in buckets}
        assert counts["9.0 - 10.0 (Excellent)"] == 3
        assert sum(counts.values()) == 3

    @pytest.mark.parametrize("gpa, label", [
        (10.0, "9.0 - 10.0 (Excellent)"),
        (8.99, "8.0 - 8.9 (Very Good)"),
        (7.0, "7.0 - 7.9 (Good)"),
        (6.5, "6.0 - 6.9 (Average)"),
        (5.0, "Below 6.0 (Poor)"),
    ])
    def test_bucket_label(self, gpa, label):
        assert gpa_bucket_label(gpa) == label


class TestCourseAndDepartment:
    def test_course_enrollment_counts(self, report_service, graded, course_store):
        counts = {row.course_code: row.enrolled for row in report_service.course_enrollment_counts(course_store.all())}
        assert counts == {"CS101": 3, "CS201": 0, "MATH101": 2}

    def test_department_summary(self, report_service, graded, course_store):
        summary = report_service.department_summary(course_store.all())
        assert [(s.department, s.course_count, s.total_credits) for s in summary] == [
            ("Computer Science", 2, 6),
            ("Mathematics", 1, 3),
        ]

    def test_status_summary(self, report_service, graded):
        graded.deactivate("S5")
        counts = report_service.student_status_summary(graded.all())
        assert counts[StudentStatus.ACTIVE] == 4
        assert counts[StudentStatus.INACTIVE] == 1


class TestRendering:
    def test_format_top_students(self, report_service, graded):
        text = format_top_students(report_service.top_students_by_gpa(graded.all(), limit=1))
        assert "TOP STUDENTS" in text
        assert "Alice" in text and "10.00" in text

    def test_format_distribution(self, report_service, graded):
        text = format_gpa_distribution(report_service.gpa_distribution(graded.all()))
        assert "9.0 - 10.0 (Excellent): 3 students" in text
