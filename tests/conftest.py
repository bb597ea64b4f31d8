"""Shared fixtures for the CCRM test suite."""

from __future__ import annotations

import pytest

from ccrm.config import AppConfig
from ccrm.core.entities import CourseBuilder, Instructor, Student
from ccrm.core.enums import Semester
from ccrm.services import (
    CourseStore, EnrollmentService, ReportService, StudentStore, TranscriptService
)


def make_course(code, credits=3, title=None, department="Computer Science",
                semester=Semester.FALL, instructor=None):
    return (CourseBuilder()
            .set_code(code)
            .set_title(title or f"Course {code}")
            .set_credits(credits)
            .set_department(department)
            .set_semester(semester)
            .set_instructor(instructor)
            .build())


def make_student(student_id, reg_no=None, full_name=None, email=None):
    return Student(
        reg_no=reg_no or f"REG{student_id}",
        full_name=full_name or f"Student {student_id}",
        email=email or f"{student_id.lower()}@university.edu",
        entity_id=student_id,
    )


@pytest.fixture
def config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def instructor() -> Instructor:
    return Instructor("E100", "Dr. Ada Lovelace", "ada@university.edu", department="Computer Science")


@pytest.fixture
def student_store() -> StudentStore:
    return StudentStore()


@pytest.fixture
def course_store() -> CourseStore:
    return CourseStore()


@pytest.fixture
def enrollment_service(student_store, course_store, config) -> EnrollmentService:
    return EnrollmentService(student_store, course_store, config)


@pytest.fixture
def transcript_service(enrollment_service, course_store) -> TranscriptService:
    return TranscriptService(enrollment_service, course_store)


@pytest.fixture
def report_service(enrollment_service) -> ReportService:
    return ReportService(enrollment_service)


@pytest.fixture
def alice(student_store) -> Student:
    return student_store.add(make_student("S001", "2024001", "Alice Johnson", "alice@university.edu"))


@pytest.fixture
def bob(student_store) -> Student:
    return student_store.add(make_student("S002", "2024002", "Bob Smith", "bob@university.edu"))


@pytest.fixture
def course_factory():
    return make_course


@pytest.fixture
def student_factory():
    return make_student
