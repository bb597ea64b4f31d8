"""Tests for students, instructors, course construction and enrollments."""

from __future__ import annotations

import pytest

from ccrm.core.entities import (
    Course,
    CourseBuilder,
    CourseSpec,
    Enrollment,
    Instructor,
    Student,
    build_course,
    render_profile,
)
from ccrm.core.enums import Grade, PersonType, Semester, StudentStatus
from ccrm.core.exceptions import InvalidDataError


class TestPerson:
    def test_student_defaults(self):
        student = Student("2024001", "Alice Johnson", "alice@university.edu", entity_id="S001")
        assert student.id == "S001"
        assert student.person_type is PersonType.STUDENT
        assert student.status is StudentStatus.ACTIVE
        assert student.enrolled_course_codes == set()

    def test_generated_id_when_missing(self):
        first = Student("1", "A", "a@x.edu")
        second = Student("2", "B", "b@x.edu")
        assert first.id and second.id and first.id != second.id

    def test_setters_bump_version(self):
        student = Student("2024001", "Alice", "alice@university.edu")
        student.set_full_name("Alice Cooper")
        student.set_status(StudentStatus.GRADUATED)
        assert student.full_name == "Alice Cooper"
        assert student.version == 3
        assert student.updated_at >= student.created_at

    def test_blank_name_rejected(self):
        student = Student("2024001", "Alice", "alice@university.edu")
        with pytest.raises(InvalidDataError):
            student.set_full_name("  ")
        assert student.full_name == "Alice"

    def test_enrolled_codes_are_a_copy(self):
        student = Student("2024001", "Alice", "alice@university.edu")
        student.enroll_in_course("CS101")
        student.enrolled_course_codes.add("HACK999")
        assert student.enrolled_course_codes == {"CS101"}
        student.drop_course("CS101")
        assert student.enrolled_course_codes == set()

    def test_instructor_assignment_idempotent(self, instructor):
        instructor.assign_course("CS101")
        instructor.assign_course("CS101")
        assert instructor.assigned_course_codes == {"CS101"}
        instructor.unassign_course("CS101")
        assert instructor.assigned_course_codes == set()


class TestRenderProfile:
    def test_student_profile(self):
        student = Student("2024001", "Alice Johnson", "alice@university.edu", entity_id="S001")
        profile = render_profile(student)
        assert "STUDENT PROFILE" in profile
        assert "Alice Johnson" in profile
        assert "Status: ACTIVE" in profile

    def test_instructor_profile(self, instructor):
        profile = render_profile(instructor)
        assert "INSTRUCTOR PROFILE" in profile
        assert "Department: Computer Science" in profile

    def test_instructor_without_department(self):
        profile = render_profile(Instructor("E1", "Dr. X", "x@university.edu"))
        assert "Not Assigned" in profile


class TestCourseConstruction:
    def test_builder_builds_course(self, instructor):
        course = (CourseBuilder()
                  .set_code("CS101")
                  .set_title("Intro")
                  .set_credits(4)
                  .set_instructor(instructor)
                  .set_department("Computer Science")
                  .set_semester(Semester.FALL)
                  .build())
        assert course.code == "CS101"
        assert course.id == "CS101"
        assert course.credits == 4
        assert course.instructor is instructor
        assert course.semester is Semester.FALL

    def test_builder_is_reachable_from_course(self):
        assert isinstance(Course.builder(), CourseBuilder)

    @pytest.mark.parametrize("spec, error_code", [
        (CourseSpec(title="Intro", credits=3), "COURSE_CODE_REQUIRED"),
        (CourseSpec(code="CS101", credits=3), "COURSE_TITLE_REQUIRED"),
        (CourseSpec(code="CS101", title="Intro", credits=0), "COURSE_CREDITS_INVALID"),
        (CourseSpec(code="CS101", title="Intro", credits=-2), "COURSE_CREDITS_INVALID"),
    ])
    def test_incomplete_spec_rejected(self, spec, error_code):
        with pytest.raises(InvalidDataError) as exc_info:
            build_course(spec)
        assert exc_info.value.error_code == error_code

    def test_direct_construction_validates(self):
        with pytest.raises(InvalidDataError):
            Course(CourseSpec(code="CS101", title="", credits=3))

    def test_set_credits_rejects_non_positive(self):
        course = build_course(CourseSpec(code="CS101", title="Intro", credits=3))
        with pytest.raises(InvalidDataError):
            course.set_credits(0)
        assert course.credits == 3


class TestEnrollment:
    def test_new_enrollment_is_ungraded(self):
        enrollment = Enrollment("S001", "CS101")
        assert enrollment.enrollment_id.startswith("ENR_S001_CS101_")
        assert enrollment.is_graded is False
        assert enrollment.grade is None and enrollment.marks is None

    def test_ids_are_unique(self):
        assert Enrollment("S001", "CS101").enrollment_id != Enrollment("S001", "CS101").enrollment_id

    def test_set_grade_sets_pair(self):
        enrollment = Enrollment("S001", "CS101")
        enrollment.set_grade(Grade.A, 85)
        assert enrollment.grade is Grade.A
        assert enrollment.marks == 85.0
        assert enrollment.is_graded is True

    @pytest.mark.parametrize("grade, marks", [
        (Grade.A, 101),
        (Grade.A, -1),
        (None, 85),
    ])
    def test_invalid_pair_changes_nothing(self, grade, marks):
        enrollment = Enrollment("S001", "CS101")
        enrollment.set_grade(Grade.B, 72)
        with pytest.raises(InvalidDataError):
            enrollment.set_grade(grade, marks)
        assert enrollment.grade is Grade.B
        assert enrollment.marks == 72.0

    def test_to_dict(self):
        enrollment = Enrollment("S001", "CS101")
        enrollment.set_grade(Grade.S, 95)
        data = enrollment.to_dict()
        assert data["grade"] == "S"
        assert data["marks"] == 95.0
        assert data["student_id"] == "S001"
