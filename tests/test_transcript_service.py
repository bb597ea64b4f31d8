"""Tests for transcript snapshots."""

from __future__ import annotations

import dataclasses

import pytest

from ccrm.core.enums import Grade
from ccrm.core.exceptions import ResourceNotFoundError
from ccrm.core.transcript import Transcript, TranscriptEntry, weighted_gpa


class TestWeightedGpa:
    def test_empty(self):
        assert weighted_gpa([]) == 0.0

    def test_skips_ungraded(self):
        assert weighted_gpa([(Grade.A, 3), (None, 4), (Grade.B, 4)]) == pytest.approx(8.4286, abs=0.001)


class TestTranscriptSnapshot:
    def test_totals_computed_on_construction(self):
        transcript = Transcript(
            student_id="S001",
            reg_no="2024001",
            student_name="Alice",
            entries=(
                TranscriptEntry("CS101", "Intro", 3, Grade.A, 85.0),
                TranscriptEntry("CS102", "Next", 4),
            ),
        )
        assert transcript.overall_gpa == pytest.approx(9.0)
        assert transcript.total_credits == 7
        assert len(transcript.graded_entries) == 1

    def test_immutable(self):
        transcript = Transcript("S001", "2024001", "Alice")
        with pytest.raises(dataclasses.FrozenInstanceError):
            transcript.student_name = "Mallory"

    def test_to_dict(self):
        entry = TranscriptEntry("CS101", "Intro", 3, Grade.S, 93.0)
        data = Transcript("S001", "2024001", "Alice", (entry,)).to_dict()
        assert data["overall_gpa"] == 10.0
        assert data["entries"][0]["grade"] == "S"
        assert data["entries"][0]["grade_points"] == 10.0


class TestTranscriptService:
    def test_empty_transcript(self, transcript_service, alice):
        transcript = transcript_service.build(alice)
        assert transcript.entries == ()
        assert transcript.overall_gpa == 0.0
        assert transcript.total_credits == 0

    def test_matches_enrollment_gpa(self, transcript_service, enrollment_service, course_store,
                                    course_factory, alice):
        enrollment_service.enroll(alice, course_store.add(course_factory("CS101", 3, "Intro")))
        enrollment_service.enroll(alice, course_store.add(course_factory("MATH101", 4, "Calculus")))
        enrollment_service.enroll(alice, course_store.add(course_factory("ENG101", 2, "Writing")))
        enrollment_service.record_grade("S001", "CS101", Grade.A, 85)
        enrollment_service.record_grade("S001", "MATH101", Grade.B, 75)

        transcript = transcript_service.build(alice)
        assert [e.course_code for e in transcript.entries] == ["CS101", "MATH101", "ENG101"]
        assert transcript.entries[0].course_title == "Intro"
        assert transcript.entries[2].is_graded is False
        assert transcript.overall_gpa == pytest.approx(enrollment_service.gpa("S001"))
        assert transcript.total_credits == 9
        assert transcript.reg_no == "2024001"

    def test_snapshot_does_not_follow_later_grades(self, transcript_service, enrollment_service,
                                                   course_store, course_factory, alice):
        enrollment_service.enroll(alice, course_store.add(course_factory("CS101", 3)))
        before = transcript_service.build(alice)
        enrollment_service.record_grade("S001", "CS101", None, 95)
        assert before.entries[0].grade is None
        assert transcript_service.build(alice).entries[0].grade is Grade.S

    def test_build_for(self, transcript_service, student_store, alice):
        assert transcript_service.build_for("S001", student_store).student_name == "Alice Johnson"
        with pytest.raises(ResourceNotFoundError):
            transcript_service.build_for("S404", student_store)

    def test_unknown_course_left_out(self, transcript_service, enrollment_service, course_store,
                                     course_factory, alice):
        enrollment_service.enroll(alice, course_factory("GH101", 3))
        enrollment_service.enroll(alice, course_store.add(course_factory("CS101", 4)))
        enrollment_service.record_grade("S001", "GH101", Grade.F, 20)
        enrollment_service.record_grade("S001", "CS101", Grade.A, 85)

        transcript = transcript_service.build(alice)
        assert [e.course_code for e in transcript.entries] == ["CS101"]
        assert transcript.overall_gpa == pytest.approx(9.0)
        assert transcript.total_credits == 4
