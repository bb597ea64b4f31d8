"""Tests for CSV import/export and backups."""

from __future__ import annotations

import csv
import logging

import pytest

from ccrm.config import AppConfig
from ccrm.core.enums import Semester
from ccrm.core.exceptions import PersistenceError
from ccrm.persistence import FileOperationService
from ccrm.persistence.file_operations import COURSE_HEADER, ENROLLMENT_HEADER, STUDENT_HEADER


@pytest.fixture
def file_service(tmp_path) -> FileOperationService:
    return FileOperationService(AppConfig(
        data_directory=str(tmp_path / "data"),
        export_directory=str(tmp_path / "exports"),
        backup_directory=str(tmp_path / "backups"),
    ))


def _write_csv(path, rows):
    with path.open("w", newline="", encoding="utf-8") as f:
        csv.writer(f).writerows(rows)
    return path


def _read_csv(path):
    with path.open(newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


class TestImport:
    def test_import_students_skips_bad_rows(self, file_service, student_store, tmp_path):
        path = _write_csv(tmp_path / "students.csv", [
            ["ID", "RegNo", "FullName", "Email"],
            ["S001", "2024001", "Alice Johnson", "alice@university.edu"],
            ["S002", "2024002", "Bob Smith", "not-an-email"],
            ["S003", "2024001", "Carol Clone", "carol@university.edu"],
            ["S004", "2024004"],
            [],
            ["S005", "2024005", "Eve Brown", "eve@university.edu"],
        ])
        result = file_service.import_students(path, student_store)
        assert (result.imported, result.skipped) == (2, 3)
        assert [s.id for s in student_store.all()] == ["S001", "S005"]

    def test_import_courses(self, file_service, course_store, tmp_path):
        path = _write_csv(tmp_path / "courses.csv", [
            COURSE_HEADER,
            ["CS101", "Intro", "4", "Dr. Ada Lovelace", "Computer Science", "FALL"],
            ["MATH101", "Calculus", "3", "", "Mathematics", "spring"],
            ["BAD", "Broken", "3", "", "", ""],
            ["CS102", "More", "three", "", "", ""],
            ["CS103", "Odd Term", "3", "", "", "MONSOON"],
        ])
        result = file_service.import_courses(path, course_store)
        assert (result.imported, result.skipped) == (2, 3)
        cs101 = course_store.find_by_key("CS101")
        assert cs101.instructor.full_name == "Dr. Ada Lovelace"
        assert cs101.instructor.assigned_course_codes == {"CS101"}
        assert course_store.find_by_key("MATH101").semester is Semester.SPRING

    def test_warnings_use_file_line_numbers(self, file_service, student_store, tmp_path, caplog):
        path = tmp_path / "students.csv"
        path.write_text(
            "ID,RegNo,FullName,Email\n"
            "S001,2024001,Alice Johnson,alice@university.edu\n"
            "\n"
            "\n"
            "S002,2024002,Bob Smith,not-an-email\n"
            "S003,2024003\n",
            encoding="utf-8",
        )
        with caplog.at_level(logging.WARNING, logger="ccrm.persistence.file_operations"):
            result = file_service.import_students(path, student_store)
        assert (result.imported, result.skipped) == (1, 2)
        warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
        assert "row 5" in warnings[0]
        assert "row 6" in warnings[1]

    def test_missing_file(self, file_service, student_store, tmp_path):
        with pytest.raises(PersistenceError) as exc_info:
            file_service.import_students(tmp_path / "nope.csv", student_store)
        assert exc_info.value.error_code == "FILE_NOT_FOUND"


class TestExport:
    def test_export_students(self, file_service, alice, bob, student_store, tmp_path):
        path = file_service.export_students(student_store.all(), tmp_path / "out" / "students.csv")
        rows = _read_csv(path)
        assert rows[0] == STUDENT_HEADER
        assert [row[0] for row in rows[1:]] == ["S001", "S002"]
        assert rows[1][4] == "ACTIVE"

    def test_export_enrollments(self, file_service, enrollment_service, course_store, course_factory,
                                alice, tmp_path):
        enrollment_service.enroll(alice, course_store.add(course_factory("CS101", 3)))
        enrollment_service.enroll(alice, course_store.add(course_factory("CS102", 3)))
        enrollment_service.record_grade("S001", "CS101", None, 88)
        rows = _read_csv(file_service.export_enrollments(enrollment_service.all_enrollments(),
                                                         tmp_path / "enrollments.csv"))
        assert rows[0] == ENROLLMENT_HEADER
        assert rows[1][1:3] == ["S001", "CS101"]
        assert rows[1][4:] == ["A", "88.0"]
        assert rows[2][4:] == ["", ""]


class TestBackup:
    def test_backup_round(self, file_service, student_store, course_store, enrollment_service,
                          course_factory, alice):
        enrollment_service.enroll(alice, course_store.add(course_factory("CS101", 3)))
        first = file_service.create_backup(student_store, course_store, enrollment_service)
        second = file_service.create_backup(student_store, course_store, enrollment_service)
        assert first != second
        assert first.name.startswith("backup_")
        assert sorted(p.name for p in first.iterdir()) == ["courses.csv", "enrollments.csv", "students.csv"]

        files = file_service.list_backup_files()
        assert len(files) == 6
        assert file_service.backup_directory_size() == sum(p.stat().st_size for p in files)

    def test_list_respects_depth(self, file_service, student_store, course_store, enrollment_service):
        file_service.create_backup(student_store, course_store, enrollment_service)
        assert file_service.list_backup_files(max_depth=1) == []

    def test_empty_backup_directory(self, file_service):
        assert file_service.list_backup_files() == []
        assert file_service.backup_directory_size() == 0
