"""
CSV import/export and timestamped backups.

This module sits outside the core: it turns CSV rows into field values and
hands them to the stores, which do all validation.
"""

import csv
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from ..config import AppConfig
from ..core.entities import Course, CourseBuilder, Enrollment, Instructor, Student
from ..core.enums import Semester
from ..core.exceptions import CCRMException, PersistenceError
from ..services.course_service import CourseStore
from ..services.enrollment_service import EnrollmentService
from ..services.student_service import StudentStore

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

STUDENT_HEADER = ["ID", "RegNo", "FullName", "Email", "Status", "EnrollmentDate"]
COURSE_HEADER = ["Code", "Title", "Credits", "Instructor", "Department", "Semester"]
ENROLLMENT_HEADER = ["EnrollmentId", "StudentId", "CourseCode", "EnrollmentDate", "Grade", "Marks"]


@dataclass(frozen=True)
class ImportResult:
    imported: int
    skipped: int


def _read_rows(path: Path) -> List[Tuple[int, List[str]]]:
    """Data rows paired with the file line they end on; blank rows are dropped."""
    if not path.exists():
        raise PersistenceError(f"File not found: {path}", error_code="FILE_NOT_FOUND")
    try:
        with path.open('r', newline='', encoding='utf-8') as f:
            reader = csv.reader(f)
            next(reader, None)  # header
            rows = []
            for row in reader:
                line_no = reader.line_num
                fields = [cell.strip() for cell in row]
                if any(fields):
                    rows.append((line_no, fields))
    except OSError as e:
        raise PersistenceError(f"Failed to read {path}: {e}")
    return rows


def _write_rows(path: Path, header: List[str], rows: Iterable[List[object]]) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open('w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(header)
            writer.writerows(rows)
    except OSError as e:
        raise PersistenceError(f"Failed to write {path}: {e}")
    return path


def _instructor_from_name(name: str) -> Instructor:
    stamp = datetime.now().strftime("%Y%m%d%H%M%S%f")
    email = name.lower().replace(" ", ".") + "@university.edu"
    return Instructor(reg_no=f"I{stamp}", full_name=name, email=email, entity_id=f"INST_{stamp}")


class FileOperationService:
    """Moves students, courses and enrollments between the stores and CSV files."""

    def __init__(self, config: Optional[AppConfig] = None):
        self._config = config or AppConfig()

    def import_students(self, filename: PathLike, student_store: StudentStore) -> ImportResult:
        """Import students from ``ID,RegNo,FullName,Email`` rows; bad rows are skipped."""
        path = Path(filename)
        imported = skipped = 0
        for line_no, fields in _read_rows(path):
            if len(fields) < 4:
                logger.warning("Skipping student row %d in %s: expected 4 fields, got %d",
                               line_no, path, len(fields))
                skipped += 1
                continue
            try:
                student = Student(reg_no=fields[1], full_name=fields[2], email=fields[3],
                                  entity_id=fields[0] or None)
                student_store.add(student)
                imported += 1
            except CCRMException as e:
                logger.warning("Skipping student row %d in %s: %s", line_no, path, e.message)
                skipped += 1
        logger.info("Imported %d students from %s (%d skipped)", imported, path, skipped)
        return ImportResult(imported, skipped)

    def import_courses(self, filename: PathLike, course_store: CourseStore) -> ImportResult:
        """Import courses from ``Code,Title,Credits,Instructor,Department,Semester`` rows."""
        path = Path(filename)
        imported = skipped = 0
        for line_no, fields in _read_rows(path):
            if len(fields) < 6:
                logger.warning("Skipping course row %d in %s: expected 6 fields, got %d",
                               line_no, path, len(fields))
                skipped += 1
                continue
            code, title, credits, instructor_name, department, semester = fields[:6]
            try:
                builder = (CourseBuilder()
                           .set_code(code)
                           .set_title(title)
                           .set_credits(int(credits))
                           .set_department(department or None)
                           .set_semester(Semester[semester.upper()] if semester else None))
                if instructor_name:
                    builder.set_instructor(_instructor_from_name(instructor_name))
                course_store.add(builder.build())
                imported += 1
            except (ValueError, KeyError) as e:
                logger.warning("Skipping course row %d in %s: bad value %s", line_no, path, e)
                skipped += 1
            except CCRMException as e:
                logger.warning("Skipping course row %d in %s: %s", line_no, path, e.message)
                skipped += 1
        logger.info("Imported %d courses from %s (%d skipped)", imported, path, skipped)
        return ImportResult(imported, skipped)

    def export_students(self, students: Iterable[Student], filename: PathLike) -> Path:
        return _write_rows(Path(filename), STUDENT_HEADER, (
            [s.id, s.reg_no, s.full_name, s.email, s.status.name, s.enrollment_date.isoformat()]
            for s in students
        ))

    def export_courses(self, courses: Iterable[Course], filename: PathLike) -> Path:
        return _write_rows(Path(filename), COURSE_HEADER, (
            [
                c.code,
                c.title,
                c.credits,
                c.instructor.full_name if c.instructor else "",
                c.department or "",
                c.semester.name if c.semester else "",
            ]
            for c in courses
        ))

    def export_enrollments(self, enrollments: Iterable[Enrollment], filename: PathLike) -> Path:
        return _write_rows(Path(filename), ENROLLMENT_HEADER, (
            [
                e.enrollment_id,
                e.student_id,
                e.course_code,
                e.enrollment_date.isoformat(),
                e.grade.name if e.grade else "",
                "" if e.marks is None else e.marks,
            ]
            for e in enrollments
        ))

    def create_backup(self, student_store: StudentStore, course_store: CourseStore,
                      enrollment_service: EnrollmentService) -> Path:
        """Export everything into a new ``backup_<timestamp>`` directory."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_dir = self._config.backup_path / f"backup_{timestamp}"
        suffix = 1
        while backup_dir.exists():
            backup_dir = self._config.backup_path / f"backup_{timestamp}_{suffix}"
            suffix += 1
        try:
            backup_dir.mkdir(parents=True)
        except OSError as e:
            raise PersistenceError(f"Failed to create backup directory {backup_dir}: {e}")

        self.export_students(student_store.all(), backup_dir / "students.csv")
        self.export_courses(course_store.all(), backup_dir / "courses.csv")
        self.export_enrollments(enrollment_service.all_enrollments(), backup_dir / "enrollments.csv")
        logger.info("Backup created in %s", backup_dir.resolve())
        return backup_dir

    def backup_directory_size(self) -> int:
        """Total size in bytes of every file under the backup directory."""
        return self._directory_size(self._config.backup_path)

    def _directory_size(self, path: Path) -> int:
        if not path.exists():
            return 0
        total = 0
        for child in path.iterdir():
            if child.is_dir():
                total += self._directory_size(child)
            elif child.is_file():
                total += child.stat().st_size
        return total

    def list_backup_files(self, max_depth: int = 2) -> List[Path]:
        """Files under the backup directory, at most ``max_depth`` levels down."""
        root = self._config.backup_path
        if not root.exists():
            return []
        found: List[Path] = []
        for dirpath, dirnames, filenames in os.walk(root):
            depth = len(Path(dirpath).relative_to(root).parts)
            if depth >= max_depth:
                dirnames[:] = []
            for name in filenames:
                if depth < max_depth:
                    found.append(Path(dirpath) / name)
        return sorted(found)
