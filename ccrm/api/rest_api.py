"""
REST API implementation for the CCRM platform using FastAPI.
"""

import threading
from datetime import date, datetime, timezone
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import AppConfig
from ..core.entities import Course, CourseBuilder, Enrollment, Instructor, Student
from ..core.enums import Grade, Semester, StudentStatus
from ..core.exceptions import (
    CCRMException, CreditLimitExceededError, DuplicateEntityError, InvalidDataError,
    ResourceNotFoundError
)
from ..core.transcript import Transcript
from ..core.validation import is_not_empty, is_valid_credit_range, is_valid_email
from ..services import (
    CourseStore, EnrollmentService, ReportService, StudentStore, TranscriptService
)


# Pydantic models for API
class StudentCreate(BaseModel):
    reg_no: str = Field(..., min_length=1, max_length=20)
    full_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=1, max_length=200)
    student_id: Optional[str] = Field(None, min_length=1, max_length=64)


class StudentUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[str] = Field(None, min_length=1, max_length=200)
    status: Optional[str] = Field(None, pattern=r'^(active|inactive|suspended|graduated)$')


class StudentResponse(BaseModel):
    id: str
    reg_no: str
    full_name: str
    email: str
    status: str
    enrollment_date: date
    enrolled_course_codes: List[str] = []
    created_at: datetime
    updated_at: datetime
    version: int


class CourseCreate(BaseModel):
    code: str = Field(..., min_length=1, max_length=8)
    title: str = Field(..., min_length=1, max_length=200)
    credits: int = Field(..., ge=1)
    instructor_name: Optional[str] = Field(None, min_length=1, max_length=200)
    department: Optional[str] = Field(None, min_length=1, max_length=100)
    semester: Optional[str] = Field(None, pattern=r'^(spring|summer|fall|winter)$')


class CourseResponse(BaseModel):
    code: str
    title: str
    credits: int
    instructor: Optional[str] = None
    department: Optional[str] = None
    semester: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EnrollmentCreate(BaseModel):
    student_id: str = Field(..., min_length=1)
    course_code: str = Field(..., min_length=1)


class GradeRecord(BaseModel):
    marks: float
    grade: Optional[str] = Field(None, pattern=r'^[SABCDEF]$')


class EnrollmentResponse(BaseModel):
    enrollment_id: str
    student_id: str
    course_code: str
    enrollment_date: datetime
    grade: Optional[str] = None
    marks: Optional[float] = None


class TranscriptEntryResponse(BaseModel):
    course_code: str
    course_title: str
    credits: int
    grade: Optional[str] = None
    grade_points: Optional[float] = None
    marks: Optional[float] = None


class TranscriptResponse(BaseModel):
    student_id: str
    reg_no: str
    student_name: str
    generated_at: datetime
    overall_gpa: float
    total_credits: int
    entries: List[TranscriptEntryResponse] = []


class GPAResponse(BaseModel):
    student_id: str
    gpa: float


class StudentGPAResponse(BaseModel):
    student_id: str
    reg_no: str
    full_name: str
    gpa: float


class GPABucketResponse(BaseModel):
    label: str
    lower: float
    upper: float
    count: int


class CourseEnrollmentCountResponse(BaseModel):
    course_code: str
    title: str
    department: str
    enrolled: int


class DepartmentSummaryResponse(BaseModel):
    department: str
    course_count: int
    total_credits: int


def _http_error(error: CCRMException) -> HTTPException:
    """Map a core error onto an HTTP status."""
    if isinstance(error, ResourceNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, DuplicateEntityError):
        code = status.HTTP_409_CONFLICT
    elif isinstance(error, CreditLimitExceededError):
        code = 422
    elif isinstance(error, InvalidDataError):
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=error.message)


class CCRMRestAPI:
    """REST API implementation for the CCRM platform."""

    def __init__(self, student_store: StudentStore, course_store: CourseStore,
                 enrollment_service: EnrollmentService, transcript_service: TranscriptService,
                 report_service: ReportService, config: Optional[AppConfig] = None):
        self._student_store = student_store
        self._course_store = course_store
        self._enrollment_service = enrollment_service
        self._transcript_service = transcript_service
        self._report_service = report_service
        self._config = config or AppConfig()
        self._instructors: Dict[str, Instructor] = {}

        # All core access goes through this lock.
        self._lock = threading.RLock()

        # Create FastAPI app
        self.app = FastAPI(
            title="CCRM Academic Records API",
            description="Students, courses, enrollments, grades and transcripts",
            version="1.0.0",
            docs_url="/docs",
            redoc_url="/redoc"
        )

        # Add CORS middleware
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        # Setup routes
        self._setup_routes()

    def _setup_routes(self):
        """Setup API routes."""

        @self.app.get("/", response_model=Dict[str, str])
        async def root():
            """Root endpoint."""
            return {
                "message": "CCRM Academic Records API",
                "version": "1.0.0",
                "docs": "/docs"
            }

        @self.app.get("/health", response_model=Dict[str, str])
        async def health_check():
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

        # Student endpoints
        @self.app.post("/students", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
        async def create_student(student_data: StudentCreate):
            """Create a new student."""
            try:
                with self._lock:
                    student = Student(
                        reg_no=student_data.reg_no,
                        full_name=student_data.full_name,
                        email=student_data.email,
                        entity_id=student_data.student_id
                    )
                    self._student_store.add(student)
                    return self._student_to_response(student)

            except CCRMException as e:
                raise _http_error(e)

        @self.app.get("/students", response_model=List[StudentResponse])
        async def list_students(name: Optional[str] = None, skip: int = Query(0, ge=0),
                                limit: int = Query(100, ge=1)):
            """List students sorted by name, optionally filtered by a name fragment."""
            with self._lock:
                if name:
                    students = self._student_store.search_by_name(name)
                else:
                    students = self._student_store.all()

                # Apply pagination
                students = students[skip:skip + limit]

                return [self._student_to_response(student) for student in students]

        @self.app.get("/students/{student_id}", response_model=StudentResponse)
        async def get_student(student_id: str):
            """Get a student by ID."""
            with self._lock:
                return self._student_to_response(self._require_student(student_id))

        @self.app.put("/students/{student_id}", response_model=StudentResponse)
        async def update_student(student_id: str, update: StudentUpdate):
            """Change a student's name, email or status."""
            try:
                with self._lock:
                    student = self._require_student(student_id)

                    # Validate everything before changing anything
                    if update.email is not None and not is_valid_email(update.email):
                        raise InvalidDataError(f"Invalid email format: {update.email!r}")
                    if update.full_name is not None and not is_not_empty(update.full_name):
                        raise InvalidDataError("Full name is required")

                    if update.full_name is not None:
                        student.set_full_name(update.full_name)
                    if update.email is not None:
                        student.set_email(update.email)
                    if update.status is not None:
                        student.set_status(StudentStatus(update.status))
                    self._student_store.update(student)
                    return self._student_to_response(student)

            except CCRMException as e:
                raise _http_error(e)

        @self.app.get("/students/{student_id}/enrollments", response_model=List[EnrollmentResponse])
        async def get_student_enrollments(student_id: str):
            """Get a student's enrollments, oldest first."""
            with self._lock:
                self._require_student(student_id)
                enrollments = self._enrollment_service.student_enrollments(student_id)
                return [self._enrollment_to_response(e) for e in enrollments]

        @self.app.get("/students/{student_id}/transcript", response_model=TranscriptResponse)
        async def get_transcript(student_id: str):
            """Generate a transcript for a student."""
            with self._lock:
                transcript = self._transcript_service.build(self._require_student(student_id))
                return self._transcript_to_response(transcript)

        @self.app.get("/students/{student_id}/gpa", response_model=GPAResponse)
        async def get_gpa(student_id: str):
            """Get a student's credit-weighted GPA."""
            with self._lock:
                self._require_student(student_id)
                return GPAResponse(student_id=student_id, gpa=self._enrollment_service.gpa(student_id))

        # Course endpoints
        @self.app.post("/courses", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
        async def create_course(course_data: CourseCreate):
            """Create a new course."""
            try:
                with self._lock:
                    if not is_valid_credit_range(course_data.credits):
                        raise InvalidDataError(
                            f"Credits must be between 1 and 6, got {course_data.credits}")
                    builder = (CourseBuilder()
                               .set_code(course_data.code)
                               .set_title(course_data.title)
                               .set_credits(course_data.credits)
                               .set_department(course_data.department))
                    if course_data.semester:
                        builder.set_semester(Semester(course_data.semester))
                    if course_data.instructor_name:
                        builder.set_instructor(self._instructor_for(course_data.instructor_name))

                    course = builder.build()
                    self._course_store.add(course)
                    return self._course_to_response(course)

            except CCRMException as e:
                raise _http_error(e)

        @self.app.get("/courses", response_model=List[CourseResponse])
        async def list_courses(department: Optional[str] = None, instructor: Optional[str] = None,
                               semester: Optional[str] = None):
            """List courses sorted by code, optionally filtered."""
            try:
                wanted_semester = Semester(semester.lower()) if semester else None
            except ValueError:
                raise HTTPException(status_code=400, detail=f"Unknown semester: {semester}")

            with self._lock:
                def matches(course: Course) -> bool:
                    if department and (course.department is None
                                       or course.department.lower() != department.lower()):
                        return False
                    if instructor and (course.instructor is None
                                       or instructor.lower() not in course.instructor.full_name.lower()):
                        return False
                    if wanted_semester and course.semester != wanted_semester:
                        return False
                    return True

                return [self._course_to_response(c) for c in self._course_store.search(matches)]

        @self.app.get("/courses/{code}", response_model=CourseResponse)
        async def get_course(code: str):
            """Get a course by code."""
            with self._lock:
                return self._course_to_response(self._require_course(code))

        @self.app.get("/courses/{code}/enrollments", response_model=List[EnrollmentResponse])
        async def get_course_enrollments(code: str):
            """Get a course's enrollments, oldest first."""
            with self._lock:
                self._require_course(code)
                enrollments = self._enrollment_service.course_enrollments(code)
                return [self._enrollment_to_response(e) for e in enrollments]

        # Enrollment endpoints
        @self.app.post("/enrollments", response_model=EnrollmentResponse, status_code=status.HTTP_201_CREATED)
        async def enroll_student(enrollment_data: EnrollmentCreate):
            """Enroll a student in a course."""
            try:
                with self._lock:
                    student = self._require_student(enrollment_data.student_id)
                    course = self._require_course(enrollment_data.course_code)
                    enrollment = self._enrollment_service.enroll(student, course)
                    return self._enrollment_to_response(enrollment)

            except CCRMException as e:
                raise _http_error(e)

        @self.app.delete("/enrollments/{student_id}/{course_code}", response_model=EnrollmentResponse)
        async def unenroll_student(student_id: str, course_code: str):
            """Remove an enrollment."""
            try:
                with self._lock:
                    enrollment = self._enrollment_service.unenroll(student_id, course_code)
                    return self._enrollment_to_response(enrollment)

            except CCRMException as e:
                raise _http_error(e)

        @self.app.put("/enrollments/{student_id}/{course_code}/grade", response_model=EnrollmentResponse)
        async def record_grade(student_id: str, course_code: str, grade_data: GradeRecord):
            """Record marks (and optionally an explicit grade) for an enrollment."""
            try:
                with self._lock:
                    grade = Grade[grade_data.grade] if grade_data.grade else None
                    enrollment = self._enrollment_service.record_grade(
                        student_id, course_code, grade, grade_data.marks)
                    return self._enrollment_to_response(enrollment)

            except CCRMException as e:
                raise _http_error(e)

        # Report endpoints
        @self.app.get("/reports/top-students", response_model=List[StudentGPAResponse])
        async def top_students(limit: Optional[int] = None):
            """Best students by GPA."""
            with self._lock:
                ranking = self._report_service.top_students_by_gpa(
                    self._student_store.all(),
                    limit if limit is not None else self._config.top_students_limit)
                return [StudentGPAResponse(**vars(entry)) for entry in ranking]

        @self.app.get("/reports/gpa-distribution", response_model=List[GPABucketResponse])
        async def gpa_distribution():
            """Number of students per GPA bucket."""
            with self._lock:
                buckets = self._report_service.gpa_distribution(self._student_store.all())
                return [GPABucketResponse(**vars(bucket)) for bucket in buckets]

        @self.app.get("/reports/course-enrollments", response_model=List[CourseEnrollmentCountResponse])
        async def course_enrollments_report():
            """Enrollment count per course."""
            with self._lock:
                counts = self._report_service.course_enrollment_counts(self._course_store.all())
                return [CourseEnrollmentCountResponse(**vars(row)) for row in counts]

        @self.app.get("/reports/departments", response_model=List[DepartmentSummaryResponse])
        async def department_summary():
            """Course count and credits per department."""
            with self._lock:
                summaries = self._report_service.department_summary(self._course_store.all())
                return [DepartmentSummaryResponse(**vars(summary)) for summary in summaries]

    def _require_student(self, student_id: str) -> Student:
        student = self._student_store.find_by_key(student_id)
        if student is None:
            raise HTTPException(status_code=404, detail=f"Student {student_id} not found")
        return student

    def _require_course(self, code: str) -> Course:
        course = self._course_store.find_by_key(code)
        if course is None:
            raise HTTPException(status_code=404, detail=f"Course {code} not found")
        return course

    def _instructor_for(self, name: str) -> Instructor:
        """Reuse the instructor with this name, creating one on first use."""
        instructor = self._instructors.get(name.lower())
        if instructor is None:
            instructor = Instructor(
                reg_no=f"I{len(self._instructors) + 1:04d}",
                full_name=name,
                email=name.lower().replace(" ", ".") + "@university.edu"
            )
            self._instructors[name.lower()] = instructor
        return instructor

    def _student_to_response(self, student: Student) -> StudentResponse:
        """Convert Student entity to response model."""
        return StudentResponse(
            id=student.id,
            reg_no=student.reg_no,
            full_name=student.full_name,
            email=student.email,
            status=student.status.value,
            enrollment_date=student.enrollment_date,
            enrolled_course_codes=sorted(student.enrolled_course_codes),
            created_at=student.created_at,
            updated_at=student.updated_at,
            version=student.version
        )

    def _course_to_response(self, course: Course) -> CourseResponse:
        """Convert Course entity to response model."""
        return CourseResponse(
            code=course.code,
            title=course.title,
            credits=course.credits,
            instructor=course.instructor.full_name if course.instructor else None,
            department=course.department,
            semester=course.semester.value if course.semester else None,
            created_at=course.created_at,
            updated_at=course.updated_at
        )

    def _enrollment_to_response(self, enrollment: Enrollment) -> EnrollmentResponse:
        """Convert Enrollment entity to response model."""
        return EnrollmentResponse(
            enrollment_id=enrollment.enrollment_id,
            student_id=enrollment.student_id,
            course_code=enrollment.course_code,
            enrollment_date=enrollment.enrollment_date,
            grade=enrollment.grade.name if enrollment.grade else None,
            marks=enrollment.marks
        )

    def _transcript_to_response(self, transcript: Transcript) -> TranscriptResponse:
        """Convert a Transcript snapshot to response model."""
        return TranscriptResponse(
            student_id=transcript.student_id,
            reg_no=transcript.reg_no,
            student_name=transcript.student_name,
            generated_at=transcript.generated_at,
            overall_gpa=transcript.overall_gpa,
            total_credits=transcript.total_credits,
            entries=[TranscriptEntryResponse(**entry.to_dict()) for entry in transcript.entries]
        )
