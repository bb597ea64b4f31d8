"""
Script to add sample data to the CCRM platform via REST API.
Make sure the server is running before executing this script.

Usage:
    python add_data.py
"""

import requests
import json
import sys
import os


def _console_supports_utf8() -> bool:
    enc = getattr(sys.stdout, "encoding", None)
    return enc is not None and "utf" in enc.lower()


_OK_CHAR = "✓" if _console_supports_utf8() else "[OK]"
_FAIL_CHAR = "✗" if _console_supports_utf8() else "[FAIL]"
_WARN_CHAR = "⚠" if _console_supports_utf8() else "[WARN]"


def _detect_base_url() -> str:
    """Determine a reachable BASE_URL.

    Priority: environment variable `CCRM_BASE_URL`, then common local ports.
    If nothing responds, fall back to http://127.0.0.1:8000.
    """
    env = os.environ.get("CCRM_BASE_URL")
    if env:
        return env

    candidates = [
        "http://127.0.0.1:8000",
        "http://127.0.0.1:8888",
        "http://localhost:8000",
        "http://localhost:8888",
    ]

    for c in candidates:
        try:
            resp = requests.get(f"{c}/health", timeout=0.5)
            if resp.status_code == 200:
                return c
        except requests.exceptions.RequestException:
            continue

    return candidates[0]


BASE_URL = _detect_base_url()


def check_server():
    """Check if the server is running."""
    try:
        response = requests.get(f"{BASE_URL}/health", timeout=2)
        if response.status_code == 200:
            print(f"{_OK_CHAR} Server is running")
            return True
    except requests.exceptions.RequestException:
        pass
    print(f"{_FAIL_CHAR} Server is not running!")
    print("\nPlease start the server first:")
    print("  python -m ccrm.main --rest-port 8000")
    return False


def _post(path, data, what):
    try:
        response = requests.post(f"{BASE_URL}{path}", json=data)
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error creating {what}: {e}")
        return None
    if response.status_code == 201:
        return response.json()
    print(f"{_FAIL_CHAR} Failed to create {what}: {response.text}")
    return None


def create_student(student_id, reg_no, full_name, email):
    """Create a new student."""
    result = _post("/students", {
        "student_id": student_id,
        "reg_no": reg_no,
        "full_name": full_name,
        "email": email,
    }, "student")
    if result:
        print(f"{_OK_CHAR} Created student: {full_name} ({student_id})")
    return result


def create_course(code, title, credits, department, semester, instructor_name=None):
    """Create a new course."""
    result = _post("/courses", {
        "code": code,
        "title": title,
        "credits": credits,
        "department": department,
        "semester": semester,
        "instructor_name": instructor_name,
    }, "course")
    if result:
        print(f"{_OK_CHAR} Created course: {code} - {title}")
    return result


def enroll_student(student_id, course_code):
    """Enroll a student in a course."""
    try:
        response = requests.post(f"{BASE_URL}/enrollments",
                                 json={"student_id": student_id, "course_code": course_code})
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error enrolling student: {e}")
        return None
    if response.status_code == 201:
        print(f"{_OK_CHAR} Enrolled {student_id} in {course_code}")
        return response.json()
    if response.status_code in (409, 422):
        print(f"{_WARN_CHAR} {student_id} -> {course_code} rejected: {response.json().get('detail')}")
        return None
    print(f"{_FAIL_CHAR} Failed to enroll student: {response.text}")
    return None


def record_grade(student_id, course_code, marks):
    """Record marks for an enrollment; the grade is derived by the server."""
    try:
        response = requests.put(f"{BASE_URL}/enrollments/{student_id}/{course_code}/grade",
                                json={"marks": marks})
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Error recording grade: {e}")
        return None
    if response.status_code == 200:
        result = response.json()
        print(f"{_OK_CHAR} {student_id} {course_code}: {result['grade']} ({marks})")
        return result
    print(f"{_FAIL_CHAR} Failed to record grade: {response.text}")
    return None


def _get(path, what):
    try:
        response = requests.get(f"{BASE_URL}{path}")
    except requests.exceptions.RequestException as e:
        print(f"{_FAIL_CHAR} Could not fetch {what}: {e}")
        return None
    if response.status_code != 200:
        print(f"{_FAIL_CHAR} Could not fetch {what} ({response.status_code}): {response.text}")
        return None
    return response.json()


def _banner(title):
    print(f"\n{'='*60}\n{title}\n{'='*60}")


def list_students():
    """Print every student, sorted by name."""
    students = _get("/students", "students") or []
    _banner(f"Students: {len(students)}")
    for s in students:
        print(f"  {s['id']:8} | {s['full_name']:20} | {s['status']:10} | {s['email']}")
    return students


def list_courses():
    """Print the course catalogue."""
    courses = _get("/courses", "courses") or []
    _banner(f"Courses: {len(courses)}")
    for c in courses:
        print(f"  {c['code']:10} | {c['title']:30} | {c['credits']} credits | {c['semester'] or '-'}")
    return courses


def show_reports():
    """Print the top-students and GPA distribution reports."""
    for path, title in (("/reports/top-students", "Top Students"),
                        ("/reports/gpa-distribution", "GPA Distribution")):
        report = _get(path, title.lower())
        if report is not None:
            _banner(title)
            print(json.dumps(report, indent=2))


def main():
    """Main execution."""
    _banner("CCRM seeder: populating a running server")

    if not check_server():
        sys.exit(1)

    print("Creating students...")
    create_student("S001", "2024001", "Alice Johnson", "alice.johnson@university.edu")
    create_student("S002", "2024002", "Bob Smith", "bob.smith@university.edu")
    create_student("S003", "2024003", "Carol Davis", "carol.davis@university.edu")
    create_student("S004", "2024004", "David Wilson", "david.wilson@university.edu")

    print("\nCreating courses...")
    create_course("CS101", "Introduction to Programming", 4, "Computer Science", "fall", "Alan Smith")
    create_course("CS201", "Data Structures", 4, "Computer Science", "spring", "Alan Smith")
    create_course("MATH101", "Calculus I", 4, "Mathematics", "fall", "Grace Jones")
    create_course("ENG101", "English Composition", 3, "English", "fall", "Mary Shelley")

    print("\nEnrolling students...")
    plan = {
        "S001": [("CS101", 93), ("MATH101", 81)],
        "S002": [("CS101", 72), ("ENG101", 64)],
        "S003": [("MATH101", 55), ("ENG101", 88)],
        "S004": [("CS201", 39)],
    }
    for student_id, courses in plan.items():
        for course_code, marks in courses:
            if enroll_student(student_id, course_code):
                record_grade(student_id, course_code, marks)

    # A second enrollment in the same course is rejected
    enroll_student("S001", "CS101")

    list_students()
    list_courses()
    show_reports()

    _banner(f"{_OK_CHAR} Seeding finished")
    print("Next steps:")
    print(f"  - View API docs: {BASE_URL}/docs")
    print(f"  - List students: curl {BASE_URL}/students")
    print(f"  - Transcript: curl {BASE_URL}/students/S001/transcript")
    print()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print(f"\n\n{_FAIL_CHAR} Interrupted by user")
        sys.exit(1)
