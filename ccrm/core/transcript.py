"""
Immutable transcript snapshot and the credit-weighted GPA shared with the enrollment service.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Tuple

from .enums import Grade


def weighted_gpa(graded_credits: Iterable[Tuple[Optional[Grade], int]]) -> float:
    """Credit-weighted average of grade points; ungraded pairs are ignored.

    Returns 0.0 when nothing is graded.
    """
    total_points = 0.0
    total_credits = 0
    for grade, credits in graded_credits:
        if grade is None:
            continue
        total_points += grade.grade_points * credits
        total_credits += credits
    return total_points / total_credits if total_credits > 0 else 0.0


@dataclass(frozen=True)
class TranscriptEntry:
    """One course line on a transcript."""
    course_code: str
    course_title: str
    credits: int
    grade: Optional[Grade] = None
    marks: Optional[float] = None

    @property
    def is_graded(self) -> bool:
        return self.grade is not None

    @property
    def grade_points(self) -> Optional[float]:
        return self.grade.grade_points if self.grade else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'course_code': self.course_code,
            'course_title': self.course_title,
            'credits': self.credits,
            'grade': self.grade.name if self.grade else None,
            'grade_points': self.grade_points,
            'marks': self.marks,
        }


@dataclass(frozen=True)
class Transcript:
    """Point-in-time record of a student's courses.

    ``overall_gpa`` and ``total_credits`` are computed from ``entries`` at
    construction; ``total_credits`` counts every entry, graded or not.
    """
    student_id: str
    reg_no: str
    student_name: str
    entries: Tuple[TranscriptEntry, ...] = ()
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    overall_gpa: float = field(init=False)
    total_credits: int = field(init=False)

    def __post_init__(self):
        entries = tuple(self.entries)
        object.__setattr__(self, 'entries', entries)
        object.__setattr__(self, 'overall_gpa', weighted_gpa((e.grade, e.credits) for e in entries))
        object.__setattr__(self, 'total_credits', sum(e.credits for e in entries))

    @property
    def graded_entries(self) -> Tuple[TranscriptEntry, ...]:
        return tuple(e for e in self.entries if e.is_graded)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'student_id': self.student_id,
            'reg_no': self.reg_no,
            'student_name': self.student_name,
            'generated_at': self.generated_at.isoformat(),
            'overall_gpa': self.overall_gpa,
            'total_credits': self.total_credits,
            'entries': [e.to_dict() for e in self.entries],
        }
