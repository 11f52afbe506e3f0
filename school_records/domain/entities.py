import re
from dataclasses import dataclass
from datetime import date
from enum import Enum

from .errors import ValidationError

STUDENT_ID_PATTERN = r"^S\d+$"
PROFESSOR_ID_PATTERN = r"^P\d+$"
COURSE_ID_PATTERN = r"^C\d+$"

RESULT_MIN = 0
RESULT_MAX = 30


class Role(str, Enum):
    ADMIN = "admin"
    PROFESSOR = "professor"
    STUDENT = "student"


_ID_FORMATS = {
    "student": STUDENT_ID_PATTERN,
    "professor": PROFESSOR_ID_PATTERN,
    "course": COURSE_ID_PATTERN,
}


def validate_id(kind: str, value: str) -> str:
    """Проверяет формат идентификатора (S1, P1, C1) до обращения к хранилищу."""
    if not re.fullmatch(_ID_FORMATS[kind], value or ""):
        raise ValidationError(f"Invalid {kind}_id {value!r}")
    return value


def validate_result(result: int) -> int:
    if isinstance(result, bool) or not isinstance(result, int):
        raise ValidationError("result must be an integer")
    if not RESULT_MIN <= result <= RESULT_MAX:
        raise ValidationError(f"result must be between {RESULT_MIN} and {RESULT_MAX}")
    return result


@dataclass(frozen=True)
class User:
    username: str
    role: Role


@dataclass(frozen=True)
class Student:
    student_id: str
    name: str
    surname: str
    enrollment_date: date
    birth_date: date | None = None


@dataclass(frozen=True)
class Professor:
    professor_id: str
    name: str
    surname: str
    salary: float | None = None
    hire_date: date | None = None


@dataclass(frozen=True)
class Course:
    course_id: str
    name: str
    description: str | None = None
    professor_id: str | None = None


@dataclass(frozen=True)
class Enrollment:
    student_id: str
    course_id: str
    result: int | None = None


@dataclass(frozen=True)
class StudentResult:
    course_id: str
    course_name: str
    result: int


@dataclass(frozen=True)
class StudentStatistic:
    student: Student
    average: float
    rank: int


@dataclass(frozen=True)
class CourseRanking:
    student: Student
    result: int
    rank: int
