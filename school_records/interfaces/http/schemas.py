from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from ...domain.entities import (
    STUDENT_ID_PATTERN, PROFESSOR_ID_PATTERN, COURSE_ID_PATTERN, RESULT_MIN, RESULT_MAX,
)

class RegisterReq(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1)
    type: Literal["student", "professor"]

class LoginReq(BaseModel):
    username: str
    password: str

class UserResp(BaseModel):
    username: str
    type: str

class LoginResp(BaseModel):
    username: str
    type: str
    token: str


class StudentCreate(BaseModel):
    student_id: str = Field(pattern=STUDENT_ID_PATTERN, max_length=16)
    name: str = Field(min_length=1, max_length=255)
    surname: str = Field(min_length=1, max_length=255)
    birth_date: date | None = None
    enrollment_date: date | None = None

class StudentOut(BaseModel):
    student_id: str
    name: str
    surname: str
    birth_date: date | None = None
    enrollment_date: date
    class Config: from_attributes = True


class ProfessorCreate(BaseModel):
    professor_id: str = Field(pattern=PROFESSOR_ID_PATTERN, max_length=16)
    name: str = Field(min_length=1, max_length=255)
    surname: str = Field(min_length=1, max_length=255)
    salary: float | None = Field(default=None, gt=0)
    hire_date: date | None = None

class ProfessorOut(BaseModel):
    professor_id: str
    name: str
    surname: str
    salary: float | None = None
    hire_date: date | None = None
    class Config: from_attributes = True


class CourseCreate(BaseModel):
    course_id: str = Field(pattern=COURSE_ID_PATTERN, max_length=16)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None

class CourseOut(BaseModel):
    course_id: str
    name: str
    description: str | None = None
    professor_id: str | None = None
    class Config: from_attributes = True


class ResultReq(BaseModel):
    result: int = Field(ge=RESULT_MIN, le=RESULT_MAX)

class EnrollmentOut(BaseModel):
    student_id: str
    course_id: str
    result: int | None = None
    class Config: from_attributes = True

class StudentResultOut(BaseModel):
    course_id: str
    course_name: str
    result: int
    class Config: from_attributes = True

class StudentStatisticOut(BaseModel):
    student: StudentOut
    average: float
    rank: int
    class Config: from_attributes = True

class CourseRankingOut(BaseModel):
    student: StudentOut
    result: int
    rank: int
    class Config: from_attributes = True
