from __future__ import annotations

from datetime import date

from sqlalchemy import String, Text, ForeignKey, Integer, Float, Date, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base


class UserORM(Base):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(64), primary_key=True)
    # соль bcrypt хранится внутри самой строки хэша
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False)

    def __repr__(self) -> str:
        return f"UserORM(username={self.username!r}, role={self.role!r})"


class StudentORM(Base):
    __tablename__ = "students"

    student_id: Mapped[str] = mapped_column(String(16), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    surname: Mapped[str] = mapped_column(String(255), nullable=False)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    enrollment_date: Mapped[date] = mapped_column(Date, nullable=False)

    def __repr__(self) -> str:
        return f"StudentORM(student_id={self.student_id!r}, surname={self.surname!r})"


class ProfessorORM(Base):
    __tablename__ = "professors"

    professor_id: Mapped[str] = mapped_column(String(16), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    surname: Mapped[str] = mapped_column(String(255), nullable=False)
    salary: Mapped[float | None] = mapped_column(Float, nullable=True)
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    __table_args__ = (CheckConstraint("salary IS NULL OR salary > 0", name="ck_professor_salary_positive"),)

    def __repr__(self) -> str:
        return f"ProfessorORM(professor_id={self.professor_id!r}, surname={self.surname!r})"


class CourseORM(Base):
    __tablename__ = "courses"

    course_id: Mapped[str] = mapped_column(String(16), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    professor_id: Mapped[str | None] = mapped_column(
        ForeignKey("professors.professor_id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"CourseORM(course_id={self.course_id!r}, name={self.name!r})"


class EnrollmentORM(Base):
    __tablename__ = "enrollments"

    student_id: Mapped[str] = mapped_column(
        ForeignKey("students.student_id", ondelete="CASCADE"),
        primary_key=True,
    )
    course_id: Mapped[str] = mapped_column(
        ForeignKey("courses.course_id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    result: Mapped[int | None] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        CheckConstraint("result IS NULL OR (result >= 0 AND result <= 30)", name="ck_enrollment_result_range"),
    )

    def __repr__(self) -> str:
        return (f"EnrollmentORM(student_id={self.student_id!r}, "
                f"course_id={self.course_id!r}, result={self.result!r})")


__all__ = [
    "Base",
    "UserORM",
    "StudentORM",
    "ProfessorORM",
    "CourseORM",
    "EnrollmentORM",
]
