from datetime import date

from sqlalchemy import select, delete, update, exists, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .models import UserORM, StudentORM, ProfessorORM, CourseORM, EnrollmentORM
from ..domain.entities import (
    User, Role, Student, Professor, Course, Enrollment,
    StudentResult, StudentStatistic, CourseRanking,
)
from ..domain.errors import Conflict, NotFound
from ..application.use_cases.register_user import IUserRepository


def user_to_domain(u: UserORM) -> User:
    return User(username=u.username, role=Role(u.role))

def student_to_domain(s: StudentORM) -> Student:
    return Student(student_id=s.student_id, name=s.name, surname=s.surname,
                   birth_date=s.birth_date, enrollment_date=s.enrollment_date)

def professor_to_domain(p: ProfessorORM) -> Professor:
    return Professor(professor_id=p.professor_id, name=p.name, surname=p.surname,
                     salary=p.salary, hire_date=p.hire_date)

def course_to_domain(c: CourseORM) -> Course:
    return Course(course_id=c.course_id, name=c.name, description=c.description,
                  professor_id=c.professor_id)

def enrollment_to_domain(e: EnrollmentORM) -> Enrollment:
    return Enrollment(student_id=e.student_id, course_id=e.course_id, result=e.result)


class UserRepository(IUserRepository):
    def __init__(self, db: Session): self.db = db

    def get_by_username(self, username: str) -> User | None:
        row = self.db.get(UserORM, username)
        return user_to_domain(row) if row else None

    def get_password_hash(self, username: str) -> str | None:
        row = self.db.get(UserORM, username)
        return row.password_hash if row else None

    def create(self, username: str, password_hash: str, role: Role) -> User:
        row = UserORM(username=username, password_hash=password_hash, role=Role(role).value)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict("user", username)
        self.db.refresh(row)
        return user_to_domain(row)


class EntityRepository:
    """Общие операции exists/get/list/delete для сущностей с одним ключом."""

    orm = None
    key = ""
    entity = ""

    def __init__(self, db: Session): self.db = db

    @property
    def _pk(self):
        return getattr(self.orm, self.key)

    def to_domain(self, row):
        raise NotImplementedError

    def exists(self, entity_id: str) -> bool:
        return self.db.scalar(select(exists().where(self._pk == entity_id)))

    def require(self, entity_id: str) -> None:
        if not self.exists(entity_id):
            raise NotFound(self.entity, entity_id)

    def get(self, entity_id: str):
        row = self.db.get(self.orm, entity_id)
        if row is None:
            raise NotFound(self.entity, entity_id)
        return self.to_domain(row)

    def list(self, limit: int = 10, offset: int = 0) -> list:
        rows = self.db.scalars(select(self.orm).order_by(self._pk).limit(limit).offset(offset)).all()
        return [self.to_domain(row) for row in rows]

    def delete(self, entity_id: str) -> None:
        result = self.db.execute(delete(self.orm).where(self._pk == entity_id))
        if result.rowcount == 0:
            self.db.rollback()
            raise NotFound(self.entity, entity_id)
        self.db.commit()

    def _insert(self, row):
        # вставка без предварительной проверки: уникальность гарантирует первичный ключ
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict(self.entity, getattr(row, self.key))
        self.db.refresh(row)
        return self.to_domain(row)


class StudentRepository(EntityRepository):
    orm = StudentORM
    key = "student_id"
    entity = "student"

    def to_domain(self, row): return student_to_domain(row)

    def create(self, student_id: str, name: str, surname: str,
               birth_date: date | None = None, enrollment_date: date | None = None) -> Student:
        return self._insert(StudentORM(
            student_id=student_id,
            name=name,
            surname=surname,
            birth_date=birth_date,
            enrollment_date=enrollment_date or date.today(),
        ))

    def of_professor(self, professor_id: str, limit: int = 10, offset: int = 0) -> list[Student]:
        """Студенты, записанные хотя бы на один курс данного преподавателя."""
        stmt = (select(StudentORM)
                .join(EnrollmentORM, EnrollmentORM.student_id == StudentORM.student_id)
                .join(CourseORM, CourseORM.course_id == EnrollmentORM.course_id)
                .where(CourseORM.professor_id == professor_id)
                .distinct()
                .order_by(StudentORM.student_id)
                .limit(limit).offset(offset))
        return [student_to_domain(row) for row in self.db.scalars(stmt).all()]

    def statistics(self, limit: int = 10, offset: int = 0) -> list[StudentStatistic]:
        """Средний балл по всем оценённым курсам и место в общем рейтинге.

        Ранг (RANK(): равные средние делят место, следующее место пропускается)
        считается по всей популяции в подзапросе, пагинация применяется после.
        Студенты без единой оценки в рейтинг не попадают.
        """
        averages = (select(EnrollmentORM.student_id,
                           func.avg(EnrollmentORM.result).label("average"))
                    .where(EnrollmentORM.result.is_not(None))
                    .group_by(EnrollmentORM.student_id)
                    .subquery())
        ranked = (select(averages.c.student_id,
                         averages.c.average,
                         func.rank().over(order_by=averages.c.average.desc()).label("rank"))
                  .subquery())
        stmt = (select(StudentORM, ranked.c.average, ranked.c.rank)
                .join(ranked, ranked.c.student_id == StudentORM.student_id)
                .order_by(ranked.c.rank, StudentORM.student_id)
                .limit(limit).offset(offset))
        return [StudentStatistic(student=student_to_domain(row), average=float(average), rank=rank)
                for row, average, rank in self.db.execute(stmt).all()]


class ProfessorRepository(EntityRepository):
    orm = ProfessorORM
    key = "professor_id"
    entity = "professor"

    def to_domain(self, row): return professor_to_domain(row)

    def create(self, professor_id: str, name: str, surname: str,
               salary: float | None = None, hire_date: date | None = None) -> Professor:
        return self._insert(ProfessorORM(
            professor_id=professor_id,
            name=name,
            surname=surname,
            salary=salary,
            hire_date=hire_date,
        ))


class CourseRepository(EntityRepository):
    orm = CourseORM
    key = "course_id"
    entity = "course"

    def to_domain(self, row): return course_to_domain(row)

    def create(self, course_id: str, name: str, description: str | None = None) -> Course:
        return self._insert(CourseORM(course_id=course_id, name=name, description=description))

    def assign_professor(self, course_id: str, professor_id: str) -> Course:
        self.require(course_id)
        ProfessorRepository(self.db).require(professor_id)
        try:
            self.db.execute(update(CourseORM)
                            .where(CourseORM.course_id == course_id)
                            .values(professor_id=professor_id))
            self.db.commit()
        except IntegrityError:
            # преподавателя удалили между проверкой и обновлением
            self.db.rollback()
            raise NotFound("professor", professor_id)
        return self.get(course_id)

    def ranking(self, course_id: str) -> list[CourseRanking]:
        """Лучшие студенты курса: по убыванию оценки, равные оценки делят место."""
        self.require(course_id)
        rank = func.rank().over(order_by=EnrollmentORM.result.desc()).label("rank")
        stmt = (select(StudentORM, EnrollmentORM.result, rank)
                .join(EnrollmentORM, EnrollmentORM.student_id == StudentORM.student_id)
                .where(EnrollmentORM.course_id == course_id, EnrollmentORM.result.is_not(None))
                .order_by(EnrollmentORM.result.desc(), StudentORM.student_id))
        return [CourseRanking(student=student_to_domain(row), result=result, rank=position)
                for row, result, position in self.db.execute(stmt).all()]


class EnrollmentRepository:
    def __init__(self, db: Session):
        self.db = db
        self.students = StudentRepository(db)
        self.courses = CourseRepository(db)

    def _require_pair(self, student_id: str, course_id: str) -> None:
        self.students.require(student_id)
        self.courses.require(course_id)

    def get(self, student_id: str, course_id: str) -> Enrollment:
        row = self.db.get(EnrollmentORM, (student_id, course_id))
        if row is None:
            raise NotFound("enrollment", f"{student_id}/{course_id}")
        return enrollment_to_domain(row)

    def enroll(self, student_id: str, course_id: str) -> Enrollment:
        self._require_pair(student_id, course_id)
        row = EnrollmentORM(student_id=student_id, course_id=course_id)
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # нарушение внешнего ключа означает, что студента или курс успели удалить
            self._require_pair(student_id, course_id)
            raise Conflict("enrollment", f"{student_id}/{course_id}")
        return enrollment_to_domain(row)

    def set_result(self, student_id: str, course_id: str, result: int) -> Enrollment:
        self._require_pair(student_id, course_id)
        updated = self.db.execute(update(EnrollmentORM)
                                  .where(EnrollmentORM.student_id == student_id,
                                         EnrollmentORM.course_id == course_id)
                                  .values(result=result))
        if updated.rowcount == 0:
            self.db.rollback()
            raise NotFound("enrollment", f"{student_id}/{course_id}")
        self.db.commit()
        return Enrollment(student_id=student_id, course_id=course_id, result=result)

    def results_of(self, student_id: str, professor_id: str | None = None) -> list[StudentResult]:
        self.students.require(student_id)
        stmt = (select(CourseORM.course_id, CourseORM.name, EnrollmentORM.result)
                .join(EnrollmentORM, EnrollmentORM.course_id == CourseORM.course_id)
                .where(EnrollmentORM.student_id == student_id, EnrollmentORM.result.is_not(None))
                .order_by(CourseORM.course_id))
        if professor_id is not None:
            stmt = stmt.where(CourseORM.professor_id == professor_id)
        return [StudentResult(course_id=cid, course_name=name, result=result)
                for cid, name, result in self.db.execute(stmt).all()]


class RelationshipRepository:
    """Запросы для проверок владения в политике доступа."""

    def __init__(self, db: Session): self.db = db

    def teaches_course(self, professor_id: str, course_id: str) -> bool:
        return self.db.scalar(select(exists().where(
            CourseORM.course_id == course_id,
            CourseORM.professor_id == professor_id,
        )))

    def teaches_enrolled_student(self, professor_id: str, student_id: str, course_id: str) -> bool:
        return self.db.scalar(select(exists().where(
            EnrollmentORM.student_id == student_id,
            EnrollmentORM.course_id == course_id,
            CourseORM.course_id == EnrollmentORM.course_id,
            CourseORM.professor_id == professor_id,
        )))
