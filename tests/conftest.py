import pytest
from fastapi.testclient import TestClient

from school_records.config import Settings
from school_records.domain.entities import Role
from school_records.infrastructure.models import Base
from school_records.infrastructure.repositories import (
    StudentRepository, ProfessorRepository, CourseRepository, EnrollmentRepository,
)
from school_records.main import create_app


@pytest.fixture
def settings():
    """Настройки тестового окружения: БД в памяти, rate limiting выключен"""
    return Settings(
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret",
        RATE_LIMIT_ENABLED=False,
        ADMIN_PASSWORD=None,
        LOG_LEVEL="WARNING",
    )

@pytest.fixture
def app(settings):
    app = create_app(settings)
    Base.metadata.create_all(bind=app.state.engine)
    yield app
    Base.metadata.drop_all(bind=app.state.engine)
    app.state.engine.dispose()

@pytest.fixture
def client(app):
    return TestClient(app)

@pytest.fixture
def db(app):
    session = app.state.session_factory()
    yield session
    session.close()

@pytest.fixture
def headers_for(app):
    """Заголовок Authorization с настоящим токеном приложения"""
    def _headers(username: str, role: Role) -> dict:
        token = app.state.token_service.issue(username, role)
        return {"Authorization": f"Bearer {token}"}
    return _headers

@pytest.fixture
def admin_headers(headers_for):
    return headers_for("admin", Role.ADMIN)

@pytest.fixture
def school(app):
    """Базовый набор данных.

    P1 ведёт C1, P2 ведёт C2, у C3 преподавателя нет.
    S1 и S2 записаны на C1, S3 записан на C2.
    """
    with app.state.session_factory() as db:
        professors = ProfessorRepository(db)
        professors.create("P1", "Ada", "Lovelace", salary=3000.0)
        professors.create("P2", "Alan", "Turing")

        courses = CourseRepository(db)
        courses.create("C1", "Algebra", "Linear algebra")
        courses.create("C2", "Biology")
        courses.create("C3", "Chemistry")
        courses.assign_professor("C1", "P1")
        courses.assign_professor("C2", "P2")

        students = StudentRepository(db)
        students.create("S1", "Anna", "Petrova")
        students.create("S2", "Boris", "Sidorov")
        students.create("S3", "Vera", "Orlova")

        enrollments = EnrollmentRepository(db)
        enrollments.enroll("S1", "C1")
        enrollments.enroll("S2", "C1")
        enrollments.enroll("S3", "C2")
    return app
