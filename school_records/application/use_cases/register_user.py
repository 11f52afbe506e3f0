import re

import structlog

from ...domain.entities import User, Role, STUDENT_ID_PATTERN, PROFESSOR_ID_PATTERN
from ...domain.errors import Conflict, ValidationError

logger = structlog.get_logger(__name__)

# имя пользователя совпадает с идентификатором студента/преподавателя
USERNAME_FORMATS = {
    Role.STUDENT: STUDENT_ID_PATTERN,
    Role.PROFESSOR: PROFESSOR_ID_PATTERN,
}

class IUserRepository:
    def get_by_username(self, username: str) -> User | None: ...
    def get_password_hash(self, username: str) -> str | None: ...
    def create(self, username: str, password_hash: str, role: Role) -> User: ...

class IPasswordHasher:
    def hash(self, plain: str) -> str: ...
    def verify(self, plain: str, hashed: str) -> bool: ...

class RegisterUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher):
        self.repo = repo
        self.hasher = hasher

    def execute(self, username: str, password: str, role: Role) -> User:
        if not password:
            raise ValidationError("password is a mandatory field")
        pattern = USERNAME_FORMATS.get(role)
        if pattern and not re.fullmatch(pattern, username):
            raise ValidationError(f"username of a {role.value} must match {pattern}")
        if self.repo.get_by_username(username):
            raise Conflict("user", username)
        user = self.repo.create(username, self.hasher.hash(password), role)
        logger.info("user_registered", username=user.username, role=user.role.value)
        return user

class EnsureAdmin:
    """Создаёт учётную запись администратора при старте, если её ещё нет."""

    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher):
        self.repo = repo
        self.hasher = hasher

    def execute(self, username: str, password: str) -> bool:
        if self.repo.get_by_username(username):
            return False
        try:
            self.repo.create(username, self.hasher.hash(password), Role.ADMIN)
        except Conflict:
            return False
        logger.info("admin_bootstrapped", username=username)
        return True
