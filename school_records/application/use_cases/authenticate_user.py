import structlog

from ..dto import LoginResult
from ...domain.entities import Role
from ...domain.errors import Unauthenticated
from .register_user import IUserRepository, IPasswordHasher

logger = structlog.get_logger(__name__)

class ITokenIssuer:
    def issue(self, username: str, role: Role) -> str: ...

class AuthenticateUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher, tokens: ITokenIssuer):
        self.repo = repo
        self.hasher = hasher
        self.tokens = tokens

    def execute(self, username: str, password: str) -> LoginResult:
        user = self.repo.get_by_username(username)
        hashed = self.repo.get_password_hash(username) if user else None
        if not user or not hashed or not self._verify(username, password, hashed):
            logger.info("login_failed", username=username)
            raise Unauthenticated("Invalid credentials")
        token = self.tokens.issue(user.username, user.role)
        return LoginResult(username=user.username, role=user.role, token=token)

    def _verify(self, username: str, password: str, hashed: str) -> bool:
        try:
            return self.hasher.verify(password, hashed)
        except ValueError:
            # хэш в хранилище не распознан passlib
            logger.warning("password_hash_unreadable", username=username)
            return False
