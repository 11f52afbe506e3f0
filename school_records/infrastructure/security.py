from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError

from ..domain.entities import Role
from ..domain.errors import InvalidToken
from ..application.policy import Identity

pwd = CryptContext(
    schemes=["bcrypt_sha256"],
    deprecated="auto",
    bcrypt_sha256__truncate_error=False,
)


class PasswordHasher:
    def hash(self, plain: str) -> str: return pwd.hash(plain)
    def verify(self, plain: str, hashed: str) -> bool: return pwd.verify(plain, hashed)


class TokenService:
    """Выпускает и проверяет подписанные JWT с claims {sub, role, exp}."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", ttl_minutes: int = 24 * 60):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl_minutes = ttl_minutes

    def issue(self, username: str, role: Role, minutes: int | None = None) -> str:
        ttl = self.ttl_minutes if minutes is None else minutes
        exp = datetime.now(timezone.utc) + timedelta(minutes=ttl)
        payload = {"sub": username, "role": Role(role).value, "exp": exp}
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def _decode(self, token: str) -> dict:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidToken() from e
        if not payload.get("sub"):
            raise InvalidToken("No subject")
        return payload

    def verify(self, token: str) -> Role:
        return self.identify(token).role

    def subject_of(self, token: str) -> str:
        return self._decode(token)["sub"]

    def identify(self, token: str) -> Identity:
        payload = self._decode(token)
        try:
            role = Role(payload.get("role"))
        except ValueError as e:
            raise InvalidToken("Unknown role") from e
        return Identity(username=payload["sub"], role=role)
