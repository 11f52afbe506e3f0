from dataclasses import dataclass

from ..domain.entities import Role

@dataclass
class LoginResult:
    username: str
    role: Role
    token: str
