class DomainError(Exception):
    """Base class of every failure the HTTP layer knows how to answer."""

    default_message = "Domain error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    default_message = "Invalid request"


class Unauthenticated(DomainError):
    default_message = "Not authenticated"


class InvalidToken(Unauthenticated):
    default_message = "Invalid token"


class AccessError(DomainError):
    def __init__(self, message: str | None = None, action: str = "", reason: str = ""):
        self.action = action
        self.reason = reason
        super().__init__(message)


class Denied(AccessError):
    """Role gate failed: the caller's role may not perform the action at all."""

    default_message = "Not authorized"


class Forbidden(AccessError):
    """Ownership or relationship check failed for an otherwise permitted role."""

    default_message = "Access to this resource is forbidden"


class NotFound(DomainError):
    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} not found")


class Conflict(DomainError):
    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} already exists")


class StoreFailure(DomainError):
    default_message = "Internal server error"


class StoreUnavailable(StoreFailure):
    default_message = "Storage temporarily unavailable"
