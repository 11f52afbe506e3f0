import structlog
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, TimeoutError as PoolTimeoutError, OperationalError

from ...domain.errors import (
    DomainError, ValidationError, Unauthenticated, AccessError, NotFound, Conflict,
    StoreFailure, StoreUnavailable,
)
from ...infrastructure.metrics import authorization_denials_total, store_failures_total

logger = structlog.get_logger(__name__)

STATUS_CODES = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (Unauthenticated, status.HTTP_401_UNAUTHORIZED),
    (AccessError, status.HTTP_403_FORBIDDEN),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (Conflict, status.HTTP_409_CONFLICT),
    (StoreUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
    (StoreFailure, status.HTTP_500_INTERNAL_SERVER_ERROR),
]

def status_for(exc: DomainError) -> int:
    for cls, code in STATUS_CODES:
        if isinstance(exc, cls):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR

def _is_timeout(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, PoolTimeoutError):
        return True
    # statement_timeout в PostgreSQL, "database is locked" в SQLite
    if isinstance(exc, OperationalError):
        text = str(exc.orig).lower()
        return "timeout" in text or "locked" in text
    return False

async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    code = status_for(exc)
    headers = None
    if code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    if isinstance(exc, AccessError):
        authorization_denials_total.labels(action=exc.action, reason=exc.reason).inc()
    return JSONResponse(status_code=code, content={"detail": exc.message}, headers=headers)

async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )

async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    failure = StoreUnavailable() if _is_timeout(exc) else StoreFailure()
    store_failures_total.inc()
    logger.error("store_failure", path=request.url.path, error_type=type(exc).__name__, exc_info=exc)
    return await domain_error_handler(request, failure)

def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
