import time
import logging
import structlog
from fastapi import FastAPI, Request
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text

from .config import Settings
from .application.use_cases.register_user import EnsureAdmin
from .infrastructure.db import build_engine, build_session_factory
from .infrastructure.models import Base
from .infrastructure.metrics import (
    metrics_endpoint,
    http_requests_total,
    http_request_duration_seconds
)
from .infrastructure.repositories import UserRepository
from .infrastructure.security import PasswordHasher, TokenService
from .interfaces.http.errors import install_error_handlers
from .interfaces.http.ratelimit import build_limiter
from .interfaces.http.routers import (
    auth as auth_router,
    students as students_router,
    professors as professors_router,
    courses as courses_router,
)

VERSION = "0.1.0"

logger = structlog.get_logger()


def configure_logging(level_name: str) -> None:
    # Настройка структурированного логирования
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="School Records Service", version=VERSION)

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_service = TokenService(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        ttl_minutes=settings.TOKEN_TTL_MINUTES,
    )

    limiter = build_limiter(settings)
    app.state.limiter = limiter
    auth_router.bind_rate_limits(app, limiter)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    install_error_handlers(app)

    # Middleware для метрик и логирования запросов
    @app.middleware("http")
    async def observe_requests(request: Request, call_next):
        start_time = time.time()
        method = request.method

        response = await call_next(request)

        # метка: шаблон маршрута, для путей без маршрута одна общая
        route = request.scope.get("route")
        endpoint = route.path if route is not None else "unmatched"

        duration = time.time() - start_time
        status_code = response.status_code
        http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
        http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

        logger.info(
            "http_request",
            method=method,
            path=endpoint,
            status_code=status_code,
            duration_ms=round(duration * 1000, 2)
        )

        return response

    @app.on_event("startup")
    def on_startup():
        logger.info("service_starting", version=VERSION)
        Base.metadata.create_all(bind=engine)

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("database_ready")

        if settings.ADMIN_PASSWORD:
            db = app.state.session_factory()
            try:
                EnsureAdmin(repo=UserRepository(db), hasher=PasswordHasher()).execute(
                    settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD
                )
            finally:
                db.close()

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/metrics")
    def metrics():
        """Prometheus metrics endpoint"""
        return metrics_endpoint()

    app.include_router(auth_router.router)
    app.include_router(students_router.router)
    app.include_router(professors_router.router)
    app.include_router(courses_router.router)
    return app


app = create_app()
