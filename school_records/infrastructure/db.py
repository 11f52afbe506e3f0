from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session
from sqlalchemy.pool import StaticPool
from fastapi import Request

from ..config import Settings


class Base(DeclarativeBase): pass


def build_engine(settings: Settings) -> Engine:
    url = settings.DATABASE_URL
    timeout = settings.DB_TIMEOUT_SECONDS

    if url.startswith("sqlite"):
        # timeout — сколько ждать блокировку файла БД
        kwargs = {"connect_args": {"check_same_thread": False, "timeout": timeout}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=False, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    connect_args = {}
    if url.startswith("postgresql"):
        connect_args = {
            "client_encoding": "utf8",
            "connect_timeout": timeout,
            "options": f"-c statement_timeout={timeout * 1000}",
        }
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,
        pool_timeout=timeout,
        connect_args=connect_args,
        echo=False
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db(request: Request):
    db: Session = request.app.state.session_factory()
    try: yield db
    finally: db.close()
