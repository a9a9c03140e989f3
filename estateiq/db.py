"""
Database handle for EstateIQ.

A single SQLAlchemy engine is created lazily on first use and reused for the
lifetime of the process. Routes receive a short-lived ORM session through the
``get_db`` dependency, which tests override with an in-memory database.
"""

from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from estateiq.config import settings
from estateiq.logging_config import get_logger
from estateiq.models import Base

logger = get_logger(__name__)

_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on FK enforcement (and ON DELETE CASCADE) for SQLite connections."""
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_engine() -> Engine:
    """Return the process-wide engine, creating it on first call."""
    global _engine
    if _engine is None:
        url = settings.DATABASE_URL
        is_sqlite = url.startswith("sqlite")
        connect_args = {"check_same_thread": False} if is_sqlite else {}
        _engine = create_engine(
            url,
            connect_args=connect_args,
            pool_pre_ping=True,
            echo=settings.SQL_ECHO,
        )
        if is_sqlite:
            enable_sqlite_foreign_keys(_engine)
        logger.info(f"Database engine created ({_engine.url.get_backend_name()})")
    return _engine


def get_sessionmaker() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def init_db():
    """
    Create tables if they don't exist.
    For schema changes, use Alembic migrations instead:
        alembic revision --autogenerate -m "Description of change"
        alembic upgrade head
    """
    Base.metadata.create_all(bind=get_engine())


def dispose_engine() -> None:
    """Release pooled connections; called on application shutdown."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
        logger.info("Database engine disposed")
    _engine = None
    _SessionLocal = None


def get_db() -> Generator[Session, None, None]:
    db = get_sessionmaker()()
    try:
        yield db
    finally:
        db.close()
