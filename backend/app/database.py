import os
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.config import settings

database_url = settings.database_url

# QueuePool settings are process-local. Keep defaults conservative.
POOL_DEFAULTS = {
    "pool_size": 2,
    "max_overflow": 1,
    "pool_timeout": 5,
    "pool_recycle": 3600,
}

POOL_LIMITS = {
    "pool_size": (1, 8),
    "max_overflow": (0, 8),
    "pool_timeout": (2, 30),
    "pool_recycle": (300, 7200),
}


def _get_env_int(name: str, default: int) -> int:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default

    try:
        return int(str(raw_value).strip())
    except (TypeError, ValueError):
        return default


def _bounded_env_int(name: str, default: int, minimum: int, maximum: int) -> int:
    value = _get_env_int(name, default)
    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value


def is_sqlite_url(url: str) -> bool:
    return str(url).strip().lower().startswith("sqlite")


def build_engine(url: str):
    # SQLite does not support the QueuePool arguments used in production.
    if is_sqlite_url(url):
        return create_engine(
            url,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False},
        )

    pool_args = {
        name: _bounded_env_int(f"DB_{name.upper()}", POOL_DEFAULTS[name], *POOL_LIMITS[name])
        for name in POOL_DEFAULTS
    }
    return create_engine(url, pool_pre_ping=True, **pool_args)


engine = build_engine(database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@contextmanager
def get_db():
    """Context manager for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db_session():
    """Get a database session directly (caller responsible for closing)"""
    return SessionLocal()


def init_db() -> None:
    """Create the audit tables if they do not exist yet."""
    from app import models  # noqa: F401  # ensure models are registered

    Base.metadata.create_all(bind=engine)


def dispose_engine() -> None:
    engine.dispose()
