"""Engine and session factory for the portfolio store."""

from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from coinfolio.config.settings import get_settings

Base = declarative_base()

# Seconds a SQLite writer waits for another writer's lock before failing
SQLITE_BUSY_TIMEOUT = 30

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def _configure(database_url: str) -> sessionmaker:
    """Replace the engine and session factory with ones bound to `database_url`."""
    global _engine, _session_factory

    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sessions are opened from worker threads
        connect_args = {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT}

    reset_database()
    _engine = create_engine(database_url, connect_args=connect_args, echo=False)
    _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=_engine)

    from coinfolio.repositories.sqlalchemy import orm_models  # noqa: F401
    Base.metadata.create_all(bind=_engine)
    return _session_factory


def get_session_factory() -> sessionmaker:
    """Session factory for the configured database, created on first use."""
    if _session_factory is None:
        return _configure(get_settings().get_database_url())
    return _session_factory


def init_db() -> None:
    """Create the tables for the database named by the current settings."""
    get_session_factory()


def init_db_with_path(db_path: Path) -> None:
    """Point the store at a SQLite file and create its tables."""
    _configure(f"sqlite:///{db_path}")


def reset_database() -> None:
    """Dispose of the engine so the next use reads the settings again."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
    _engine = None
    _session_factory = None
