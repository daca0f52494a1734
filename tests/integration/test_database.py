"""Integration tests for engine and session factory setup."""

import pytest

from coinfolio.config.settings import Settings, reset_settings, set_settings
from coinfolio.repositories.sqlalchemy.database import (
    SQLITE_BUSY_TIMEOUT,
    get_session_factory,
    init_db_with_path,
    reset_database,
)


@pytest.fixture(autouse=True)
def clean_database_state():
    reset_database()
    yield
    reset_database()
    reset_settings()


class TestSessionFactory:
    """The factory follows the settings and is created once."""

    def test_factory_uses_settings_database(self, tmp_path):
        set_settings(Settings(data_dir=tmp_path))

        factory = get_session_factory()

        assert (tmp_path / "coinfolio.db").exists()
        assert get_session_factory() is factory

    def test_reset_rereads_settings(self, tmp_path):
        set_settings(Settings(data_dir=tmp_path / "first"))
        first = get_session_factory()

        set_settings(Settings(data_dir=tmp_path / "second"))
        reset_database()

        assert get_session_factory() is not first
        assert (tmp_path / "second" / "coinfolio.db").exists()

    def test_explicit_path(self, tmp_path):
        init_db_with_path(tmp_path / "other.db")

        assert (tmp_path / "other.db").exists()

    def test_sqlite_writers_wait_for_locks(self, tmp_path):
        """
        GIVEN a SQLite file database
        WHEN a connection is opened
        THEN it waits for a busy database instead of failing at once
        """
        init_db_with_path(tmp_path / "busy.db")

        with get_session_factory()() as db:
            busy_timeout_ms = db.connection().exec_driver_sql("PRAGMA busy_timeout").scalar()

        assert busy_timeout_ms == SQLITE_BUSY_TIMEOUT * 1000
