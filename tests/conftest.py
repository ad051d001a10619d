"""Shared pytest fixtures for all tests."""

import sqlite3
import pytest
from pathlib import Path

from config import Config, get_migrations_dir
from db.migrator import apply_pending_migrations
from services.base import Services


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database with foreign keys on.
    """
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary database.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "budgetr",
        db_data_dir=tmp_path / "budgetr" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "budgetr" / "logs",
        owner_id="alice",
        enable_reset=False,
    )


class TestDatabaseManager:
    """Database manager that hands out one shared in-memory connection."""

    __test__ = False

    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        """Return a context manager for the test connection."""
        return _TestConnectionContext(self.conn)

    def get_db_path(self):
        return Path(":memory:")

    def get_migrations_dir(self):
        return get_migrations_dir()


class _TestConnectionContext:
    def __init__(self, conn):
        self.conn = conn

    def __enter__(self):
        return self.conn

    def __exit__(self, exc_type, exc_val, exc_tb):
        # The fixture owns the connection
        pass


@pytest.fixture
def db_manager_with_schema(test_db):
    """Create a DatabaseManager over an in-memory database with every migration applied.

    Args:
        test_db: In-memory database connection fixture.

    Returns:
        TestDatabaseManager: Database manager with schema ready.
    """
    apply_pending_migrations(test_db, get_migrations_dir())
    return TestDatabaseManager(test_db)


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Services for owner "alice" on a clean test database.

    Args:
        test_config: Test configuration fixture.
        db_manager_with_schema: Database manager with schema set up.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, db_manager=db_manager_with_schema)


@pytest.fixture
def other_services(test_config, db_manager_with_schema):
    """Services for a second owner, "bob", sharing the same database."""
    return Services(test_config, owner_id="bob", db_manager=db_manager_with_schema)
