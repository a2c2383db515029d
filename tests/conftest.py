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
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary directory."""
    return Config(
        base_dir=tmp_path / "spendwell",
        db_data_dir=tmp_path / "spendwell" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "spendwell" / "logs",
        default_alert_threshold=80,
        page_size=9,
    )


@pytest.fixture
def db_manager_with_schema(test_db):
    """Create a database manager over the in-memory database with all migrations applied."""
    apply_pending_migrations(test_db, get_migrations_dir())

    class TestDatabaseManager:
        """Test database manager that uses in-memory connection."""

        def __init__(self, conn):
            self.conn = conn

        def connect(self):
            return _TestConnectionContext(self.conn)

        def get_db_path(self):
            return Path(":memory:")

        def get_migrations_dir(self):
            return get_migrations_dir()

    class _TestConnectionContext:
        """Context manager that hands out the shared test connection."""

        def __init__(self, conn):
            self.conn = conn

        def __enter__(self):
            return self.conn

        def __exit__(self, exc_type, exc_val, exc_tb):
            # Uncommitted work is discarded, as when a real connection closes
            if exc_type is not None:
                self.conn.rollback()

    return TestDatabaseManager(test_db)


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Create a Services container with a clean test database."""
    return Services(test_config, db_manager=db_manager_with_schema)


@pytest.fixture
def checking(services):
    """A checking account."""
    return services.accounts.create("main_checking", "checking", "Main Checking")


@pytest.fixture
def groceries(services):
    """An expense category."""
    return services.categories.create("Groceries", "expense", "Food and groceries")
