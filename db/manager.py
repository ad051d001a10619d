"""Database manager for SQLite connections and path management."""

import sqlite3
from contextlib import contextmanager
from config import Config, get_migrations_dir


class DatabaseManager:
    """Manages database connections and paths.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        """Initialize the database manager.

        Args:
            config: Config object containing database configuration.
        """
        self.config = config

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        Foreign keys are enabled on every connection so that category
        deletes cascade to their dependents.

        Yields:
            sqlite3.Connection: Database connection.
        """
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path)
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self):
        """Get the current database path.

        Returns:
            Path: Path to the database file.
        """
        return self.config.db_path

    def get_migrations_dir(self):
        """Get the migrations directory path.

        Returns:
            Path: Path to the migrations directory.
        """
        return get_migrations_dir()


@contextmanager
def atomic(conn: sqlite3.Connection):
    """Run a block of writes as a single transaction.

    Commits when the block exits normally and rolls back every statement
    issued inside it when it raises. The connection must not already be in
    a transaction, so earlier uncommitted writes are never folded in.

    Args:
        conn: Open database connection.

    Yields:
        sqlite3.Connection: The same connection.

    Raises:
        sqlite3.ProgrammingError: If a transaction is already open.
    """
    if conn.in_transaction:
        raise sqlite3.ProgrammingError("atomic() called with a transaction already open")
    conn.execute("BEGIN")
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    else:
        conn.commit()
