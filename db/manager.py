"""Database manager for SQLite connections, paths and schema migrations."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import List
from config import Config, get_migrations_dir
from logger import get_logger

logger = get_logger()

# Seconds a writer waits on a locked database before failing
BUSY_TIMEOUT = 10


class DatabaseManager:
    """Manages database connections and paths.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        self.config = config

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        Yields:
            sqlite3.Connection: Database connection.
        """
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path, timeout=BUSY_TIMEOUT)
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self) -> Path:
        """Get the current database path."""
        return self.config.db_path

    def get_migrations_dir(self) -> Path:
        """Get the migrations directory path."""
        return get_migrations_dir()


def init_schema_migrations_table(conn: sqlite3.Connection) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_file TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()


def applied_migrations(conn: sqlite3.Connection) -> set:
    cursor = conn.execute("SELECT migration_file FROM schema_migrations")
    return {row[0] for row in cursor.fetchall()}


def available_migrations(migrations_dir: Path) -> List[str]:
    """List migration file names in the order they must be applied."""
    if not migrations_dir.exists():
        return []
    return sorted(path.name for path in migrations_dir.glob("*.sql"))


def apply_pending_migrations(
    conn: sqlite3.Connection, migrations_dir: Path
) -> List[str]:
    """Apply every migration not yet recorded in schema_migrations.

    Args:
        conn: Connection to migrate.
        migrations_dir: Directory holding the .sql files.

    Returns:
        Names of the migrations that were applied, in order.

    Raises:
        sqlite3.Error: If a migration fails. Each migration runs in its own
                       transaction together with its schema_migrations
                       record, so a failed one leaves no trace and the
                       remaining ones are not attempted.
    """
    init_schema_migrations_table(conn)
    done = applied_migrations(conn)
    pending = [m for m in available_migrations(migrations_dir) if m not in done]

    for migration_file in pending:
        sql = (migrations_dir / migration_file).read_text()
        try:
            # executescript does no transaction control of its own
            record = migration_file.replace("'", "''")
            conn.executescript(
                f"BEGIN;\n{sql}\n"
                f"INSERT INTO schema_migrations (migration_file) VALUES ('{record}');\n"
                "COMMIT;"
            )
            logger.info(f"Applied migration: {migration_file}")
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"Error applying migration {migration_file}: {e}")
            raise

    return pending
