"""SQLite-backed key/value store for scanner data."""

import sqlite3
import logging
from pathlib import Path
from typing import List, Optional
from contextlib import contextmanager

from ..exceptions import StorageError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1


class KeyValueStore:
    """String keys mapped to string (JSON) values in a single SQLite table."""

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize database connection and schema.

        Args:
            db_path: Optional path to database file. Defaults to XDG data directory.

        Raises:
            StorageError: If the database cannot be created
        """
        if db_path is None:
            db_path = Path.home() / ".local/share/scanner_pro/storage.db"

        self.db_path = Path(db_path)
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._init_schema()
        except (OSError, sqlite3.Error) as e:
            raise StorageError(f"Cannot open store at {self.db_path}: {e}") from e

        logger.info(f"Key/value store initialized at {self.db_path}")

    @contextmanager
    def _connection(self):
        """
        Context manager for database connections.

        Yields:
            sqlite3.Connection
        """
        conn = sqlite3.connect(str(self.db_path))
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self):
        """Create the kv table on a fresh database."""
        with self._connection() as conn:
            cursor = conn.cursor()
            current_version = cursor.execute("PRAGMA user_version").fetchone()[0]

            if current_version == 0:
                logger.info(f"Creating fresh store schema (version {SCHEMA_VERSION})")
                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS kv (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    )
                """)
                cursor.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
            else:
                logger.debug(f"Store schema version {current_version} is up to date")

    def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under ``key``.

        Returns:
            Stored string, or None if the key is absent

        Raises:
            StorageError: If the database cannot be read
        """
        try:
            with self._connection() as conn:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read '{key}': {e}") from e
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        """
        Store ``value`` under ``key``, replacing any previous value.

        Raises:
            StorageError: If the database cannot be written
        """
        try:
            with self._connection() as conn:
                conn.execute(
                    """
                    INSERT INTO kv (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, value),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write '{key}': {e}") from e
        logger.debug(f"Stored {len(value)} chars under '{key}'")

    def remove_item(self, key: str) -> bool:
        """
        Delete ``key``.

        Returns:
            True if a value was removed, False if the key was absent
        """
        try:
            with self._connection() as conn:
                cursor = conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                removed = cursor.rowcount > 0
        except sqlite3.Error as e:
            raise StorageError(f"Failed to delete '{key}': {e}") from e
        return removed

    def keys(self) -> List[str]:
        """All stored keys, sorted."""
        try:
            with self._connection() as conn:
                rows = conn.execute("SELECT key FROM kv ORDER BY key").fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Failed to list keys: {e}") from e
        return [row[0] for row in rows]
