"""
FeedStore Database Schema
========================

SQLite schema for the ``items`` table that backs FeedStore, with the indexes
used by the paged feed queries.
"""

import sqlite3
import logging
from pathlib import Path

from .models import ITEM_COLUMNS

logger = logging.getLogger(__name__)


class DatabaseSchema:
    """Database schema manager for the FeedStore SQLite database."""

    def __init__(self, db_path: str = "data/feedstore.db"):
        """Initialize database schema manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create the items table and its indexes if they do not exist."""
        with self.get_connection() as conn:
            self._create_items_table(conn)
            self._create_indexes(conn)
            conn.commit()
        logger.info("Database schema created successfully")

    def _create_items_table(self, conn: sqlite3.Connection) -> None:
        """Create items table for feed entries."""
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                publish_time INTEGER NOT NULL,
                feed_source TEXT NOT NULL,
                url TEXT NOT NULL,
                domain TEXT NOT NULL,
                img TEXT NOT NULL DEFAULT '',
                title TEXT NOT NULL,
                description TEXT NOT NULL,
                content_type TEXT NOT NULL,
                publisher_id TEXT NOT NULL,
                publisher_name TEXT NOT NULL,
                publisher_logo TEXT NOT NULL,
                session_displayed TEXT NOT NULL DEFAULT '',
                removed BOOLEAN NOT NULL DEFAULT FALSE,
                liked BOOLEAN NOT NULL DEFAULT FALSE,
                unread BOOLEAN NOT NULL DEFAULT TRUE
            )
        """
        )

    def _create_indexes(self, conn: sqlite3.Connection) -> None:
        """Create indexes for the paged and lookup queries."""
        indexes = [
            "CREATE INDEX IF NOT EXISTS idx_items_publish_time ON items(publish_time)",
            "CREATE INDEX IF NOT EXISTS idx_items_publisher ON items(publisher_id)",
            "CREATE INDEX IF NOT EXISTS idx_items_url ON items(url)",
            "CREATE INDEX IF NOT EXISTS idx_items_removed_session ON items(removed, session_displayed)",
        ]

        for index_sql in indexes:
            conn.execute(index_sql)

    def drop_tables(self) -> None:
        """Drop all tables (for testing/reset purposes)."""
        with self.get_connection() as conn:
            conn.execute("DROP TABLE IF EXISTS items")
            conn.commit()
        logger.info("All database tables dropped")

    def get_connection(self) -> sqlite3.Connection:
        """Get database connection with dict-like row access."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def verify_schema(self) -> bool:
        """Verify the items table exists with the expected column order."""
        try:
            with self.get_connection() as conn:
                cursor = conn.execute("PRAGMA table_info(items)")
                columns = tuple(row["name"] for row in cursor.fetchall())

            if not columns:
                logger.error("Missing table: items")
                return False

            if columns != ITEM_COLUMNS:
                logger.error(
                    f"Unexpected items columns. Expected: {ITEM_COLUMNS}, Found: {columns}"
                )
                return False

            logger.info("Database schema verification passed")
            return True

        except sqlite3.Error as e:
            logger.error(f"Schema verification failed: {e}")
            return False


def create_tables(db_path: str = "data/feedstore.db") -> None:
    """Convenience function to create database tables.

    Args:
        db_path: Path to SQLite database file
    """
    schema = DatabaseSchema(db_path)
    schema.create_tables()
