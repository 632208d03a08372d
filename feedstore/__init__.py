"""
FeedStore - Feed Item Storage
=============================

SQLite-backed data access for feed items: insert, paged queries, session
tracking, read state and soft deletion.

Main Components:
- Database: SQLite with connection pooling and schema management
- Configuration: environment variables with Pydantic validation
- Storage: async FeedStore over the items table
"""

__version__ = "1.0.0"
__author__ = "FeedStore Development Team"
__description__ = "SQLite storage layer for feed items"

from .config.settings import get_settings
from .database.schema import DatabaseSchema
from .database.models import FeedItem, FeedContentType
from .storage.feed_store import FeedStore
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import FeedStoreError, StorageError, RecordNotFoundError

__all__ = [
    "get_settings",
    "DatabaseSchema",
    "FeedItem",
    "FeedContentType",
    "FeedStore",
    "configure_application_logging",
    "get_logger_for_component",
    "FeedStoreError",
    "StorageError",
    "RecordNotFoundError",
]
