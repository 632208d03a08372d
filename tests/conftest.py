"""
PyTest Configuration and Fixtures
=================================

Shared fixtures and configuration for FeedStore tests.
"""

import pytest
import os
import sys
from pathlib import Path

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Keep test runs away from the developer's log directory
os.environ["FEEDSTORE_LOGGING__FILE_PATH"] = ""
os.environ["FEEDSTORE_DEBUG"] = "true"


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def temp_db(tmp_path):
    """Temporary database file with the items schema created."""
    from feedstore.database.schema import DatabaseSchema

    db_path = tmp_path / "feedstore_test.db"
    schema = DatabaseSchema(str(db_path))
    schema.create_tables()

    yield str(db_path)


@pytest.fixture
def db_connection(temp_db):
    """Create a database connection manager for testing."""
    from feedstore.database.connection import DatabaseConnection

    connection = DatabaseConnection(temp_db, pool_size=2)
    yield connection

    connection.close_all_connections()


@pytest.fixture
def feed_store(db_connection):
    """FeedStore bound to the temporary database."""
    from feedstore.storage.feed_store import FeedStore

    return FeedStore(db_connection, default_page_size=10)


@pytest.fixture
def make_item_fields():
    """Factory for create_record keyword arguments.

    Usage:
        fields = make_item_fields(url="http://a", publish_time=1000)
        item = await feed_store.create_record(**fields)
    """
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "publish_time": 1000 * n,
            "feed_source": "https://example.com/feed.xml",
            "url": f"https://example.com/article-{n}",
            "domain": "example.com",
            "img": f"https://example.com/img-{n}.jpg",
            "title": f"Article {n}",
            "description": f"Description of article {n}",
            "content_type": "article",
            "publisher_id": "pub-1",
            "publisher_name": "Example Publisher",
            "publisher_logo": "https://example.com/logo.png",
        }
        fields.update(overrides)
        return fields

    return _make
