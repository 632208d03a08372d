"""
Database Models Test Suite
=========================

Tests for FeedItem, content types, and row mapping.
"""

import sqlite3

import pytest
from pydantic import ValidationError

from feedstore.database.models import (
    ITEM_COLUMNS,
    FeedContentType,
    FeedItem,
    content_type_value,
    is_any_content_type,
    row_to_feed_item,
)
from feedstore.utils.exceptions import ErrorCode, RowMappingError, StorageError


@pytest.fixture
def row_data():
    """A well-formed items row as a plain mapping."""
    return {
        "id": 1,
        "publish_time": 1700000000000,
        "feed_source": "https://example.com/feed.xml",
        "url": "https://example.com/a",
        "domain": "example.com",
        "img": "",
        "title": "Title",
        "description": "Description",
        "content_type": "article",
        "publisher_id": "pub-1",
        "publisher_name": "Publisher",
        "publisher_logo": "",
        "session_displayed": "",
        "removed": 0,
        "liked": 1,
        "unread": 1,
    }


class TestFeedContentType:
    """Test content type helpers."""

    def test_values(self):
        assert FeedContentType.ANY.value == "any"
        assert FeedContentType("news") is FeedContentType.NEWS

    def test_content_type_value(self):
        assert content_type_value(FeedContentType.VIDEO) == "video"
        assert content_type_value("podcast") == "podcast"

    def test_is_any(self):
        assert is_any_content_type(FeedContentType.ANY)
        assert is_any_content_type("any")
        assert not is_any_content_type(FeedContentType.ARTICLE)


class TestFeedItem:
    """Test FeedItem model behaviour."""

    def test_from_row_mapping(self, row_data):
        item = row_to_feed_item(row_data)

        assert item.id == 1
        assert item.removed is False
        assert item.liked is True
        assert item.unread is True
        assert item.has_image is False

    def test_item_is_immutable(self, row_data):
        item = row_to_feed_item(row_data)
        with pytest.raises(ValidationError):
            item.id = 2

    def test_str_representation(self, row_data):
        assert str(row_to_feed_item(row_data)) == "FeedItem(1:Title)"

    def test_has_image(self, row_data):
        row_data["img"] = "https://example.com/i.png"
        assert row_to_feed_item(row_data).has_image is True


class TestRowMapping:
    """Test malformed row handling."""

    def test_missing_column(self, row_data):
        del row_data["unread"]
        with pytest.raises(RowMappingError):
            row_to_feed_item(row_data)

    def test_wrong_text_type(self, row_data):
        row_data["title"] = None
        with pytest.raises(RowMappingError) as exc_info:
            row_to_feed_item(row_data)

        error = exc_info.value
        assert isinstance(error, StorageError)
        assert error.error_code == ErrorCode.ROW_MAPPING_FAILED
        assert error.context["column"] == "title"

    def test_integer_in_text_column(self, row_data):
        row_data["url"] = 42
        with pytest.raises(RowMappingError):
            row_to_feed_item(row_data)

    def test_bad_timestamp(self, row_data):
        row_data["publish_time"] = "yesterday"
        with pytest.raises(RowMappingError) as exc_info:
            row_to_feed_item(row_data)
        assert exc_info.value.context["column"] == "publish_time"

    def test_sqlite_row(self, row_data):
        """sqlite3.Row objects map the same way as dicts."""
        conn = sqlite3.connect(":memory:")
        conn.row_factory = sqlite3.Row
        select = ", ".join(f":{column} AS {column}" for column in ITEM_COLUMNS)
        row = conn.execute(f"SELECT {select}", row_data).fetchone()
        conn.close()

        assert row_to_feed_item(row) == row_to_feed_item(row_data)

    def test_sqlite_row_missing_column(self):
        conn = sqlite3.connect(":memory:")
        conn.row_factory = sqlite3.Row
        row = conn.execute("SELECT 1 AS id").fetchone()
        conn.close()

        with pytest.raises(RowMappingError):
            row_to_feed_item(row)
