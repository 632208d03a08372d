"""
Feed Store
==========

Data access for feed items in the ``items`` table. Every public operation is a
coroutine; the blocking SQLite work runs in a worker thread and either returns
a value or raises StorageError.
"""

import asyncio
import sqlite3
from typing import Any, Callable, List, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.models import (
    ContentTypeArg,
    FeedContentType,
    FeedItem,
    content_type_value,
    is_any_content_type,
    row_to_feed_item,
)
from ..database.schema import DatabaseSchema
from ..utils.exceptions import (
    ErrorCode,
    RecordNotFoundError,
    StorageError,
    handle_exception,
)
from ..utils.logging import PerformanceLogger, get_logger_for_component
from .query_builder import WhereClause, in_clause, select_items

INSERT_ITEM_SQL = """
    INSERT INTO items (publish_time, feed_source, url, domain, img, title,
                       description, content_type, publisher_id, publisher_name,
                       publisher_logo, session_displayed, removed, liked)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0, 0)
"""


class FeedStore:
    """Async repository for FeedItem CRUD and paged queries."""

    def __init__(self, db_connection: DatabaseConnection, default_page_size: int = 20):
        """Initialize feed store.

        Args:
            db_connection: Database connection manager
            default_page_size: Page size used when a query passes no limit
        """
        self.db = db_connection
        self.default_page_size = default_page_size
        self.logger = get_logger_for_component("feed_store")

    @classmethod
    def from_settings(cls, settings) -> "FeedStore":
        """Build a store from FeedStoreSettings, creating the schema if needed."""
        DatabaseSchema(settings.database.path).create_tables()
        db = DatabaseConnection(
            settings.database.path,
            pool_size=settings.database.pool_size,
            timeout=settings.database.timeout,
        )
        return cls(db, default_page_size=settings.query.default_page_size)

    async def _run(self, operation: str, func: Callable[..., Any], *args: Any) -> Any:
        """Run blocking work off the event loop, mapping engine errors."""
        try:
            with PerformanceLogger(self.logger, operation):
                return await asyncio.to_thread(func, *args)
        except StorageError:
            raise
        except sqlite3.Error as e:
            raise handle_exception(e, self.logger, operation) from e

    # --- Reads ---

    async def fetch_all(self, include_removed: bool = True) -> List[FeedItem]:
        """Return all items, newest first.

        Removed items are included unless ``include_removed`` is False.
        """
        where = WhereClause().add_if(not include_removed, "removed = 0")
        sql, params = select_items(where)
        return await self._run("fetch_all", self._fetch_items, sql, params)

    async def fetch_page(
        self,
        session_token: str,
        limit: Optional[int] = None,
        requires_image: bool = False,
        content_type: ContentTypeArg = FeedContentType.ANY,
    ) -> List[FeedItem]:
        """Return up to ``limit`` live items not yet shown in this session.

        Args:
            session_token: Current session; items displayed in it are skipped
            limit: Maximum items to return (default page size when None)
            requires_image: Only return items with a non-empty image
            content_type: Restrict to one content type ("any" means no filter)

        Returns:
            Items ordered by publish time, newest first
        """
        sql, params = self._page_query(
            session_token, None, limit, requires_image, content_type
        )
        return await self._run("fetch_page", self._fetch_items, sql, params)

    async def fetch_page_for_publisher(
        self,
        session_token: str,
        publisher_id: str,
        limit: Optional[int] = None,
        requires_image: bool = False,
        content_type: ContentTypeArg = FeedContentType.ANY,
    ) -> List[FeedItem]:
        """Same as fetch_page, restricted to a single publisher."""
        sql, params = self._page_query(
            session_token, publisher_id, limit, requires_image, content_type
        )
        return await self._run(
            "fetch_page_for_publisher", self._fetch_items, sql, params
        )

    async def fetch_by_url(self, url: str) -> FeedItem:
        """Return the live item with this URL.

        Raises:
            RecordNotFoundError: If no live item has this URL
        """
        where = WhereClause().add("url = ?", url).add("removed = 0")
        sql, params = select_items(where, order_by=None, limit=1)
        return await self._run("fetch_by_url", self._fetch_url, sql, params, url)

    # --- Writes ---

    async def create_record(
        self,
        publish_time: int,
        feed_source: str,
        url: str,
        domain: str,
        img: str,
        title: str,
        description: str,
        content_type: ContentTypeArg,
        publisher_id: str,
        publisher_name: str,
        publisher_logo: str,
    ) -> FeedItem:
        """Insert a new item and return it as stored.

        The insert and the read-back run in one transaction.

        Raises:
            StorageError: If the insert did not produce a new row
        """
        args = (
            publish_time, feed_source, url, domain, img, title, description,
            content_type_value(content_type), publisher_id, publisher_name,
            publisher_logo, "",
        )
        return await self._run("create_record", self._create_record, args)

    async def mark_session_shown(self, item_id: int, session_token: str) -> FeedItem:
        """Record that an item was displayed in ``session_token``.

        Raises:
            RecordNotFoundError: If the item does not exist
        """
        items = await self._run(
            "mark_session_shown", self._mark_sessions, [item_id], session_token
        )
        return items[0]

    async def mark_sessions_shown(
        self, item_ids: Sequence[int], session_token: str
    ) -> List[FeedItem]:
        """Record that several items were displayed in ``session_token``.

        Returns:
            The updated items, newest first

        Raises:
            RecordNotFoundError: If none of the items exist
        """
        if not item_ids:
            raise RecordNotFoundError("Unable to get updated FeedItem: no ids given")
        return await self._run(
            "mark_sessions_shown", self._mark_sessions, list(item_ids), session_token
        )

    async def mark_as_read(self, item_id: int, read: bool) -> FeedItem:
        """Set the read state of an item and return it.

        Raises:
            RecordNotFoundError: If the item does not exist
        """
        return await self._run("mark_as_read", self._mark_as_read, item_id, read)

    async def soft_delete(self, item_id: int) -> int:
        """Mark an item as removed. Returns the number of rows affected."""
        return await self._run(
            "soft_delete", self._update,
            "UPDATE items SET removed = 1 WHERE id = ?", (item_id,),
        )

    async def soft_delete_by_publisher(self, publisher_id: str) -> int:
        """Mark every item from a publisher as removed."""
        count = await self._run(
            "soft_delete_by_publisher", self._update,
            "UPDATE items SET removed = 1 WHERE publisher_id = ?", (publisher_id,),
        )
        self.logger.info(f"Removed {count} items from publisher {publisher_id}")
        return count

    async def delete_record(self, item: FeedItem) -> int:
        """Delete an item's row. Deleting a missing id affects zero rows."""
        return await self._run(
            "delete_record", self._update,
            "DELETE FROM items WHERE id = ?", (item.id,),
        )

    async def delete_all_records(self) -> int:
        """Delete every item. Irreversible."""
        count = await self._run(
            "delete_all_records", self._update, "DELETE FROM items", ()
        )
        self.logger.info(f"Deleted all {count} items")
        return count

    # --- Blocking implementations (run in worker threads) ---

    def _page_query(self, session_token, publisher_id, limit, requires_image, content_type):
        if limit is None:
            limit = self.default_page_size
        if limit < 0:
            raise StorageError(
                f"Page limit must not be negative, got {limit}",
                error_code=ErrorCode.VALIDATION_OUT_OF_RANGE,
            )

        where = (
            WhereClause()
            .add("session_displayed != ?", session_token)
            .add_if(publisher_id is not None, "publisher_id = ?", publisher_id)
            .add("removed = 0")
            .add_if(requires_image, "img != ''")
            .add_if(
                not is_any_content_type(content_type),
                "content_type = ?",
                content_type_value(content_type),
            )
        )
        return select_items(where, limit=limit)

    def _fetch_items(self, sql: str, params: tuple) -> List[FeedItem]:
        rows = self.db.execute_query(sql, params)
        return [row_to_feed_item(row) for row in rows]

    def _fetch_url(self, sql: str, params: tuple, url: str) -> FeedItem:
        items = self._fetch_items(sql, params)
        if not items:
            raise RecordNotFoundError(
                f"No live FeedItem with url {url}", query=sql
            )
        return items[0]

    def _update(self, sql: str, params: tuple) -> int:
        count = self.db.execute_update(sql, params)
        self.logger.debug(f"{sql.split()[0]} affected {count} items")
        return count

    def _create_record(self, args: tuple) -> FeedItem:
        with self.db.transaction() as conn:
            previous_rowid = conn.execute("SELECT last_insert_rowid()").fetchone()[0]
            conn.execute(INSERT_ITEM_SQL, args)
            rowid = conn.execute("SELECT last_insert_rowid()").fetchone()[0]

            if rowid == previous_rowid:
                raise StorageError(
                    "Unable to insert FeedItem",
                    query=INSERT_ITEM_SQL,
                    error_code=ErrorCode.RECORD_INSERT_FAILED,
                )

            sql, params = select_items(
                WhereClause().add("id = ?", rowid), order_by=None, limit=1
            )
            row = conn.execute(sql, params).fetchone()
            if row is None:
                raise StorageError(
                    f"Unable to get inserted FeedItem {rowid}",
                    query=sql,
                    error_code=ErrorCode.DATABASE_CORRUPTION,
                )
            item = row_to_feed_item(row)

        self.logger.debug(f"Created item {item.id}: {item.url}")
        return item

    def _mark_sessions(self, item_ids: List[int], session_token: str) -> List[FeedItem]:
        predicate, id_params = in_clause("id", item_ids)
        with self.db.transaction() as conn:
            conn.execute(
                f"UPDATE items SET session_displayed = ? WHERE {predicate}",
                (session_token, *id_params),
            )
            sql, params = select_items(WhereClause().add(predicate, *id_params))
            items = [row_to_feed_item(row) for row in conn.execute(sql, params)]

        if not items:
            raise RecordNotFoundError(
                f"Unable to get updated FeedItem for ids {item_ids}"
            )
        self.logger.debug(
            f"Marked {len(items)} items shown in session {session_token}"
        )
        return items

    def _mark_as_read(self, item_id: int, read: bool) -> FeedItem:
        with self.db.transaction() as conn:
            conn.execute(
                "UPDATE items SET unread = ? WHERE id = ?", (not read, item_id)
            )
            sql, params = select_items(
                WhereClause().add("id = ?", item_id), order_by=None, limit=1
            )
            row = conn.execute(sql, params).fetchone()
            if row is None:
                raise RecordNotFoundError(f"Unable to get updated FeedItem {item_id}")
            return row_to_feed_item(row)
