"""
FeedStore Storage Layer
======================

Repository implementation for feed item access.

This module provides:
- FeedStore for item CRUD, paging and read/session state
- Parameterized query building for optional filters
"""

from .feed_store import FeedStore
from .query_builder import WhereClause, select_items

__all__ = [
    "FeedStore",
    "WhereClause",
    "select_items",
]
