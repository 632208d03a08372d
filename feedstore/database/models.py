"""
FeedStore Data Models
====================

Pydantic models for feed items, plus the mapping from ``items`` table rows
to ``FeedItem`` values.
"""

from enum import Enum
from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic import ValidationError as PydanticValidationError

from ..utils.exceptions import RowMappingError


class FeedContentType(str, Enum):
    """Content categories used to filter item queries."""
    ANY = "any"
    ARTICLE = "article"
    NEWS = "news"
    VIDEO = "video"
    PRODUCT = "product"
    DEALS = "deals"


ContentTypeArg = Union[FeedContentType, str]


def content_type_value(content_type: ContentTypeArg) -> str:
    """Return the stored text for a content type argument."""
    if isinstance(content_type, FeedContentType):
        return content_type.value
    return str(content_type)


def is_any_content_type(content_type: ContentTypeArg) -> bool:
    return content_type_value(content_type) == FeedContentType.ANY.value


# Column order of the items table; SELECTs list these explicitly
ITEM_COLUMNS = (
    "id",
    "publish_time",
    "feed_source",
    "url",
    "domain",
    "img",
    "title",
    "description",
    "content_type",
    "publisher_id",
    "publisher_name",
    "publisher_logo",
    "session_displayed",
    "removed",
    "liked",
    "unread",
)


class FeedItem(BaseModel):
    """A single feed/article entry stored in the ``items`` table."""
    id: int = Field(..., description="Primary key assigned by the store")
    publish_time: int = Field(..., description="Publication time in milliseconds since epoch")
    feed_source: StrictStr
    url: StrictStr
    domain: StrictStr
    img: StrictStr = Field(default="", description="Image URL, empty when the item has none")
    title: StrictStr
    description: StrictStr
    content_type: StrictStr
    publisher_id: StrictStr
    publisher_name: StrictStr
    publisher_logo: StrictStr
    session_displayed: StrictStr = Field(default="", description="Last session the item was shown in")
    removed: bool = Field(default=False, description="Soft-delete flag")
    liked: bool = Field(default=False)
    unread: bool = Field(default=True)

    model_config = ConfigDict(frozen=True)

    @property
    def has_image(self) -> bool:
        return bool(self.img)

    def __str__(self) -> str:
        return f"FeedItem({self.id}:{self.title[:50]})"


def row_to_feed_item(row: Mapping[str, Any]) -> FeedItem:
    """Convert an ``items`` row to a FeedItem.

    Args:
        row: sqlite3.Row (or any mapping) holding the ITEM_COLUMNS

    Returns:
        FeedItem built from the row

    Raises:
        RowMappingError: If a column is missing or holds a value of the wrong type
    """
    try:
        data = {column: row[column] for column in ITEM_COLUMNS}
    except (IndexError, KeyError) as e:
        raise RowMappingError(f"Row is missing column: {e}") from e

    try:
        return FeedItem(**data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        column = str(first["loc"][0]) if first.get("loc") else None
        raise RowMappingError(
            f"Can't create FeedItem from row: {first['msg']}",
            column=column,
        ) from e
