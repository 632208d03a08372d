"""
Item Query Builder
==================

Composes parameterized SELECT statements over the ``items`` table from an
ordered list of optional predicates. Values are always bound as parameters,
never interpolated into the SQL text.
"""

from typing import Any, Iterable, List, Optional, Sequence, Tuple

from ..database.models import ITEM_COLUMNS

SELECT_COLUMNS = ", ".join(ITEM_COLUMNS)


class WhereClause:
    """Ordered conjunction of predicates with their bound parameters."""

    def __init__(self):
        self._predicates: List[Tuple[str, Tuple[Any, ...]]] = []

    def add(self, predicate: str, *params: Any) -> "WhereClause":
        """Append a predicate unconditionally."""
        self._predicates.append((predicate, params))
        return self

    def add_if(self, condition: bool, predicate: str, *params: Any) -> "WhereClause":
        """Append a predicate only when ``condition`` holds."""
        if condition:
            self.add(predicate, *params)
        return self

    @property
    def sql(self) -> str:
        if not self._predicates:
            return ""
        return " WHERE " + " AND ".join(predicate for predicate, _ in self._predicates)

    @property
    def params(self) -> Tuple[Any, ...]:
        return tuple(param for _, params in self._predicates for param in params)

    def __len__(self) -> int:
        return len(self._predicates)


def in_clause(column: str, values: Sequence[Any]) -> Tuple[str, Tuple[Any, ...]]:
    """Build a ``column IN (?, ...)`` predicate for the given values.

    Raises:
        ValueError: If ``values`` is empty
    """
    if not values:
        raise ValueError(f"IN clause on {column} needs at least one value")
    placeholders = ", ".join("?" for _ in values)
    return f"{column} IN ({placeholders})", tuple(values)


def select_items(
    where: Optional[WhereClause] = None,
    order_by: Optional[str] = "publish_time DESC",
    limit: Optional[int] = None,
) -> Tuple[str, Tuple[Any, ...]]:
    """Build a SELECT over all item columns.

    Args:
        where: Predicates to apply (none means every row)
        order_by: ORDER BY expression, or None for no ordering
        limit: Maximum row count, bound as a parameter

    Returns:
        Tuple of (sql, params)
    """
    where = where or WhereClause()
    sql = f"SELECT {SELECT_COLUMNS} FROM items{where.sql}"
    params: Iterable[Any] = where.params

    if order_by:
        sql += f" ORDER BY {order_by}"

    if limit is not None:
        sql += " LIMIT ?"
        params = (*params, limit)

    return sql, tuple(params)
