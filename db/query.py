"""
db/query.py
-----------
Small composable SELECT builder on top of ``psycopg2.sql``.

Optional clauses (WHERE / GROUP BY / ORDER BY / LIMIT) are appended as
``sql.SQL`` fragments; every value travels as a ``%s`` parameter.
"""

from typing import Any

from psycopg2 import sql

_DIRECTIONS = {
    False: sql.SQL("ASC"),
    True: sql.SQL("DESC"),
}


class SelectQuery:
    """
    Builder for a SELECT statement with optional trailing clauses.

    Usage:
        query, params = (
            SelectQuery(BASE)
            .where("a.name > %s", "Bob")
            .group_by("a.name", "a.id")
            .order_by("a.name", descending=False)
            .limit(10)
            .build()
        )
        cur.execute(query, params)
    """

    def __init__(self, base: str):
        self._base = sql.SQL(base.strip())
        self._conditions: list[sql.Composable] = []
        self._params: list[Any] = []
        self._group_by: list[sql.Composable] = []
        self._order_by: list[sql.Composable] = []
        self._limit: int = 0

    def where(self, condition: str, *params: Any) -> "SelectQuery":
        """Add a condition (ANDed with the others) and its bound values."""
        self._conditions.append(sql.SQL(condition))
        self._params.extend(params)
        return self

    def group_by(self, *columns: str) -> "SelectQuery":
        self._group_by.extend(sql.SQL(c) for c in columns)
        return self

    def order_by(self, column: str, descending: bool = False) -> "SelectQuery":
        self._order_by.append(
            sql.SQL("{} {}").format(sql.SQL(column), _DIRECTIONS[bool(descending)])
        )
        return self

    def limit(self, count: int) -> "SelectQuery":
        """Cap the row count; zero or negative means no LIMIT clause."""
        self._limit = count if count and count > 0 else 0
        return self

    def build(self) -> tuple[sql.Composed, list[Any]]:
        """Return the composed statement and its parameters in placeholder order."""
        parts: list[sql.Composable] = [self._base]
        params = list(self._params)

        if self._conditions:
            parts.append(sql.SQL("WHERE {}").format(sql.SQL(" AND ").join(self._conditions)))
        if self._group_by:
            parts.append(sql.SQL("GROUP BY {}").format(sql.SQL(", ").join(self._group_by)))
        if self._order_by:
            parts.append(sql.SQL("ORDER BY {}").format(sql.SQL(", ").join(self._order_by)))
        if self._limit:
            parts.append(sql.SQL("LIMIT {}").format(sql.Placeholder()))
            params.append(self._limit)

        return sql.SQL(" ").join(parts), params
