"""
QueryResult: lazy, read-only view over an executed DB-API cursor.

Rows are fetched on the first row-data access (indexing, iteration, all(),
first(), count(), value(), str()) and cached; the cursor is closed right after.
affected_rows and last_id are captured at construction, before any fetch,
and reading them never triggers the fetch.
"""

import logging
import pprint
from collections.abc import Iterator
from typing import Any

from sqlexpand.errors import ImmutableResultViolation, SqlExpandError

_log = logging.getLogger(__name__)

Row = dict[str, Any]


def cursor_to_dicts(cursor: Any) -> list[Row]:
    """Convert cursor result to list of dicts. Works for pymysql, psycopg and sqlite3."""
    desc = cursor.description
    if not desc:
        return []
    names = [d[0] for d in desc]
    return [dict(zip(names, row, strict=True)) for row in cursor.fetchall()]


def _indent(text: str, trim: bool = False, indent: str = "    ") -> str:
    lines = text.split("\n")
    if trim:
        lines = [line.strip() for line in lines]
        lines = [line for line in lines if line]
    return "\n".join(indent + line for line in lines)


class QueryResult:
    """Rows and metadata of one executed statement."""

    def __init__(self, cursor: Any, sql: str) -> None:
        self._cursor: Any = cursor
        self._sql = sql
        self._rows: list[Row] | None = None
        # Some drivers drop these once the result set has been consumed
        rowcount = getattr(cursor, "rowcount", None)
        self._affected_rows: int = rowcount if rowcount is not None else -1
        self._last_id: Any = getattr(cursor, "lastrowid", None)

    # ------------------------------------------------------------------
    # Metadata (never fetches)
    # ------------------------------------------------------------------

    @property
    def sql(self) -> str:
        return self._sql

    @property
    def affected_rows(self) -> int:
        return self._affected_rows

    @property
    def last_id(self) -> Any:
        return self._last_id

    @property
    def materialized(self) -> bool:
        return self._rows is not None

    # ------------------------------------------------------------------
    # Row views
    # ------------------------------------------------------------------

    def _fetch(self) -> list[Row]:
        if self._rows is None:
            if self._cursor is None:
                raise SqlExpandError("Result was closed before its rows were fetched")
            self._rows = cursor_to_dicts(self._cursor)
            self.close()
        return self._rows

    def all(self) -> list[Row]:
        """Every row, in order. Returns a new list each call."""
        return list(self._fetch())

    def first(self) -> Row | None:
        rows = self._fetch()
        return rows[0] if rows else None

    def count(self) -> int:
        return len(self._fetch())

    def value(self) -> Any:
        """First column of the first row; None when there is no row or no column."""
        row = self.first()
        if row:
            return next(iter(row.values()))
        return None

    def __len__(self) -> int:
        return self.count()

    def __bool__(self) -> bool:
        return self.count() > 0

    def __getitem__(self, index: int | slice) -> Any:
        return self._fetch()[index]

    def __setitem__(self, index: Any, value: Any) -> None:
        raise ImmutableResultViolation("Cannot overwrite result")

    def __delitem__(self, index: Any) -> None:
        raise ImmutableResultViolation("Cannot unset result")

    def __contains__(self, row: object) -> bool:
        return row in self._fetch()

    def __iter__(self) -> Iterator[Row]:
        rows = self._fetch()
        position = 0
        while position < len(rows):
            yield rows[position]
            position += 1

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        rows = self._fetch()
        query = _indent(self._sql, trim=True)
        first_result = _indent(pprint.pformat(self.first()))
        return (
            "\nQueryResult:\n----------------\n"
            f"Results        : {len(rows)}\n"
            f"Affected Rows  : {self._affected_rows}\n"
            f"Last Insert Id : {self._last_id}\n"
            f"Query          ->\n{query}\n"
            f"\nFirst Result   ->\n{first_result}\n"
        )

    def __repr__(self) -> str:
        rows = len(self._rows) if self._rows is not None else "?"
        return (
            f"<QueryResult rows={rows} affected_rows={self._affected_rows} "
            f"last_id={self._last_id!r}>"
        )

    # ------------------------------------------------------------------
    # Cursor ownership
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the cursor. Safe to call more than once."""
        cursor = getattr(self, "_cursor", None)
        self._cursor = None
        if cursor is None:
            return
        try:
            cursor.close()
        except Exception as e:
            _log.warning("QueryResult cursor close failed: %s", e)

    def __enter__(self) -> "QueryResult":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __del__(self) -> None:
        self.close()
