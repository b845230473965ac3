"""
Execute a placeholder template against a DB-API connection.

``execute(conn, "SELECT * FROM t WHERE id IN (?) AND x = ?", [1, 2, 3], 5)``
flattens the arguments, splices the fragments into the template, runs the
statement with the flattened bind values and returns a QueryResult.

Argument problems raise MalformedArguments before the connection is touched.
Driver errors propagate unchanged.
"""

import logging
from typing import Any

from .flatten import flatten
from .result import QueryResult
from .template import substitute

_log = logging.getLogger(__name__)

# DB-API paramstyle -> (bind marker, template needs "%" escaping)
_PARAMSTYLES: dict[str, tuple[str, bool]] = {
    "qmark": ("?", False),
    "format": ("%s", True),
    "pyformat": ("%s", True),
}


def render(
    sql: str,
    values: Any,
    *,
    paramstyle: str = "qmark",
    quote: str = "`",
) -> tuple[str, tuple[Any, ...]]:
    """Return (final SQL, bind values) for sql and its positional arguments."""
    try:
        marker, escape_percent = _PARAMSTYLES[paramstyle]
    except KeyError:
        raise ValueError(f"Unsupported paramstyle: {paramstyle}") from None
    fragments, bind_values = flatten(values, marker=marker, quote=quote)
    final_sql = substitute(sql, fragments, escape_percent=escape_percent)
    return final_sql, tuple(bind_values)


def execute(
    conn: Any,
    sql: str,
    *values: Any,
    paramstyle: str = "qmark",
    quote: str = "`",
) -> QueryResult:
    """
    Run sql with values against conn and wrap the cursor in a QueryResult.

    - paramstyle: DB-API paramstyle of the driver behind conn (qmark, format, pyformat).
    - quote: identifier quote for dict keys (` for MySQL/SQLite, " for PostgreSQL).
    """
    final_sql, bind_values = render(sql, values, paramstyle=paramstyle, quote=quote)
    _log.debug("execute: %s (%d bind values)", final_sql, len(bind_values))

    cur = conn.cursor()
    try:
        cur.execute(final_sql, bind_values)
    except Exception:
        try:
            cur.close()
        except Exception as e:
            _log.warning("execute: cursor close after failure: %s", e)
        raise
    return QueryResult(cur, final_sql)
