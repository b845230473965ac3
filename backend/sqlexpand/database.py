"""
Database: a DB-API connection plus placeholder expansion.

    db = Database.connect({"product_type": "sqlite", "database": ":memory:"})
    db("UPDATE users SET ? WHERE id IN (?)", {"name": "x", "active": True}, [1, 2, 3])
    user = db("SELECT * FROM users WHERE id = ?", 1).first()

    def move(db):
        db("UPDATE acct SET balance = balance - ? WHERE id = ?", 10, 1)
        db("UPDATE acct SET balance = balance + ? WHERE id = ?", 10, 2)

    db.transaction(move)
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from sqlexpand.core.connect import (
    ProductTypeEnum,
    connect,
    identifier_quote_for,
    paramstyle_for,
)
from sqlexpand.engines.sql import QueryResult, execute, run_in_transaction

_log = logging.getLogger(__name__)

T = TypeVar("T")


class Database:
    """Wraps an open connection; calling it executes a placeholder template."""

    def __init__(self, conn: Any, product_type: ProductTypeEnum | str) -> None:
        self.conn = conn
        self.product_type = ProductTypeEnum(product_type)
        self._paramstyle = paramstyle_for(self.product_type)
        self._quote = identifier_quote_for(self.product_type)

    @classmethod
    def connect(cls, datasource: Any, *, product_type: ProductTypeEnum | str | None = None) -> "Database":
        """Open a connection from a DataSource or dict (see core.connect)."""
        conn = connect(datasource, product_type=product_type)
        pt = product_type or (
            datasource.get("product_type") if isinstance(datasource, dict) else datasource.product_type
        )
        return cls(conn, pt)

    @classmethod
    def from_settings(cls) -> "Database":
        """Open a connection from DB_* environment settings."""
        from sqlexpand.core.config import settings

        return cls.connect(settings.datasource)

    def execute(self, sql: str, *values: Any) -> QueryResult:
        """Run sql, expanding each ``?`` with the matching value; return a QueryResult."""
        return execute(
            self.conn,
            sql,
            *values,
            paramstyle=self._paramstyle,
            quote=self._quote,
        )

    __call__ = execute

    def begin(self) -> None:
        if self.product_type == ProductTypeEnum.MYSQL:
            self.conn.begin()
        else:
            # sqlite3 (isolation_level=None) and psycopg (autocommit=True) take a plain BEGIN
            self.conn.execute("BEGIN")

    def commit(self) -> None:
        self.conn.commit()

    def rollback(self) -> None:
        self.conn.rollback()

    def transaction(self, work: Callable[["Database"], T]) -> T:
        """Run work(self) inside begin/commit; rollback and re-raise if it fails."""
        return run_in_transaction(self, work)

    def close(self) -> None:
        try:
            self.conn.close()
        except Exception as e:
            _log.warning("Database close failed: %s", e)

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
