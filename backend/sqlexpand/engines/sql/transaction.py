"""
Run a unit of work atomically: begin, then commit on success or rollback on failure.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

_log = logging.getLogger(__name__)

T = TypeVar("T")
C = TypeVar("C")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a unit of work: value on success, error on failure."""

    value: T | None
    error: BaseException | None

    @property
    def ok(self) -> bool:
        return self.error is None


def capture(work: Callable[[C], T], conn: C) -> Outcome[T]:
    """Call work(conn) and return its outcome instead of raising."""
    try:
        return Outcome(work(conn), None)
    except BaseException as e:
        return Outcome(None, e)


def _default_begin(conn: Any) -> None:
    begin = getattr(conn, "begin", None)
    if callable(begin):
        begin()


def run_in_transaction(
    conn: C,
    work: Callable[[C], T],
    *,
    begin: Callable[[C], None] | None = None,
) -> T:
    """
    Begin a transaction on conn, run work(conn), commit and return its value.

    If work raises, the transaction is rolled back and the original exception
    is re-raised unchanged. Errors from commit itself propagate as-is.

    begin: how to open the transaction; defaults to conn.begin() when the
    connection has one (pymysql), else relies on DB-API implicit transactions.
    """
    (begin or _default_begin)(conn)
    _log.debug("transaction: begin")

    outcome = capture(work, conn)
    if not outcome.ok:
        _log.debug("transaction: rollback (%s)", type(outcome.error).__name__)
        conn.rollback()
        raise outcome.error

    conn.commit()
    _log.debug("transaction: commit")
    return outcome.value
