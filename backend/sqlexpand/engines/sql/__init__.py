"""
Placeholder expansion, execution, lazy results and transactions over DB-API connections.

Exports: flatten, execute, QueryResult, run_in_transaction.
"""

from sqlexpand.engines.sql.executor import execute, render
from sqlexpand.engines.sql.flatten import FlattenResult, flatten
from sqlexpand.engines.sql.result import QueryResult
from sqlexpand.engines.sql.transaction import run_in_transaction

__all__ = [
    "FlattenResult",
    "QueryResult",
    "execute",
    "flatten",
    "render",
    "run_in_transaction",
]
