"""
sqlexpand: placeholder expansion, lazy results and transactions over DB-API clients.
"""

from sqlexpand.database import Database
from sqlexpand.engines.sql import FlattenResult, QueryResult, execute, flatten, run_in_transaction
from sqlexpand.errors import ImmutableResultViolation, MalformedArguments, SqlExpandError

__all__ = [
    "Database",
    "FlattenResult",
    "ImmutableResultViolation",
    "MalformedArguments",
    "QueryResult",
    "SqlExpandError",
    "execute",
    "flatten",
    "run_in_transaction",
]
