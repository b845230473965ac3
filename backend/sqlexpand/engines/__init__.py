"""
Engines: SQL placeholder expansion and execution.
"""

from sqlexpand.engines.sql import QueryResult, execute, flatten, run_in_transaction

__all__ = [
    "QueryResult",
    "execute",
    "flatten",
    "run_in_transaction",
]
