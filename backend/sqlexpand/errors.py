"""
Errors raised by sqlexpand itself.

Driver errors (syntax, constraint, connectivity) are never wrapped: they reach
the caller as the driver's own DB-API exceptions. Errors raised inside a
transaction's unit of work are likewise re-raised unchanged after rollback.
"""


class SqlExpandError(Exception):
    """Base class for diagnostics produced by this layer."""

    pass


class MalformedArguments(SqlExpandError, ValueError):
    """Raised before any I/O when call arguments cannot be flattened or
    do not line up with the placeholders of the SQL template."""

    pass


class ImmutableResultViolation(SqlExpandError, TypeError):
    """Raised on item assignment or deletion against a QueryResult."""

    pass
