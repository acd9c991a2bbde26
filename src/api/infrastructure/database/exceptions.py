"""Database-specific exceptions."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class ConnectionFailure(DatabaseError):
    """Raised when a database connection attempt fails.

    The driver error is chained as ``__cause__``; ``reason`` keeps its message.
    """

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.reason = reason if reason is not None else message
