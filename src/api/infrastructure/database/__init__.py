"""Database infrastructure - cached MongoDB connection primitives."""

from infrastructure.database.exceptions import (
    ConnectionFailure,
    DatabaseError,
)

__all__ = [
    "ConnectionFailure",
    "DatabaseError",
]
