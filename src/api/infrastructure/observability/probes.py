"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class ConnectionProbe(Protocol):
    """Domain probe for database connection observability.

    This probe captures domain-significant events related to database
    connections without exposing logging implementation details.
    """

    def connection_attempt_started(self, hosts: str, database: str) -> None:
        """Record that a new connection attempt was started."""
        ...

    def connection_established(self, hosts: str, database: str) -> None:
        """Record that a database connection was successfully established."""
        ...

    def connection_failed(self, hosts: str, database: str, error: Exception) -> None:
        """Record that a database connection attempt failed."""
        ...

    def connection_closed(self) -> None:
        """Record that a database connection was closed."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog.

    Request-scoped fields bound through ``structlog.contextvars`` are merged
    into every event by the configured processors.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def connection_attempt_started(self, hosts: str, database: str) -> None:
        self._logger.debug(
            "database_connection_attempt_started",
            hosts=hosts,
            database=database,
        )

    def connection_established(self, hosts: str, database: str) -> None:
        self._logger.info(
            "database_connection_established",
            hosts=hosts,
            database=database,
        )

    def connection_failed(self, hosts: str, database: str, error: Exception) -> None:
        self._logger.error(
            "database_connection_failed",
            hosts=hosts,
            database=database,
            error=str(error),
        )

    def connection_closed(self) -> None:
        self._logger.info("database_connection_closed")
