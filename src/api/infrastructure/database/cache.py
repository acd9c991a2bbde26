"""Process-wide cached database connection.

Short-lived execution environments (serverless invocations, worker restarts)
call into the same process many times. ``ConnectionCache`` makes sure the
connection is established once and shared, while a failed attempt can be
retried by the next caller.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Protocol

from infrastructure.database.exceptions import ConnectionFailure
from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
)

if TYPE_CHECKING:
    from pymongo.asynchronous.database import AsyncDatabase


class ConnectionFactory(Protocol):
    """Anything that can open a new database connection."""

    @property
    def hosts(self) -> str: ...

    @property
    def database_name(self) -> str: ...

    async def connect(self) -> AsyncDatabase: ...


class ConnectionCache:
    """Memoized, concurrency-safe connection initializer.

    Holds either the established connection or the single in-flight attempt.
    Callers arriving while an attempt is running await the same task, so at
    most one connect is in progress per cache. Both slots are only touched
    between awaits on a single event loop, so no asyncio lock is needed.

    Attributes:
        _factory: Opens new connections
        _connection: The established connection, if any
        _pending: The in-flight connection attempt, if any
        _probe: Observability probe for monitoring
    """

    def __init__(
        self,
        factory: ConnectionFactory,
        probe: ConnectionProbe | None = None,
    ):
        """Initialize an empty cache.

        Args:
            factory: Connection factory used for each attempt
            probe: Optional observability probe
        """
        self._factory = factory
        self._probe = probe or DefaultConnectionProbe()
        self._connection: AsyncDatabase | None = None
        self._pending: asyncio.Task[AsyncDatabase] | None = None

    @property
    def connection(self) -> AsyncDatabase | None:
        return self._connection

    @property
    def pending_attempt(self) -> asyncio.Task[AsyncDatabase] | None:
        return self._pending

    async def get_connection(self) -> AsyncDatabase:
        """Return the cached connection, connecting on first use.

        Returns:
            The shared database handle.

        Raises:
            ConnectionFailure: If the shared attempt failed. The attempt slot
                is cleared so the next call starts a new one.
        """
        if self._connection is not None:
            return self._connection

        if self._pending is None:
            self._probe.connection_attempt_started(
                hosts=self._factory.hosts,
                database=self._factory.database_name,
            )
            self._pending = asyncio.ensure_future(self._factory.connect())
            self._pending.add_done_callback(self._attempt_done)

        attempt = self._pending
        # Cancelling one waiter must not cancel the attempt for the others
        connection = await asyncio.shield(attempt)

        if self._pending is not attempt:
            # close() reset the cache and closed this client while we waited
            raise ConnectionFailure(
                "Connection was closed before it could be used",
                reason="connection closed",
            )
        self._connection = connection
        return connection

    def _attempt_done(self, attempt: asyncio.Task[AsyncDatabase]) -> None:
        """Clear the slot when an attempt fails, even if nobody awaits it."""
        if attempt.cancelled() or attempt.exception() is not None:
            if self._pending is attempt:
                self._pending = None

    async def close(self) -> None:
        """Close the cached connection and reset the cache.

        An in-flight attempt is cancelled. The next ``get_connection`` call
        connects again.
        """
        attempt, self._pending = self._pending, None
        connection, self._connection = self._connection, None

        if attempt is not None:
            if not attempt.done():
                attempt.cancel()
            elif (
                connection is None
                and not attempt.cancelled()
                and attempt.exception() is None
            ):
                # Resolved but no waiter has resumed to claim it yet
                connection = attempt.result()

        if connection is not None:
            await connection.client.close()
            self._probe.connection_closed()
