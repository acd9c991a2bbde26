"""MongoDB connection establishment.

This module owns the single call into the driver: build an asyncio client,
make sure the server answers, and select the configured logical database.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from infrastructure.database.exceptions import ConnectionFailure
from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
)

if TYPE_CHECKING:
    from pymongo.asynchronous.database import AsyncDatabase

    from infrastructure.settings import MongoSettings


class MongoConnectionFactory:
    """Factory for establishing MongoDB connections.

    Each call to ``connect`` creates a new client. Callers that want a single
    shared connection go through ``ConnectionCache``.
    """

    def __init__(
        self,
        settings: MongoSettings,
        probe: ConnectionProbe | None = None,
    ):
        """Initialize the connection factory.

        Args:
            settings: MongoDB connection settings
            probe: Optional observability probe
        """
        self._settings = settings
        self._probe = probe or DefaultConnectionProbe()

    @property
    def hosts(self) -> str:
        return self._settings.hosts

    @property
    def database_name(self) -> str:
        return self._settings.db_name

    async def connect(self) -> AsyncDatabase:
        """Connect to MongoDB and return a handle on the logical database.

        Operations are never buffered behind a pending connection: the
        handle is returned only after the server has answered a ping.

        Returns:
            The configured database, bound to a connected client.

        Raises:
            ConnectionFailure: If the connection cannot be established.
        """
        client: AsyncMongoClient | None = None
        try:
            client = AsyncMongoClient(
                self._settings.uri.get_secret_value(),
                serverSelectionTimeoutMS=self._settings.server_selection_timeout_ms,
                appname=self._settings.app_name,
            )
            await client.admin.command("ping")
        except PyMongoError as e:
            if client is not None:
                await client.close()
            self._probe.connection_failed(
                hosts=self._settings.hosts,
                database=self._settings.db_name,
                error=e,
            )
            raise ConnectionFailure(
                f"Failed to connect to database: {e}", reason=str(e)
            ) from e
        except BaseException:
            # Cancelled mid-connect: the half-built client still owns monitors
            if client is not None:
                await client.close()
            raise

        self._probe.connection_established(
            hosts=self._settings.hosts,
            database=self._settings.db_name,
        )
        return client[self._settings.db_name]
