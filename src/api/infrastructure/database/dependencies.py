"""Process-wide database connection for FastAPI and serverless handlers.

The cache is created once per process and reused by every invocation that
lands on it. ``close_database_connection`` is the explicit teardown hook.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from infrastructure.database.cache import ConnectionCache
from infrastructure.database.connection import MongoConnectionFactory
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_mongo_settings

if TYPE_CHECKING:
    from pymongo.asynchronous.database import AsyncDatabase

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Module-level cache instance (created on first use)
_connection_cache: ConnectionCache | None = None

# Thread lock for safe cache initialization
_cache_lock = threading.Lock()


def get_connection_cache() -> ConnectionCache:
    """Get the process-wide connection cache (singleton).

    Creates the cache on first call and reuses it afterwards.
    Uses double-check locking for thread-safe initialization.

    Returns:
        The shared ConnectionCache
    """
    global _connection_cache
    if _connection_cache is None:
        with _cache_lock:
            # Double-check after acquiring lock
            if _connection_cache is None:
                settings = get_mongo_settings()
                factory = MongoConnectionFactory(settings, probe=_probe)
                _connection_cache = ConnectionCache(factory, probe=_probe)
    return _connection_cache


async def get_connection() -> AsyncDatabase:
    """Provide the cached database connection (also a FastAPI dependency).

    Usage:
        @router.get("/posts")
        async def list_posts(
            db: AsyncDatabase = Depends(get_connection)
        ):
            return await db.posts.find().to_list()

    Raises:
        ConnectionFailure: If the connection cannot be established.
    """
    return await get_connection_cache().get_connection()


async def close_database_connection() -> None:
    """Close the process-wide connection.

    Should be called on application shutdown. Also drops the cache so the
    next call builds a fresh one.
    """
    global _connection_cache

    if _connection_cache is not None:
        await _connection_cache.close()
        _connection_cache = None
