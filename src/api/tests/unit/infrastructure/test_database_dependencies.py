"""Unit tests for the process-wide database connection."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from infrastructure.database import dependencies
from infrastructure.database.cache import ConnectionCache
from infrastructure.database.dependencies import (
    close_database_connection,
    get_connection,
    get_connection_cache,
)


@pytest.fixture(autouse=True)
def fresh_connection_cache(monkeypatch):
    """Start every test without a process-wide cache."""
    monkeypatch.setattr(dependencies, "_connection_cache", None)


def test_get_connection_cache_returns_cache():
    """Should build a ConnectionCache on first use."""
    cache = get_connection_cache()

    assert isinstance(cache, ConnectionCache)
    assert cache.connection is None


def test_connection_cache_is_singleton():
    """Repeated calls should return the same cache."""
    assert get_connection_cache() is get_connection_cache()


@pytest.mark.asyncio
async def test_get_connection_delegates_to_cache():
    """get_connection should return the cached handle."""
    db = MagicMock(name="db")
    cache = get_connection_cache()

    with patch.object(cache, "get_connection", AsyncMock(return_value=db)) as get:
        result = await get_connection()

    assert result is db
    get.assert_awaited_once()


@pytest.mark.asyncio
async def test_close_database_connection_resets_cache():
    """After closing, a new cache should be created."""
    cache = get_connection_cache()

    with patch.object(cache, "close", AsyncMock()) as close:
        await close_database_connection()

    close.assert_awaited_once()
    assert get_connection_cache() is not cache


@pytest.mark.asyncio
async def test_close_without_cache_is_noop():
    """Closing before first use should not create a cache."""
    await close_database_connection()

    assert dependencies._connection_cache is None
