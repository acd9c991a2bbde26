"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from infrastructure.database import ConnectionFailure
from infrastructure.database.dependencies import (
    close_database_connection,
    get_connection_cache,
)
from infrastructure.logging import configure_logging
from infrastructure.settings import get_settings
from infrastructure.version import __version__

settings = get_settings()
configure_logging(debug=settings.debug)


@asynccontextmanager
async def quickblog_lifespan(app: FastAPI):
    """Application lifespan context.

    The database connection is opened lazily by the first request that needs
    it and closed on shutdown.
    """
    yield

    await close_database_connection()


app = FastAPI(
    title=settings.app_name,
    description="Blog API backed by a cached MongoDB connection",
    version=__version__,
    lifespan=quickblog_lifespan,
)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


async def get_database_or_error() -> AsyncDatabase | ConnectionFailure:
    """Resolve the cached connection, returning the failure instead of raising."""
    try:
        return await get_connection_cache().get_connection()
    except ConnectionFailure as e:
        return e


@app.get("/health/db")
async def health_db(
    database: Annotated[
        AsyncDatabase | ConnectionFailure, Depends(get_database_or_error)
    ],
) -> dict:
    """Check database connection health.

    Returns the connection status and database name.
    """
    if isinstance(database, ConnectionFailure):
        return {"status": "error", "error": database.reason}

    try:
        await database.command("ping")
    except PyMongoError as e:
        return {"status": "error", "error": str(e)}

    return {"status": "ok", "database": database.name}
