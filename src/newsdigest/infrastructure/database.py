"""MongoDB connection cache with lazy, single-flight initialization."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase

from newsdigest.config import get_settings

logger = logging.getLogger(__name__)


class DatabaseConfigError(RuntimeError):
    """Raised when the database connection string is not configured."""


class ConnectionCache:
    """Process-wide database handle, connected on first use.

    Concurrent callers that arrive while a connection attempt is in flight
    await that same attempt. A failed attempt is discarded so the next call
    starts a fresh one; a successful one is kept for the process lifetime.
    """

    def __init__(
        self,
        uri: str | None = None,
        db_name: str | None = None,
        client_factory: Callable[..., Any] | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            uri: MongoDB connection string (defaults to config)
            db_name: Database name (defaults to config)
            client_factory: Callable building the client (defaults to AsyncMongoClient)

        Raises:
            DatabaseConfigError: If no connection string is configured
        """
        settings = get_settings()
        self.uri = uri if uri is not None else settings.mongodb_uri
        if not self.uri:
            raise DatabaseConfigError(
                "MONGODB_URI is not set. Define it in the environment or .env"
            )
        self.db_name = db_name or settings.mongodb_db_name
        self.client_options = {
            "serverSelectionTimeoutMS": settings.mongodb_server_selection_timeout_ms,
            "socketTimeoutMS": settings.mongodb_socket_timeout_ms,
            "maxPoolSize": settings.mongodb_max_pool_size,
            "retryWrites": True,
            "w": "majority",
            "tz_aware": True,
        }
        self._client_factory = client_factory or AsyncMongoClient
        self._client: Any = None
        self._database: AsyncDatabase | None = None
        self._pending: asyncio.Task[AsyncDatabase] | None = None

    @property
    def is_connected(self) -> bool:
        """Whether a connection has been established."""
        return self._database is not None

    async def acquire(self) -> AsyncDatabase:
        """Return the shared database handle, connecting if needed."""
        if self._database is not None:
            return self._database

        if self._pending is None:
            self._pending = asyncio.create_task(self._connect())

        # Shielded so a cancelled caller does not abort the shared attempt
        return await asyncio.shield(self._pending)

    async def get_collection(self, name: str) -> AsyncCollection:
        """Return a collection from the shared database handle."""
        database = await self.acquire()
        return database[name]

    async def ping(self) -> None:
        """Round-trip to the server."""
        database = await self.acquire()
        await database.command("ping")

    async def close(self) -> None:
        """Close the underlying client, if one was opened."""
        if self._client is not None:
            await self._client.close()
        self._client = None
        self._database = None
        self._pending = None

    async def _connect(self) -> AsyncDatabase:
        client = self._client_factory(self.uri, **self.client_options)
        try:
            # The client connects lazily; ping forces server selection
            await client.admin.command("ping")
        except Exception as e:
            logger.error(f"MongoDB connection error: {e}")
            self._pending = None
            await client.close()
            raise

        self._client = client
        self._database = client[self.db_name]
        self._pending = None
        logger.info(f"Connected to MongoDB database '{self.db_name}'")
        return self._database
