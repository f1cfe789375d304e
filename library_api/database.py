"""
MongoDB connection management for async operations.
Owns the single shared client and hands out collection handles.
"""

import asyncio
from typing import Any, Callable, Dict, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from library_api.errors import ConfigurationError, DatabaseNotConnectedError, InvalidIdentifierError

logger = structlog.get_logger(__name__)


class ConnectionManager:
    """
    Lazily connected MongoDB manager shared by every request.

    Constructed once per application and injected into handlers; the motor
    client pools connections so no per-request lifecycle is needed.
    """

    def __init__(
        self,
        connection_url: str,
        database_name: str,
        client_factory: Callable[[str], Any] = AsyncIOMotorClient
    ):
        """
        Initialize the connection manager.

        Args:
            connection_url: MongoDB connection URL
            database_name: Name of the database
            client_factory: Callable building a client from the URL

        Raises:
            ConfigurationError: If the connection URL is missing
        """
        if not connection_url:
            raise ConfigurationError("MONGODB_URI is not defined")

        self.connection_url = connection_url
        self.database_name = database_name
        self.client_factory = client_factory
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        return self.database is not None

    async def connect(self) -> AsyncIOMotorDatabase:
        """Establish the connection on first call and return the cached database handle."""
        if self.database is not None:
            return self.database

        async with self._lock:
            if self.database is None:
                self.client = self.client_factory(self.connection_url)
                self.database = self.client[self.database_name]
                logger.info("Connected to MongoDB", database=self.database_name)

        return self.database

    async def ping(self) -> None:
        """Round-trip to the server; raises the driver error if it is unreachable."""
        if self.client is None:
            raise DatabaseNotConnectedError("Database not connected. Call connect first.")
        await self.client.admin.command("ping")

    async def disconnect(self) -> None:
        """Close the client connection."""
        if self.client is not None:
            self.client.close()
            logger.info("Disconnected from MongoDB", database=self.database_name)
        self.client = None
        self.database = None

    def get_collection(self, name: str) -> AsyncIOMotorCollection:
        """
        Get a handle scoped to a named collection.

        Raises:
            DatabaseNotConnectedError: If connect() has not completed
        """
        if self.database is None:
            raise DatabaseNotConnectedError("Database not connected. Call connect first.")
        return self.database[name]


def parse_object_id(value: str) -> ObjectId:
    """
    Convert a path identifier into an ObjectId.

    Raises:
        InvalidIdentifierError: If the value is not a 24-character hex string
    """
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise InvalidIdentifierError(value)


def serialize_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """Make a stored document JSON-safe by converting every ObjectId to its hex string."""
    return {key: _serialize_value(value) for key, value in document.items()}


def _serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return serialize_document(value)
    if isinstance(value, list):
        return [_serialize_value(item) for item in value]
    return value
