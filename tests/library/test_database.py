"""
Unit tests for the connection manager and document helpers.
"""

from unittest.mock import MagicMock, Mock

import pytest
from bson import ObjectId

from library_api.database import ConnectionManager, parse_object_id, serialize_document
from library_api.errors import ConfigurationError, DatabaseNotConnectedError, InvalidIdentifierError


class TestConnectionManager:
    """Test cases for ConnectionManager."""

    @pytest.fixture
    def mock_client(self):
        return MagicMock()

    @pytest.fixture
    def client_factory(self, mock_client):
        return Mock(return_value=mock_client)

    @pytest.fixture
    def manager(self, client_factory):
        return ConnectionManager("mongodb://db:27017", "library", client_factory=client_factory)

    def test_missing_connection_url(self):
        """Test construction fails fast without a connection string."""
        with pytest.raises(ConfigurationError):
            ConnectionManager("", "library")

    def test_get_collection_before_connect(self, manager):
        """Test collections are unavailable until connect() completes."""
        assert not manager.is_connected
        with pytest.raises(DatabaseNotConnectedError):
            manager.get_collection("books")

    @pytest.mark.asyncio
    async def test_connect_is_idempotent(self, manager, client_factory, mock_client):
        """Test repeated connects reuse the first client."""
        first = await manager.connect()
        second = await manager.connect()

        assert first is second
        client_factory.assert_called_once_with("mongodb://db:27017")
        mock_client.__getitem__.assert_called_once_with("library")
        assert manager.get_collection("books") is first["books"]

    @pytest.mark.asyncio
    async def test_ping_before_connect(self, manager):
        """Test ping requires a connection."""
        with pytest.raises(DatabaseNotConnectedError):
            await manager.ping()

    @pytest.mark.asyncio
    async def test_disconnect(self, manager, mock_client):
        """Test disconnect closes the client and resets state."""
        await manager.connect()
        await manager.disconnect()

        mock_client.close.assert_called_once()
        assert not manager.is_connected
        with pytest.raises(DatabaseNotConnectedError):
            manager.get_collection("books")


class TestDocumentHelpers:
    """Test cases for identifier parsing and serialisation."""

    def test_parse_valid_id(self):
        object_id = ObjectId()
        assert parse_object_id(str(object_id)) == object_id

    @pytest.mark.parametrize("value", ["123", "zzzzzzzzzzzzzzzzzzzzzzzz", ""])
    def test_parse_invalid_id(self, value):
        with pytest.raises(InvalidIdentifierError):
            parse_object_id(value)

    def test_serialize_nested_ids(self):
        """Test ObjectIds are converted at any depth."""
        book_id, author_id, tag_id = ObjectId(), ObjectId(), ObjectId()
        document = {
            "_id": book_id,
            "title": "Dune",
            "author": {"_id": author_id, "name": "Frank Herbert"},
            "tags": [tag_id, "classic"],
        }

        assert serialize_document(document) == {
            "_id": str(book_id),
            "title": "Dune",
            "author": {"_id": str(author_id), "name": "Frank Herbert"},
            "tags": [str(tag_id), "classic"],
        }
