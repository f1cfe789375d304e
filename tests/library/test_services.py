"""
Unit tests for ResourceService against an in-memory collection.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from mongomock_motor import AsyncMongoMockClient

from library_api.errors import DocumentNotFoundError, InvalidIdentifierError
from library_api.services import ResourceService


@pytest.fixture
def collection():
    return AsyncMongoMockClient()["library"]["books"]


@pytest.fixture
def service(collection):
    return ResourceService(collection, "Book")


@pytest.mark.asyncio
async def test_create_stores_payload_as_sent(service, collection, sample_book):
    """Test insert keeps every field and leaves the caller's dict alone."""
    inserted_id = await service.create(sample_book)

    assert "_id" not in sample_book
    stored = await collection.find_one({"_id": ObjectId(inserted_id)})
    assert {key: stored[key] for key in sample_book} == sample_book


@pytest.mark.asyncio
async def test_create_ignores_client_id(service, collection, sample_book):
    """Test a client-supplied _id never becomes the document identity."""
    client_id = ObjectId()
    inserted_id = await service.create({**sample_book, "_id": client_id})

    assert inserted_id != str(client_id)
    assert await collection.find_one({"_id": client_id}) is None
    assert await collection.count_documents({}) == 1


@pytest.mark.asyncio
async def test_get_by_id(service, sample_book):
    inserted_id = await service.create(sample_book)

    document = await service.get_by_id(inserted_id)
    assert document["_id"] == inserted_id
    assert document["ISBN"] == "9780441013593"


@pytest.mark.asyncio
async def test_get_missing(service):
    with pytest.raises(DocumentNotFoundError) as exc_info:
        await service.get_by_id(str(ObjectId()))
    assert exc_info.value.to_response() == {"error": "Book not found"}


@pytest.mark.asyncio
async def test_malformed_id(service):
    """Test malformed identifiers are rejected on every addressed operation."""
    for operation in (service.get_by_id, service.delete):
        with pytest.raises(InvalidIdentifierError):
            await operation("42")
    with pytest.raises(InvalidIdentifierError):
        await service.update("42", {"title": "x"})


@pytest.mark.asyncio
async def test_update_is_merge(service, sample_book):
    inserted_id = await service.create(sample_book)

    await service.update(inserted_id, {"pages": 896})

    document = await service.get_by_id(inserted_id)
    assert document["pages"] == 896
    assert document["title"] == "Dune"


@pytest.mark.asyncio
async def test_update_empty_payload_skips_write():
    """Test an empty update only checks that the document exists."""
    collection = MagicMock()
    collection.name = "books"
    collection.count_documents = AsyncMock(return_value=1)
    collection.update_one = AsyncMock()
    service = ResourceService(collection, "Book")

    await service.update(str(ObjectId()), {})

    collection.update_one.assert_not_called()
    collection.count_documents.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_missing(service):
    with pytest.raises(DocumentNotFoundError):
        await service.update(str(ObjectId()), {"pages": 1})


@pytest.mark.asyncio
async def test_delete_twice(service, sample_book):
    inserted_id = await service.create(sample_book)

    await service.delete(inserted_id)
    with pytest.raises(DocumentNotFoundError):
        await service.delete(inserted_id)
    assert await service.list_all() == []


@pytest.mark.asyncio
async def test_driver_errors_propagate():
    """Test driver failures are re-raised for the route to translate."""
    collection = MagicMock()
    collection.name = "books"
    collection.insert_one = AsyncMock(side_effect=RuntimeError("not primary"))
    service = ResourceService(collection, "Book")

    with pytest.raises(RuntimeError):
        await service.create({"title": "Dune"})
