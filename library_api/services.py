"""
Database service layer for the resource routes.
"""

from typing import Any, Dict, List

import structlog
from motor.motor_asyncio import AsyncIOMotorCollection

from library_api.database import parse_object_id, serialize_document
from library_api.errors import DocumentNotFoundError

logger = structlog.get_logger(__name__)


class ResourceService:
    """CRUD operations over one collection; each method issues a single database call."""

    def __init__(self, collection: AsyncIOMotorCollection, resource_name: str):
        """
        Args:
            collection: Collection holding the resource documents
            resource_name: Singular display name used in error messages (e.g. "Book")
        """
        self.collection = collection
        self.resource_name = resource_name

    async def list_all(self) -> List[Dict[str, Any]]:
        """Return every document in natural order."""
        try:
            cursor = self.collection.find()
            documents = await cursor.to_list(length=None)
            return [serialize_document(doc) for doc in documents]
        except Exception as e:
            logger.error("Failed to list documents", collection=self.collection.name, error=str(e))
            raise

    async def get_by_id(self, document_id: str) -> Dict[str, Any]:
        """
        Get a single document by ID.

        Raises:
            InvalidIdentifierError: If the ID is malformed
            DocumentNotFoundError: If no document has that ID
        """
        object_id = parse_object_id(document_id)
        try:
            document = await self.collection.find_one({"_id": object_id})
        except Exception as e:
            logger.error("Failed to get document", collection=self.collection.name,
                         document_id=document_id, error=str(e))
            raise

        if document is None:
            raise DocumentNotFoundError(self.resource_name, document_id)
        return serialize_document(document)

    async def create(self, payload: Dict[str, Any]) -> str:
        """
        Insert a new document.

        Args:
            payload: Validated request body, stored as sent

        Returns:
            The generated identifier as a string
        """
        # Identity is always assigned by the database
        document = {key: value for key, value in payload.items() if key != "_id"}
        try:
            result = await self.collection.insert_one(document)
        except Exception as e:
            logger.error("Failed to insert document", collection=self.collection.name, error=str(e))
            raise

        inserted_id = str(result.inserted_id)
        logger.info("Document created", collection=self.collection.name, document_id=inserted_id)
        return inserted_id

    async def update(self, document_id: str, payload: Dict[str, Any]) -> None:
        """
        Merge the payload into an existing document; absent fields stay untouched.

        Raises:
            InvalidIdentifierError: If the ID is malformed
            DocumentNotFoundError: If no document has that ID
        """
        object_id = parse_object_id(document_id)
        changes = {key: value for key, value in payload.items() if key != "_id"}

        try:
            if changes:
                result = await self.collection.update_one({"_id": object_id}, {"$set": changes})
                matched = result.matched_count
            else:
                # "$set" rejects an empty document, so only confirm the target exists
                matched = await self.collection.count_documents({"_id": object_id}, limit=1)
        except Exception as e:
            logger.error("Failed to update document", collection=self.collection.name,
                         document_id=document_id, error=str(e))
            raise

        if matched == 0:
            raise DocumentNotFoundError(self.resource_name, document_id)
        logger.info("Document updated", collection=self.collection.name,
                    document_id=document_id, fields=sorted(changes))

    async def delete(self, document_id: str) -> None:
        """
        Delete a document by ID.

        Raises:
            InvalidIdentifierError: If the ID is malformed
            DocumentNotFoundError: If no document has that ID
        """
        object_id = parse_object_id(document_id)
        try:
            result = await self.collection.delete_one({"_id": object_id})
        except Exception as e:
            logger.error("Failed to delete document", collection=self.collection.name,
                         document_id=document_id, error=str(e))
            raise

        if result.deleted_count == 0:
            raise DocumentNotFoundError(self.resource_name, document_id)
        logger.info("Document deleted", collection=self.collection.name, document_id=document_id)
