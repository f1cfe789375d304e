"""
Router factory for document resources.

Books and authors share the same five routes; only the collection, the
validation models and the write protection differ.
"""

from typing import Any, Dict, List, Type

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from library_api.auth import require_auth
from library_api.database import ConnectionManager
from library_api.errors import LibraryAPIError
from library_api.models import (
    ErrorResponse, InsertedResponse, MessageResponse, PayloadModel, ValidationErrorResponse
)
from library_api.services import ResourceService
from library_api.validation import read_json_body, validate_payload

logger = structlog.get_logger(__name__)


def create_resource_router(
    collection_name: str,
    resource_name: str,
    create_model: Type[PayloadModel],
    update_model: Type[PayloadModel],
    protected: bool = False
) -> APIRouter:
    """
    Build the CRUD router for one collection.

    Args:
        collection_name: MongoDB collection and URL prefix (e.g. "books")
        resource_name: Singular display name (e.g. "Book")
        create_model: Rules applied on POST
        update_model: Rules applied on PUT
        protected: Require a logged-in session for POST, PUT and DELETE
    """
    router = APIRouter(prefix=f"/{collection_name}", tags=[collection_name.capitalize()])
    write_dependencies = [Depends(require_auth)] if protected else []
    label = resource_name.lower()

    async def get_service(request: Request) -> ResourceService:
        connection: ConnectionManager = request.app.state.connection
        await connection.connect()
        return ResourceService(connection.get_collection(collection_name), resource_name)

    @router.get("", response_model=List[Dict[str, Any]])
    async def list_documents(service: ResourceService = Depends(get_service)):
        """Get every document in the collection."""
        try:
            return await service.list_all()
        except Exception as e:
            logger.error("Failed to list documents", collection=collection_name, error=str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error"
            )

    @router.get(
        "/{document_id}",
        response_model=Dict[str, Any],
        responses={404: {"model": ErrorResponse}},
    )
    async def get_document(document_id: str, service: ResourceService = Depends(get_service)):
        """Get a single document by its identifier."""
        try:
            return await service.get_by_id(document_id)
        except LibraryAPIError:
            raise
        except Exception as e:
            logger.error("Failed to get document", collection=collection_name,
                         document_id=document_id, error=str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error"
            )

    @router.post(
        "",
        status_code=status.HTTP_201_CREATED,
        response_model=InsertedResponse,
        responses={400: {"model": ValidationErrorResponse}, 401: {"model": ErrorResponse}},
        dependencies=write_dependencies,
    )
    async def create_document(
        payload: Dict[str, Any] = Depends(read_json_body),
        service: ResourceService = Depends(get_service)
    ):
        """Validate and insert a new document."""
        validate_payload(create_model, payload)
        try:
            inserted_id = await service.create(payload)
        except Exception as e:
            logger.error("Failed to create document", collection=collection_name, error=str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to create {label}"
            )
        return InsertedResponse(insertedId=inserted_id)

    @router.put(
        "/{document_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses={400: {"model": ValidationErrorResponse}, 401: {"model": ErrorResponse},
                   404: {"model": ErrorResponse}},
        dependencies=write_dependencies,
    )
    async def update_document(
        document_id: str,
        payload: Dict[str, Any] = Depends(read_json_body),
        service: ResourceService = Depends(get_service)
    ):
        """Merge the body into an existing document."""
        validate_payload(update_model, payload)
        try:
            await service.update(document_id, payload)
        except LibraryAPIError:
            raise
        except Exception as e:
            logger.error("Failed to update document", collection=collection_name,
                         document_id=document_id, error=str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to update {label}"
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.delete(
        "/{document_id}",
        response_model=MessageResponse,
        responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
        dependencies=write_dependencies,
    )
    async def delete_document(document_id: str, service: ResourceService = Depends(get_service)):
        """Delete a document by its identifier."""
        try:
            await service.delete(document_id)
        except LibraryAPIError:
            raise
        except Exception as e:
            logger.error("Failed to delete document", collection=collection_name,
                         document_id=document_id, error=str(e))
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to delete {label}"
            )
        return MessageResponse(message=f"{resource_name} deleted successfully")

    return router
