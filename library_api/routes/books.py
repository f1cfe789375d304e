"""
Book routes. Writes always require a logged-in session.
"""

from fastapi import APIRouter

from library_api.models import BookCreate, BookUpdate
from library_api.routes.resources import create_resource_router


def create_books_router() -> APIRouter:
    return create_resource_router(
        collection_name="books",
        resource_name="Book",
        create_model=BookCreate,
        update_model=BookUpdate,
        protected=True,
    )
