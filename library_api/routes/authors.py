"""
Author routes. Writes are open unless PROTECT_AUTHOR_WRITES is set.
"""

from fastapi import APIRouter

from library_api.models import AuthorCreate, AuthorUpdate
from library_api.routes.resources import create_resource_router


def create_authors_router(protected: bool = False) -> APIRouter:
    return create_resource_router(
        collection_name="authors",
        resource_name="Author",
        create_model=AuthorCreate,
        update_model=AuthorUpdate,
        protected=protected,
    )
