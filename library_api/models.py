"""
API models and schemas for the FastAPI application.

Create models enforce every rule; update models apply the same rules only to
fields present in the body. Fields outside the models are stored as sent.
"""

from datetime import datetime
from typing import ClassVar, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, validator


def _reject_bool(value):
    """JSON true/false must not pass as 1/0."""
    if isinstance(value, bool):
        raise ValueError("booleans are not numbers")
    return value


def _check_iso8601(value: str) -> str:
    """Accept ISO-8601 dates and datetimes, including a trailing 'Z'."""
    datetime.fromisoformat(value.replace('Z', '+00:00'))
    return value


class PayloadModel(BaseModel):
    """Base model for request bodies; unknown fields pass through untouched."""

    model_config = ConfigDict(extra="allow")

    # Client-facing message per field, reported whatever rule the field failed
    messages: ClassVar[Dict[str, str]] = {}


class BookCreate(PayloadModel):
    """Rules for a new book."""
    title: str = Field(..., min_length=1, description="Book title")
    author: str = Field(..., min_length=1, description="Author name")
    price: float = Field(..., allow_inf_nan=False, description="Book price")
    genre: str = Field(..., min_length=1, description="Book genre")
    publishDate: str = Field(..., description="Publication date (ISO-8601)")
    ISBN: str = Field(..., min_length=1, description="ISBN")
    pages: int = Field(..., ge=1, description="Number of pages")

    messages: ClassVar[Dict[str, str]] = {
        "title": "Title is required",
        "author": "Author is required",
        "price": "Price must be a number",
        "genre": "Genre is required",
        "publishDate": "Publish date must be valid",
        "ISBN": "ISBN is required",
        "pages": "Pages must be a positive number",
    }

    @validator('price', 'pages', pre=True)
    def validate_numeric(cls, v):
        return _reject_bool(v)

    @validator('publishDate')
    def validate_publish_date(cls, v):
        return _check_iso8601(v)


class BookUpdate(PayloadModel):
    """Rules for a partial book update.

    Defaults are not validated, so an absent field skips its rule while an
    explicit null still fails it.
    """
    title: str = Field(None, min_length=1)
    author: str = Field(None, min_length=1)
    price: float = Field(None, allow_inf_nan=False)
    genre: str = Field(None, min_length=1)
    publishDate: str = Field(None)
    ISBN: str = Field(None, min_length=1)
    pages: int = Field(None, ge=1)

    messages: ClassVar[Dict[str, str]] = BookCreate.messages

    @validator('price', 'pages', pre=True)
    def validate_numeric(cls, v):
        return _reject_bool(v)

    @validator('publishDate')
    def validate_publish_date(cls, v):
        return _check_iso8601(v)


class AuthorCreate(PayloadModel):
    """Rules for a new author."""
    name: str = Field(..., min_length=1, description="Author name")
    email: EmailStr = Field(..., description="Contact email")
    birthDate: str = Field(..., description="Birth date (ISO-8601)")

    messages: ClassVar[Dict[str, str]] = {
        "name": "Name is required",
        "email": "Email must be valid",
        "birthDate": "Birth date must be valid",
    }

    @validator('birthDate')
    def validate_birth_date(cls, v):
        return _check_iso8601(v)


class AuthorUpdate(PayloadModel):
    """Rules for a partial author update."""
    name: str = Field(None, min_length=1)
    email: EmailStr = Field(None)
    birthDate: str = Field(None)

    messages: ClassVar[Dict[str, str]] = AuthorCreate.messages

    @validator('birthDate')
    def validate_birth_date(cls, v):
        return _check_iso8601(v)


class FieldError(BaseModel):
    """A single failed field rule."""
    field: str = Field(..., description="Name of the offending field")
    message: str = Field(..., description="Human-readable message")


class ValidationErrorResponse(BaseModel):
    """Response body for a rejected payload."""
    errors: List[FieldError] = Field(..., description="One entry per failed rule")


class InsertedResponse(BaseModel):
    """Response body for a created document."""
    insertedId: str = Field(..., description="Identifier assigned by the database")


class MessageResponse(BaseModel):
    """Confirmation message."""
    message: str


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")


class Principal(BaseModel):
    """The GitHub identity attached to a browser session."""
    id: str = Field(..., description="GitHub user id")
    login: str = Field(..., description="GitHub username")
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Primary email, when shared")
    avatar_url: Optional[str] = Field(None, description="Avatar image URL")
    profile_url: Optional[str] = Field(None, description="Public profile URL")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
