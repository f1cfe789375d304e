"""
Error taxonomy and global exception handlers for the Library API.

Configuration errors are fatal at startup. Every other error is recovered at
the HTTP boundary and translated into a JSON body with a matching status code.
"""

from typing import Any, Dict, List, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


class LibraryAPIError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message}


class ConfigurationError(LibraryAPIError):
    """A required setting is missing; raised at startup and never recovered."""


class DatabaseNotConnectedError(ConfigurationError):
    """A collection was requested before the connection was established."""


class PayloadValidationError(LibraryAPIError):
    """One or more field rules failed for a request body."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__("Validation failed")
        self.errors = errors

    def to_response(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class InvalidIdentifierError(LibraryAPIError):
    """The path identifier is not a well-formed ObjectId."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, identifier: str):
        super().__init__("Invalid identifier")
        self.identifier = identifier


class DocumentNotFoundError(LibraryAPIError):
    """No document matched the identifier."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, identifier: Optional[str] = None):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.identifier = identifier


class AuthenticationRequired(LibraryAPIError):
    """A gated route was called without a session principal."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized. Please log in."):
        super().__init__(message)


def register_error_handlers(app: FastAPI, debug: bool = False) -> None:
    """Register all global error handlers on the FastAPI app."""

    @app.exception_handler(LibraryAPIError)
    async def library_error_handler(request: Request, exc: LibraryAPIError):
        """Handle domain errors raised by routes and dependencies."""
        logger.info(
            "Request rejected",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Handle request parsing errors raised by FastAPI itself."""
        logger.warning("Malformed request", path=request.url.path, errors=exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "errors": [
                    {
                        "field": ".".join(str(loc) for loc in error["loc"]),
                        "message": error["msg"],
                    }
                    for error in exc.errors()
                ]
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Catch-all; only debug mode exposes the underlying error."""
        logger.error("Unhandled exception", error=str(exc), path=request.url.path)
        content: Dict[str, Any] = {"error": "Internal server error"}
        if debug:
            content["detail"] = str(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=content,
        )
