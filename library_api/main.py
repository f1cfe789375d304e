"""
FastAPI main application for the Library API.
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.middleware.sessions import SessionMiddleware

from library_api.auth import create_oauth
from library_api.config import Settings, get_settings
from library_api.database import ConnectionManager
from library_api.errors import register_error_handlers
from library_api.logger import setup_logging
from library_api.models import HealthResponse
from library_api.routes import auth as auth_routes
from library_api.routes.authors import create_authors_router
from library_api.routes.books import create_books_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    connection: ConnectionManager = app.state.connection

    setup_logging(
        settings.log_level,
        settings.log_format,
        log_file=settings.log_file,
        debug=settings.debug,
    )
    logger.info("Starting Library API", version=settings.api_version)

    try:
        await connection.connect()
        await connection.ping()
        logger.info("Database connection established", database=settings.mongodb_database)
    except Exception as e:
        logger.error("Failed to connect to database", error=str(e))
        raise

    yield

    logger.info("Shutting down Library API")
    await connection.disconnect()


def create_app(
    settings: Optional[Settings] = None,
    connection: Optional[ConnectionManager] = None
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Configuration; read from the environment when omitted
        connection: Database connection manager; built from settings when omitted

    Raises:
        ConfigurationError: If required settings are missing
    """
    settings = settings or get_settings()
    connection = connection or ConnectionManager(settings.mongodb_uri, settings.mongodb_database)

    app = FastAPI(
        title=settings.api_title,
        description=settings.api_description,
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.connection = connection
    app.state.oauth = create_oauth(settings)

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app, debug=settings.debug)

    app.include_router(auth_routes.router)
    app.include_router(create_books_router())
    app.include_router(create_authors_router(protected=settings.protect_author_writes))

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def home():
        return "Welcome to the Library API"

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        try:
            await connection.connect()
            await connection.ping()
            db_status = "healthy"
        except Exception as e:
            logger.error("Health check failed", error=str(e))
            db_status = "unhealthy"

        return HealthResponse(
            status="healthy" if db_status == "healthy" else "degraded",
            timestamp=datetime.now(timezone.utc),
            version=settings.api_version,
            database_status=db_status
        )

    return app
