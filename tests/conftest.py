"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from library_api.auth import get_current_principal
from library_api.config import Settings
from library_api.database import ConnectionManager
from library_api.main import create_app
from library_api.models import Principal


@pytest.fixture
def settings():
    """Settings that never touch the real environment."""
    return Settings(
        _env_file=None,
        mongodb_uri="mongodb://localhost:27017",
        mongodb_database="library_test",
        session_secret="test-session-secret",
        github_client_id="test-client-id",
        github_client_secret="test-client-secret",
        github_callback_url="http://testserver/auth/github/callback",
    )


@pytest.fixture
def mongo_client():
    """In-memory MongoDB client."""
    return AsyncMongoMockClient()


@pytest.fixture
def connection(settings, mongo_client):
    """Connection manager wired to the in-memory client."""
    return ConnectionManager(
        settings.mongodb_uri,
        settings.mongodb_database,
        client_factory=lambda url: mongo_client,
    )


@pytest.fixture
def app(settings, connection):
    """Application under test."""
    return create_app(settings, connection)


@pytest.fixture
def client(app):
    """Anonymous test client."""
    return TestClient(app)


@pytest.fixture
def principal():
    """A logged-in GitHub user."""
    return Principal(
        id="583231",
        login="octocat",
        name="The Octocat",
        email="octocat@github.com",
        avatar_url="https://avatars.githubusercontent.com/u/583231",
        profile_url="https://github.com/octocat",
    )


@pytest.fixture
def auth_client(app, principal):
    """Test client whose requests carry a session principal."""
    app.dependency_overrides[get_current_principal] = lambda: principal
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_book():
    """A complete, valid book payload."""
    return {
        "title": "Dune",
        "author": "Frank Herbert",
        "genre": "Sci-Fi",
        "price": 15,
        "publishDate": "1965-08-01",
        "ISBN": "9780441013593",
        "pages": 412,
    }


@pytest.fixture
def sample_author():
    """A complete, valid author payload."""
    return {
        "name": "Ursula K. Le Guin",
        "email": "ursula@leguin.org",
        "birthDate": "1929-10-21",
    }
