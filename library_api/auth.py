"""
Session authentication and GitHub OAuth client for the FastAPI API.
"""

from typing import Any, Dict, Optional

import structlog
from authlib.integrations.starlette_client import OAuth
from fastapi import Depends, Request

from library_api.config import Settings
from library_api.errors import AuthenticationRequired
from library_api.models import Principal

logger = structlog.get_logger(__name__)

# Session key holding the logged-in principal
SESSION_USER_KEY = "user"

GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_ACCESS_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_API_BASE_URL = "https://api.github.com/"


def create_oauth(settings: Settings) -> OAuth:
    """Register the GitHub client with the configured credentials."""
    oauth = OAuth()
    oauth.register(
        name="github",
        client_id=settings.github_client_id,
        client_secret=settings.github_client_secret,
        authorize_url=GITHUB_AUTHORIZE_URL,
        access_token_url=GITHUB_ACCESS_TOKEN_URL,
        api_base_url=GITHUB_API_BASE_URL,
        client_kwargs={"scope": settings.github_scope},
    )
    return oauth


def principal_from_profile(profile: Dict[str, Any], email: Optional[str] = None) -> Principal:
    """
    Keep only the identity fields needed by the API from a GitHub profile.

    Args:
        profile: Body of GET /user
        email: Primary email looked up separately when the profile hides it
    """
    return Principal(
        id=str(profile["id"]),
        login=profile["login"],
        name=profile.get("name"),
        email=profile.get("email") or email,
        avatar_url=profile.get("avatar_url"),
        profile_url=profile.get("html_url"),
    )


def login(request: Request, principal: Principal) -> None:
    request.session[SESSION_USER_KEY] = principal.model_dump()


def logout(request: Request) -> None:
    request.session.pop(SESSION_USER_KEY, None)


async def get_current_principal(request: Request) -> Optional[Principal]:
    """Return the principal stored in the session, if any."""
    data = request.session.get(SESSION_USER_KEY)
    if not data:
        return None
    return Principal(**data)


async def require_auth(
    request: Request,
    principal: Optional[Principal] = Depends(get_current_principal)
) -> Principal:
    """
    Gate a route on a logged-in session.

    Raises:
        AuthenticationRequired: If no principal is attached to the session
    """
    if principal is None:
        logger.warning("Unauthenticated write attempted", method=request.method, path=request.url.path)
        raise AuthenticationRequired()
    return principal
