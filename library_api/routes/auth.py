"""
GitHub OAuth login, logout and current-user routes.
"""

from typing import Any, Dict, Optional

import httpx
import structlog
from authlib.integrations.starlette_client import OAuthError
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse

from library_api.auth import get_current_principal, login, logout, principal_from_profile
from library_api.errors import AuthenticationRequired
from library_api.models import ErrorResponse, Principal

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


async def _fetch_primary_email(github, token: Dict[str, Any]) -> Optional[str]:
    """Look up the verified primary address for users who keep their email private."""
    response = await github.get("user/emails", token=token)
    if response.status_code != status.HTTP_200_OK:
        return None
    for entry in response.json():
        if entry.get("primary") and entry.get("verified"):
            return entry.get("email")
    return None


@router.get("/github")
async def login_with_github(request: Request):
    """Redirect to GitHub to start the login handshake."""
    settings = request.app.state.settings
    github = request.app.state.oauth.github
    return await github.authorize_redirect(request, settings.github_callback_url)


@router.get("/github/callback")
async def github_callback(request: Request):
    """Finish the handshake and attach the GitHub identity to the session."""
    settings = request.app.state.settings
    github = request.app.state.oauth.github

    try:
        token = await github.authorize_access_token(request)
        response = await github.get("user", token=token)
        response.raise_for_status()
        profile = response.json()
        email = None
        if not profile.get("email"):
            email = await _fetch_primary_email(github, token)
    except (OAuthError, httpx.HTTPError) as e:
        logger.warning("GitHub login failed", error=str(e))
        return RedirectResponse(settings.failure_redirect, status_code=status.HTTP_302_FOUND)

    principal = principal_from_profile(profile, email)
    login(request, principal)
    logger.info("User logged in", login=principal.login, user_id=principal.id)

    return RedirectResponse(settings.login_redirect, status_code=status.HTTP_302_FOUND)


@router.get("/logout")
async def logout_user(request: Request):
    """Clear the session principal; safe to call when already logged out."""
    logout(request)
    return RedirectResponse(request.app.state.settings.logout_redirect, status_code=status.HTTP_302_FOUND)


@router.get("/me", response_model=Principal, responses={401: {"model": ErrorResponse}})
async def current_user(principal: Optional[Principal] = Depends(get_current_principal)):
    """Get the logged-in user's identity."""
    if principal is None:
        raise AuthenticationRequired("Not logged in")
    return principal
