"""Authentication dependencies for FastAPI."""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from helmrbac.core.config import Environment, Settings
from helmrbac.core.logging import get_logger
from helmrbac.models.auth import User

from .config import get_settings

logger = get_logger(__name__)


class AuthenticationError(HTTPException):
    """Raised when authentication fails."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(HTTPException):
    """Raised when authorization fails."""

    def __init__(self, detail: str = "Insufficient permissions"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def extract_user_from_headers(request: Request, settings: Settings) -> Optional[User]:
    """Extract user and groups from OAuth proxy headers."""
    if not settings.oauth_proxy_enabled:
        if settings.environment == Environment.DEVELOPMENT:
            return User(username="dev-user", email="dev@example.com", groups=["developers"])
        return None

    username = request.headers.get(settings.oauth_header_user)
    if not username:
        return None

    return User(
        username=username,
        email=request.headers.get(settings.oauth_header_email),
        groups=request.headers.get(settings.oauth_header_groups, ""),
    )


async def get_current_user(
    request: Request, settings: Settings = Depends(get_settings)
) -> User:
    """Get authenticated user from request."""
    user = extract_user_from_headers(request, settings)
    if not user:
        raise AuthenticationError("No valid authentication found")
    logger.debug(f"Authenticated {user.username} with {len(user.groups)} groups")
    return user
