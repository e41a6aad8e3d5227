"""Authentication middleware for request processing."""

import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from helmrbac.core.config import Settings
from helmrbac.core.logging import get_logger

logger = get_logger(__name__)


class AuthMiddleware(BaseHTTPMiddleware):
    """Tags requests with an id and adds security headers."""

    def __init__(self, app: ASGIApp, settings: Settings):
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request for authentication."""
        if request.url.path in self.settings.probe_paths:
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = request_id

        if self.settings.debug:
            logger.debug(
                "OAuth headers in request",
                extra={
                    "request_id": request_id,
                    "path": request.url.path,
                    "oauth_user": request.headers.get(self.settings.oauth_header_user),
                    "oauth_groups": request.headers.get(
                        self.settings.oauth_header_groups
                    ),
                },
            )

        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Request-ID"] = request_id

        return response
