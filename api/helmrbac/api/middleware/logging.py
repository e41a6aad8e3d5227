"""Logging middleware for request/response tracking."""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from helmrbac.core.logging import get_logger, log_event

logger = get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Log request and response information."""
        start_time = time.time()

        request_info = {
            "method": request.method,
            "path": request.url.path,
            "client_host": request.client.host if request.client else None,
        }
        if hasattr(request.state, "request_id"):
            request_info["request_id"] = request.state.request_id

        log_event(logger, "info", "request_started", **request_info)

        try:
            response = await call_next(request)
        except Exception as e:
            log_event(
                logger,
                "error",
                "request_failed",
                error=str(e),
                error_type=type(e).__name__,
                duration_seconds=time.time() - start_time,
                **request_info,
            )
            raise

        duration = time.time() - start_time
        log_event(
            logger,
            "info",
            "request_completed",
            status_code=response.status_code,
            duration_seconds=duration,
            **request_info,
        )
        response.headers["X-Process-Time"] = str(duration)

        return response
