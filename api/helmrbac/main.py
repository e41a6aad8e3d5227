"""Helm RBAC resolver API."""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from redis.exceptions import RedisError

from helmrbac.api.middleware.auth import AuthMiddleware
from helmrbac.api.middleware.logging import LoggingMiddleware
from helmrbac.api.v1.endpoints.health import create_health_router
from helmrbac.api.v1.router import api_router
from helmrbac.core.config import Settings
from helmrbac.core.logging import get_logger, setup_logging
from helmrbac.db.redis import close_redis_connection, get_redis_client

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings)

    logger.info(
        f"Starting {settings.app_name} v{settings.app_version}",
        extra={
            "environment": settings.environment.value,
            "rbac_enabled": settings.rbac_enabled,
            "rbac_default_deny": settings.rbac_default_deny,
        },
    )

    try:
        get_redis_client(settings)
    except RedisError as e:
        logger.error(f"Redis initialization failed: {e}")
        if settings.is_production:
            raise

    yield

    logger.info("Shutting down")
    close_redis_connection(settings)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one settings instance."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title=f"{settings.app_name} API",
        version=settings.app_version,
        description="RBAC object names and access checks for Helm apps",
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(AuthMiddleware, settings=settings)

    if settings.is_production:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    app.include_router(create_health_router(settings), tags=["health"])
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


if __name__ == "__main__":
    settings = Settings()
    uvicorn.run(
        "helmrbac.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.value.lower(),
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
