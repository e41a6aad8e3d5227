"""Health check endpoints for Kubernetes probes."""

from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field
from redis.exceptions import RedisError

from helmrbac.api.dependencies.config import get_settings
from helmrbac.core.config import Settings
from helmrbac.core.logging import get_logger
from helmrbac.db.redis import get_redis_client

logger = get_logger(__name__)

APP_START_TIME = datetime.now(timezone.utc)


class HealthStatus(BaseModel):
    """Health check response model."""

    status: str = Field(..., description="Overall health status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    uptime_seconds: float = Field(..., description="Application uptime in seconds")
    version: str = Field(..., description="Application version")
    environment: str = Field(..., description="Application environment")


class ReadinessStatus(BaseModel):
    """Readiness check response model."""

    ready: bool = Field(..., description="Whether the application is ready")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    checks: Dict[str, bool] = Field(
        default_factory=dict, description="Individual readiness checks"
    )
    message: Optional[str] = Field(None, description="Additional status message")


def check_redis(settings: Settings) -> bool:
    """Ping the record store."""
    try:
        return bool(get_redis_client(settings).ping())
    except RedisError as e:
        logger.error(f"Redis readiness check failed: {e}")
        return False


async def health_check(settings: Settings = Depends(get_settings)) -> HealthStatus:
    """Liveness probe; the process is up if it can answer."""
    uptime = (datetime.now(timezone.utc) - APP_START_TIME).total_seconds()
    return HealthStatus(
        status="healthy",
        uptime_seconds=uptime,
        version=settings.app_version,
        environment=settings.environment.value,
    )


async def readiness_check(
    response: Response, settings: Settings = Depends(get_settings)
) -> ReadinessStatus:
    """Readiness probe; requires the record store to answer."""
    checks = {"redis": check_redis(settings)}

    is_ready = all(checks.values())
    if not is_ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        message = "Application not ready"
        logger.warning("Readiness check failed", extra={"checks": checks})
    else:
        message = "Application ready to receive traffic"

    return ReadinessStatus(ready=is_ready, checks=checks, message=message)


def create_health_router(settings: Settings) -> APIRouter:
    """Mount the probes on the paths ``settings`` names."""
    router = APIRouter()
    router.add_api_route(
        settings.health_check_path,
        health_check,
        methods=["GET"],
        response_model=HealthStatus,
        summary="Health Check",
        description="Kubernetes liveness probe endpoint",
    )
    router.add_api_route(
        settings.readiness_check_path,
        readiness_check,
        methods=["GET"],
        response_model=ReadinessStatus,
        responses={
            200: {"description": "Application is ready"},
            503: {"description": "Application is not ready"},
        },
        summary="Readiness Check",
        description="Kubernetes readiness probe endpoint",
    )
    return router
