"""API v1 router assembly."""

from fastapi import APIRouter

from helmrbac.api.v1.endpoints import helm

api_router = APIRouter()

api_router.include_router(helm.router, prefix="/helm", tags=["helm"])
