"""Helm app RBAC object-name and access endpoints."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from helmrbac.api.dependencies.auth import get_current_user
from helmrbac.api.dependencies.rbac import (RBACContext, get_rbac_context,
                                            get_resolver)
from helmrbac.core.logging import get_logger
from helmrbac.models.auth import User
from helmrbac.services import Action, HelmRBACResolver, Resolution

logger = get_logger(__name__)

router = APIRouter()


class ObjectNamesResponse(BaseModel):
    """RBAC object names derived for a Helm app."""

    resolved: bool
    primary: str = ""
    secondary: str = ""
    names: List[str] = Field(default_factory=list)
    reason: str = ""

    @classmethod
    def from_resolution(cls, resolution: Resolution) -> "ObjectNamesResponse":
        return cls(
            resolved=resolution.is_resolved,
            primary=resolution.primary,
            secondary=resolution.secondary,
            names=resolution.names,
            reason=resolution.reason,
        )


class AccessResponse(BaseModel):
    """Outcome of an access check on a Helm app."""

    allowed: bool
    action: Action
    objects: List[str] = Field(default_factory=list)
    matched_object: Optional[str] = None
    reason: str = ""


def _resolve_cluster_app(
    resolver: HelmRBACResolver,
    cluster_id: int,
    namespace: str,
    app_name: str,
    team_id: Optional[int],
) -> Resolution:
    if team_id is not None:
        return resolver.resolve_by_team_and_cluster(team_id, cluster_id, namespace, app_name)
    return resolver.resolve_by_cluster_namespace_and_app_name(cluster_id, namespace, app_name)


def _resolve_installed_app(
    resolver: HelmRBACResolver, installed_app_id: int, team_id: Optional[int]
) -> Resolution:
    if team_id is not None:
        return resolver.resolve_by_installed_app_and_team(installed_app_id, team_id)
    return resolver.resolve_by_installed_app_id(installed_app_id)


@router.get(
    "/rbac/clusters/{cluster_id}/namespaces/{namespace}/apps/{app_name}",
    response_model=ObjectNamesResponse,
)
async def get_cluster_app_objects(
    cluster_id: int,
    namespace: str,
    app_name: str,
    team_id: Optional[int] = Query(None, description="Name the app under this team"),
    user: User = Depends(get_current_user),
    resolver: HelmRBACResolver = Depends(get_resolver),
) -> ObjectNamesResponse:
    """Derive object names for a release in a cluster namespace."""
    resolution = _resolve_cluster_app(resolver, cluster_id, namespace, app_name, team_id)
    return ObjectNamesResponse.from_resolution(resolution)


@router.get(
    "/rbac/installed-apps/{installed_app_id}",
    response_model=ObjectNamesResponse,
)
async def get_installed_app_objects(
    installed_app_id: int,
    team_id: Optional[int] = Query(None, description="Name the app under this team"),
    user: User = Depends(get_current_user),
    resolver: HelmRBACResolver = Depends(get_resolver),
) -> ObjectNamesResponse:
    """Derive object names for an installed app."""
    resolution = _resolve_installed_app(resolver, installed_app_id, team_id)
    return ObjectNamesResponse.from_resolution(resolution)


@router.get(
    "/access/clusters/{cluster_id}/namespaces/{namespace}/apps/{app_name}",
    response_model=AccessResponse,
)
async def check_cluster_app_access(
    cluster_id: int,
    namespace: str,
    app_name: str,
    action: Action = Query(Action.GET),
    team_id: Optional[int] = Query(None),
    rbac: RBACContext = Depends(get_rbac_context),
    resolver: HelmRBACResolver = Depends(get_resolver),
) -> AccessResponse:
    """Check the caller's access to a release in a cluster namespace."""
    resolution = _resolve_cluster_app(resolver, cluster_id, namespace, app_name, team_id)
    decision = rbac.check(action, resolution)
    return AccessResponse(
        allowed=decision.allowed,
        action=action,
        objects=decision.objects,
        matched_object=decision.matched_object,
        reason=decision.reason,
    )


@router.get(
    "/access/installed-apps/{installed_app_id}",
    response_model=AccessResponse,
)
async def check_installed_app_access(
    installed_app_id: int,
    action: Action = Query(Action.GET),
    team_id: Optional[int] = Query(None),
    rbac: RBACContext = Depends(get_rbac_context),
    resolver: HelmRBACResolver = Depends(get_resolver),
) -> AccessResponse:
    """Check the caller's access to an installed app."""
    resolution = _resolve_installed_app(resolver, installed_app_id, team_id)
    decision = rbac.check(action, resolution)
    return AccessResponse(
        allowed=decision.allowed,
        action=action,
        objects=decision.objects,
        matched_object=decision.matched_object,
        reason=decision.reason,
    )
