"""Resolver and enforcer dependencies for endpoints."""

from fastapi import Depends, Request

from helmrbac.core.config import Settings
from helmrbac.db.redis import get_redis_client
from helmrbac.models.auth import User
from helmrbac.services import (Action, Decision, EnforcementDecision,
                               HelmAppEnforcer, HelmRBACResolver, Principal,
                               Resolution, create_helm_app_enforcer,
                               create_helm_rbac_resolver)

from .auth import AuthorizationError, get_current_user
from .config import get_settings


def get_resolver(
    request: Request, settings: Settings = Depends(get_settings)
) -> HelmRBACResolver:
    """Get the application's resolver, creating it on first use."""
    state = request.app.state
    if getattr(state, "resolver", None) is None:
        state.resolver = create_helm_rbac_resolver(get_redis_client(settings))
    return state.resolver


def get_enforcer(
    request: Request, settings: Settings = Depends(get_settings)
) -> HelmAppEnforcer:
    """Get the application's enforcer, creating it on first use."""
    state = request.app.state
    if getattr(state, "enforcer", None) is None:
        state.enforcer = create_helm_app_enforcer(
            get_redis_client(settings), default_deny=settings.rbac_default_deny
        )
    return state.enforcer


def user_to_principal(user: User) -> Principal:
    """Convert User to Principal for RBAC operations."""
    return Principal(username=user.username, groups=list(user.groups))


class RBACContext:
    """Context object providing access checks for endpoints."""

    def __init__(
        self, user: User, enforcer: HelmAppEnforcer, rbac_enabled: bool = True
    ):
        self.user = user
        self.principal = user_to_principal(user)
        self.enforcer = enforcer
        self.rbac_enabled = rbac_enabled

    def check(self, action: Action, resolution: Resolution) -> EnforcementDecision:
        """Check access to a Helm app and raise if denied.

        Raises:
            AuthorizationError if access denied
        """
        if not self.rbac_enabled:
            return EnforcementDecision(
                decision=Decision.ALLOW,
                action=action,
                objects=resolution.names,
                reason="RBAC disabled",
            )

        decision = self.enforcer.enforce(self.principal, action, resolution)
        if decision.denied:
            raise AuthorizationError(
                f"Access denied for {action.value} on helm app: {decision.reason}"
            )
        return decision


def get_rbac_context(
    user: User = Depends(get_current_user),
    enforcer: HelmAppEnforcer = Depends(get_enforcer),
    settings: Settings = Depends(get_settings),
) -> RBACContext:
    """Dependency providing an RBAC context for the calling user."""
    return RBACContext(user, enforcer, rbac_enabled=settings.rbac_enabled)
