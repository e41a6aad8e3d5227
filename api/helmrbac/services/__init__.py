"""Business logic services package."""

from .enforcer import (Action, Decision, EnforcementDecision, HelmAppEnforcer,
                       Principal, create_helm_app_enforcer)
from .resolution import (EMPTY_OBJECT, Resolution, ResolutionStatus,
                         is_sentinel, object_name)
from .resolver import HelmRBACResolver, create_helm_rbac_resolver

__all__ = [
    # Resolution
    "HelmRBACResolver",
    "create_helm_rbac_resolver",
    "Resolution",
    "ResolutionStatus",
    "EMPTY_OBJECT",
    "is_sentinel",
    "object_name",
    # Enforcement
    "HelmAppEnforcer",
    "create_helm_app_enforcer",
    "EnforcementDecision",
    "Principal",
    "Action",
    "Decision",
]
