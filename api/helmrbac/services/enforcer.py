"""Policy checks for Helm app object names."""

import json
from dataclasses import dataclass, field
from enum import Enum
from fnmatch import fnmatchcase
from typing import Any, Dict, List, Optional

import redis
from redis.exceptions import RedisError

from helmrbac.core.logging import get_logger

from .resolution import Resolution, is_sentinel

logger = get_logger(__name__)

HELM_APP_RESOURCE = "helm-app"


class Action(str, Enum):
    """Actions on a Helm app."""

    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class Decision(str, Enum):
    """Authorization decisions."""

    ALLOW = "allow"
    DENY = "deny"


@dataclass
class Principal:
    """Entity making the request."""

    username: str
    groups: List[str] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.username


@dataclass
class EnforcementDecision:
    """Result of checking a principal against resolved object names."""

    decision: Decision
    action: Action
    objects: List[str] = field(default_factory=list)
    matched_object: Optional[str] = None
    reason: str = ""

    @property
    def allowed(self) -> bool:
        return self.decision == Decision.ALLOW

    @property
    def denied(self) -> bool:
        return self.decision == Decision.DENY


class HelmAppEnforcer:
    """Checks object names against per-user and per-group policy rules.

    Rules live in Redis as JSON lists under ``policies:user:<name>`` and
    ``policies:group:<name>``::

        [{"resource": "helm-app", "action": "get", "object": "payments/*/*"}]

    ``object`` is a shell-style pattern and ``action`` may be ``*``.
    """

    def __init__(self, redis_client: redis.Redis, default_deny: bool = True):
        self.redis = redis_client
        self.default_deny = default_deny

    def enforce(
        self, principal: Principal, action: Action, resolution: Resolution
    ) -> EnforcementDecision:
        """Decide access for the names derived for one Helm app."""
        if not resolution.is_resolved:
            decision = Decision.DENY if self.default_deny else Decision.ALLOW
            logger.warning(
                f"Unresolved rbac object for {principal.username}, "
                f"decision={decision.value}: {resolution.reason}"
            )
            return EnforcementDecision(
                decision=decision, action=action, reason=resolution.reason
            )

        objects = resolution.names
        rules = self._get_rules(principal)
        for name in objects:
            if self._matches(rules, action, name):
                return EnforcementDecision(
                    decision=Decision.ALLOW,
                    action=action,
                    objects=objects,
                    matched_object=name,
                    reason=f"Allowed on {name}",
                )

        logger.debug(f"No policy grants {action.value} on {objects} to {principal.username}")
        return EnforcementDecision(
            decision=Decision.DENY,
            action=action,
            objects=objects,
            reason="No matching policy",
        )

    def enforce_object(self, principal: Principal, action: Action, name: str) -> bool:
        """Check a single object name; empty placeholders never match."""
        if is_sentinel(name):
            return False
        return self._matches(self._get_rules(principal), action, name)

    def _get_rules(self, principal: Principal) -> List[Dict[str, Any]]:
        keys = [f"policies:user:{principal.username}"]
        keys.extend(f"policies:group:{group}" for group in principal.groups)

        rules: List[Dict[str, Any]] = []
        for key in keys:
            try:
                data = self.redis.get(key)
            except RedisError as e:
                # Missing rules can only narrow access
                logger.error(f"Error reading policies from {key}: {e}")
                continue
            if not data:
                continue
            try:
                loaded = json.loads(data)
            except json.JSONDecodeError:
                logger.error(f"Invalid policy JSON at {key}")
                continue
            if isinstance(loaded, list):
                rules.extend(rule for rule in loaded if isinstance(rule, dict))
        return rules

    @staticmethod
    def _matches(rules: List[Dict[str, Any]], action: Action, name: str) -> bool:
        if is_sentinel(name):
            return False
        for rule in rules:
            if rule.get("resource", HELM_APP_RESOURCE) != HELM_APP_RESOURCE:
                continue
            rule_action = rule.get("action", "")
            if rule_action not in ("*", action.value):
                continue
            pattern = rule.get("object", "")
            if pattern and fnmatchcase(name, pattern):
                return True
        return False


def create_helm_app_enforcer(
    redis_client: redis.Redis, default_deny: bool = True
) -> HelmAppEnforcer:
    """Factory function to create an enforcer."""
    return HelmAppEnforcer(redis_client, default_deny=default_deny)
