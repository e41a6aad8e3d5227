"""Unit tests for Helm app policy enforcement."""

import pytest

from helmrbac.services import (Action, Decision, HelmAppEnforcer, Principal,
                               Resolution)


@pytest.fixture
def developer():
    return Principal(username="jane", groups=["payments-devs"])


@pytest.mark.unit
@pytest.mark.rbac
class TestHelmAppEnforcer:
    """Test matching resolved names against stored policies."""

    def test_group_policy_allows_primary(self, enforcer, store, developer):
        store.policies(
            "policies:group:payments-devs",
            [{"resource": "helm-app", "action": "get", "object": "payments/*/*"}],
        )
        resolution = Resolution.resolved(
            "payments/payments-prod/checkout", "payments/prod-1__ns-a/checkout"
        )

        decision = enforcer.enforce(developer, Action.GET, resolution)

        assert decision.allowed
        assert decision.matched_object == "payments/payments-prod/checkout"
        assert decision.objects == [
            "payments/payments-prod/checkout",
            "payments/prod-1__ns-a/checkout",
        ]

    def test_secondary_name_can_grant(self, enforcer, store, developer):
        store.policies(
            "policies:user:jane",
            [{"resource": "helm-app", "action": "*", "object": "payments/prod-1__ns-a/*"}],
        )
        resolution = Resolution.resolved(
            "payments/payments-prod/checkout", "payments/prod-1__ns-a/checkout"
        )

        decision = enforcer.enforce(developer, Action.UPDATE, resolution)

        assert decision.allowed
        assert decision.matched_object == "payments/prod-1__ns-a/checkout"

    def test_action_must_match(self, enforcer, store, developer):
        store.policies(
            "policies:group:payments-devs",
            [{"resource": "helm-app", "action": "get", "object": "payments/*/*"}],
        )
        resolution = Resolution.resolved("payments/payments-prod/checkout")

        decision = enforcer.enforce(developer, Action.DELETE, resolution)

        assert decision.denied
        assert decision.reason == "No matching policy"

    def test_other_resources_ignored(self, enforcer, store, developer):
        store.policies(
            "policies:group:payments-devs",
            [{"resource": "cluster", "action": "*", "object": "*"}],
        )

        decision = enforcer.enforce(
            developer, Action.GET, Resolution.resolved("payments/payments-prod/checkout")
        )

        assert decision.denied

    def test_unresolved_is_denied_by_default(self, enforcer, store, developer):
        store.policies(
            "policies:group:payments-devs",
            [{"resource": "helm-app", "action": "*", "object": "*"}],
        )

        decision = enforcer.enforce(
            developer, Action.GET, Resolution.unresolved("cluster lookup failed")
        )

        assert decision.decision == Decision.DENY
        assert decision.reason == "cluster lookup failed"

    def test_unresolved_allowed_when_fail_open(self, fake_redis, developer):
        enforcer = HelmAppEnforcer(fake_redis, default_deny=False)

        decision = enforcer.enforce(
            developer, Action.GET, Resolution.unresolved("cluster lookup failed")
        )

        assert decision.allowed

    def test_wildcard_never_matches_sentinel(self, enforcer, store, developer):
        store.policies(
            "policies:user:jane",
            [{"resource": "helm-app", "action": "*", "object": "*"}],
        )

        assert not enforcer.enforce_object(developer, Action.GET, "//")
        assert not enforcer.enforce_object(developer, Action.GET, "")
        assert enforcer.enforce_object(developer, Action.GET, "payments/x/checkout")

    def test_invalid_policy_json_is_skipped(self, enforcer, store, fake_redis, developer):
        fake_redis.set("policies:user:jane", "{broken")
        store.policies(
            "policies:group:payments-devs",
            [{"resource": "helm-app", "action": "get", "object": "payments/*/*"}],
        )

        assert enforcer.enforce_object(developer, Action.GET, "payments/x/checkout")

    def test_unreadable_policies_deny(
        self, enforcer, store, fake_redis, developer, monkeypatch
    ):
        from redis.exceptions import ConnectionError

        store.policies(
            "policies:group:payments-devs",
            [{"resource": "helm-app", "action": "get", "object": "payments/*/*"}],
        )

        def broken_get(key):
            raise ConnectionError("connection refused")

        monkeypatch.setattr(fake_redis, "get", broken_get)

        decision = enforcer.enforce(
            developer, Action.GET, Resolution.resolved("payments/payments-prod/checkout")
        )

        assert decision.decision == Decision.DENY
        assert decision.reason == "No matching policy"

    def test_unreadable_key_keeps_other_rules(
        self, enforcer, store, fake_redis, developer, monkeypatch
    ):
        from redis.exceptions import ConnectionError

        store.policies(
            "policies:group:payments-devs",
            [{"resource": "helm-app", "action": "get", "object": "payments/*/*"}],
        )
        real_get = fake_redis.get

        def flaky_get(key):
            if key == "policies:user:jane":
                raise ConnectionError("connection reset")
            return real_get(key)

        monkeypatch.setattr(fake_redis, "get", flaky_get)

        assert enforcer.enforce_object(developer, Action.GET, "payments/x/checkout")
