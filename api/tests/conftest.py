"""Pytest configuration and shared fixtures for helmrbac tests."""

import json
from typing import Any, Dict, List, Optional

import pytest
from fakeredis import FakeStrictRedis
from fastapi.testclient import TestClient

from helmrbac.api.dependencies.rbac import get_enforcer, get_resolver
from helmrbac.core.config import Environment, Settings
from helmrbac.main import create_app
from helmrbac.services import create_helm_app_enforcer, create_helm_rbac_resolver

# ============================================================================
# Redis Fixtures
# ============================================================================


@pytest.fixture(scope="session")
def fake_redis_session():
    """Single FakeRedis instance for entire test session."""
    return FakeStrictRedis(decode_responses=True)


@pytest.fixture(autouse=True)
def fake_redis(fake_redis_session):
    """Function-scoped fixture that clears session redis before each test."""
    fake_redis_session.flushdb()
    yield fake_redis_session


# ============================================================================
# Record Fixtures
# ============================================================================


@pytest.fixture
def store(fake_redis):
    """Write records and indexes the way the platform stores them."""

    class RecordStore:
        def cluster(self, cluster_id: int, name: str, active: bool = True):
            fake_redis.set(
                f"cluster:{cluster_id}",
                json.dumps({"id": cluster_id, "cluster_name": name, "active": active}),
            )

        def team(self, team_id: int, name: str, active: bool = True):
            fake_redis.set(
                f"team:{team_id}",
                json.dumps({"id": team_id, "name": name, "active": active}),
            )

        def app(self, app_id: int, name: str, team_id: int = 0, active: bool = True):
            fake_redis.set(
                f"app:{app_id}",
                json.dumps(
                    {"id": app_id, "app_name": name, "team_id": team_id, "active": active}
                ),
            )
            fake_redis.set(f"app:name:{name}", app_id)

        def environment(
            self,
            env_id: int,
            identifier: str,
            namespace: str,
            cluster_id: int,
            virtual: bool = False,
        ):
            fake_redis.set(
                f"environment:{env_id}",
                json.dumps(
                    {
                        "id": env_id,
                        "environment_identifier": identifier,
                        "namespace": namespace,
                        "cluster_id": cluster_id,
                        "is_virtual_environment": virtual,
                    }
                ),
            )

        def installed_app(
            self,
            installed_app_id: int,
            app_id: int,
            environment_id: int = 0,
            index: Optional[Dict[str, Any]] = None,
        ):
            fake_redis.set(
                f"installed_app:{installed_app_id}",
                json.dumps(
                    {
                        "id": installed_app_id,
                        "app_id": app_id,
                        "environment_id": environment_id,
                    }
                ),
            )
            if index:
                fake_redis.set(
                    "installed_app:by:cluster:"
                    f"{index['cluster_id']}:{index['namespace']}:{index['app_name']}",
                    installed_app_id,
                )

        def policies(self, key: str, rules: List[Dict[str, Any]]):
            fake_redis.set(key, json.dumps(rules))

    return RecordStore()


@pytest.fixture
def checkout_install(store):
    """Installed app "checkout" owned by "payments" in env "payments-prod"."""
    store.cluster(1, "prod-1")
    store.team(7, "payments")
    store.app(11, "checkout", team_id=7)
    store.environment(21, "payments-prod", "ns-a", cluster_id=1)
    store.installed_app(
        31,
        app_id=11,
        environment_id=21,
        index={"cluster_id": 1, "namespace": "ns-a", "app_name": "checkout"},
    )
    return 31


@pytest.fixture
def resolver(fake_redis):
    """Provide a resolver over fake Redis."""
    return create_helm_rbac_resolver(fake_redis)


@pytest.fixture
def enforcer(fake_redis):
    """Provide a fail-closed enforcer over fake Redis."""
    return create_helm_app_enforcer(fake_redis, default_deny=True)


# ============================================================================
# API Test Client Fixtures
# ============================================================================


@pytest.fixture
def app_settings():
    """Settings for a development app that checks access, ignoring the environment."""
    return Settings(
        _env_file=None,
        environment=Environment.DEVELOPMENT,
        oauth_proxy_enabled=True,
        rbac_enabled=True,
        rbac_default_deny=True,
    )


@pytest.fixture
def test_client(app_settings, resolver, enforcer):
    """Provide a test client with dependencies bound to fake Redis."""
    app = create_app(app_settings)
    app.dependency_overrides[get_resolver] = lambda: resolver
    app.dependency_overrides[get_enforcer] = lambda: enforcer

    return TestClient(app)


@pytest.fixture
def authenticated_client(test_client):
    """Provide a test client with payments developer headers."""
    test_client.headers.update(
        {
            "X-Forwarded-User": "jane",
            "X-Forwarded-Email": "jane@example.com",
            "X-Forwarded-Groups": "payments-devs, viewers",
        }
    )
    return test_client


# ============================================================================
# Markers
# ============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "rbac: RBAC-specific tests")
