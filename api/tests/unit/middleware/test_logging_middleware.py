"""Tests for request logging and auth-context middleware."""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from helmrbac.api.middleware.auth import AuthMiddleware
from helmrbac.api.middleware.logging import LoggingMiddleware
from helmrbac.core.config import Settings


@pytest.fixture
def app_with_middleware():
    """Create FastAPI app with both middlewares."""
    app = FastAPI()
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(AuthMiddleware, settings=Settings(_env_file=None))

    @app.get("/test")
    async def test_endpoint():
        return {"status": "ok"}

    @app.get("/error")
    async def error_endpoint():
        raise HTTPException(status_code=500, detail="Test error")

    @app.get("/exception")
    async def exception_endpoint():
        raise ValueError("Unexpected error")

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


@pytest.mark.unit
class TestLoggingMiddleware:
    """Test request logging."""

    def test_logs_request_lifecycle(self, app_with_middleware, caplog):
        client = TestClient(app_with_middleware)

        with caplog.at_level("INFO"):
            response = client.get("/test")

        assert response.status_code == 200
        messages = [record.message for record in caplog.records]
        assert any("request_started" in msg for msg in messages)
        assert any("request_completed" in msg for msg in messages)

    def test_adds_process_time_header(self, app_with_middleware):
        response = TestClient(app_with_middleware).get("/test")

        assert float(response.headers["X-Process-Time"]) >= 0

    def test_http_errors_are_completed_requests(self, app_with_middleware, caplog):
        client = TestClient(app_with_middleware)

        with caplog.at_level("INFO"):
            response = client.get("/error")

        assert response.status_code == 500
        completed = [r for r in caplog.records if "request_completed" in r.message]
        assert completed and completed[0].status_code == 500

    def test_logs_unhandled_exception(self, app_with_middleware, caplog):
        client = TestClient(app_with_middleware, raise_server_exceptions=False)

        with caplog.at_level("ERROR"):
            response = client.get("/exception")

        assert response.status_code == 500
        assert any("request_failed" in record.message for record in caplog.records)


@pytest.mark.unit
class TestAuthMiddleware:
    """Test request id and security headers."""

    def test_generates_request_id(self, app_with_middleware):
        response = TestClient(app_with_middleware).get("/test")

        assert response.headers["X-Request-ID"]
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_propagates_request_id(self, app_with_middleware):
        response = TestClient(app_with_middleware).get(
            "/test", headers={"X-Request-ID": "req-123"}
        )

        assert response.headers["X-Request-ID"] == "req-123"

    def test_skips_health_paths(self, app_with_middleware):
        response = TestClient(app_with_middleware).get("/health")

        assert "X-Request-ID" not in response.headers

    def test_skips_configured_probe_paths(self):
        app = FastAPI()
        app.add_middleware(
            AuthMiddleware, settings=Settings(_env_file=None, health_check_path="/livez")
        )

        @app.get("/livez")
        async def livez():
            return {"status": "healthy"}

        response = TestClient(app).get("/livez")

        assert response.status_code == 200
        assert "X-Request-ID" not in response.headers
