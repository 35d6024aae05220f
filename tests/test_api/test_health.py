"""Tests for health endpoints."""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def mock_app():
    """Create a test application with only the health router."""
    from fastapi import FastAPI
    from pedi_eval.api.routes import health

    app = FastAPI()
    app.include_router(health.router)
    return app


@pytest.fixture
def client(mock_app):
    """Create a test client."""
    return TestClient(mock_app)


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["service"] == "pedi-eval"

    def test_liveness_check(self, client):
        response = client.get("/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    def test_api_info(self, client):
        from pedi_eval import __version__

        response = client.get("/api-info")
        data = response.json()

        assert response.status_code == 200
        assert data["version"] == __version__
        assert data["endpoints"]["compute"]["url"] == "/api/v1/assessment/compute"
