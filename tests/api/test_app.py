"""Tests for FastAPI application."""

from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.app import create_app
from core.config import Settings
from core.types import Environment


def test_docs_endpoint(client: TestClient):
    """Test that docs endpoint is accessible."""
    response = client.get("/docs")
    assert response.status_code == 200
    assert "swagger-ui" in response.text


def test_openapi_schema(client: TestClient):
    """Test that OpenAPI schema is accessible."""
    response = client.get("/openapi.json")
    assert response.status_code == 200

    schema = response.json()
    assert schema["info"]["title"] == "Metawhale API"
    assert schema["info"]["version"] == "1.0.0"
    assert "/v1/portfolio/{network_id}/{address}" in schema["paths"]


def test_cors_headers(client: TestClient):
    """Test CORS headers are set."""
    response = client.get("/health", headers={"Origin": "http://localhost:3000"})
    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers


def test_lifespan_populates_state(client: TestClient, test_app: FastAPI):
    """Test that startup puts every service on app.state."""
    state = test_app.state
    assert state.scheduler is not None
    assert state.monitor is not None
    assert state.portfolio_service.scheduler is state.scheduler
    assert [runner.job.name for runner in state.job_runners] == [
        "performance-summary"
    ]


def test_create_app_with_settings():
    settings = Settings(environment=Environment.TESTING, api_title="Custom")

    app = create_app(settings=settings)

    assert app.title == "Custom"
    assert app.state.settings is settings
