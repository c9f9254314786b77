"""Tests for health checks, the root endpoint and request metrics"""
from fastapi.testclient import TestClient

from blogapi.config import Settings
from blogapi.main import create_app


def test_liveness(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "blogapi"


def test_readiness(client: TestClient, user_headers: dict):
    response = client.get("/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["database"]["reachable"] is True
    assert data["counts"] == {"users": 1, "posts": 0, "categories": 0}


def test_root(client: TestClient):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["api"] == "/api/v1"


def test_metrics_enabled_app():
    """With metrics on, requests carry an id and show up on /metrics"""
    metrics_app = create_app(Settings(METRICS_ENABLED=True))
    with TestClient(metrics_app) as metrics_client:
        response = metrics_client.get("/health", headers={"X-Request-ID": "abc123"})
        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == "abc123"

        assert metrics_client.get("/health").headers["X-Request-ID"]

        metrics = metrics_client.get("/metrics")
        assert metrics.status_code == 200
        assert "blogapi_http_requests_total{" in metrics.text
