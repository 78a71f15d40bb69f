"""Tests for the health endpoint."""

from arc_scoring import __version__


def test_healthy(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["components"]["database"]["status"] == "healthy"
    assert data["version"] == __version__


def test_degraded_when_database_down(unhealthy_client):
    response = unhealthy_client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["components"]["database"]["details"]["error"] == "Connection refused"


def test_request_id_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_generated(client):
    response = client.get("/health")
    assert response.headers["X-Request-ID"]
