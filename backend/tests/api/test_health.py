"""Tests for health check endpoints."""

from fastapi.testclient import TestClient

from api import app


client = TestClient(app)


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_health_check(self):
        """Health endpoint should return 200 with status."""
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "0.1.0"

    def test_health_response_structure(self):
        """Health response should have correct structure."""
        response = client.get("/api/health")
        assert set(response.json().keys()) == {"status", "version"}

    def test_health_skips_session_check(self):
        """API routes should never be redirected."""
        response = client.get("/api/health", follow_redirects=False)
        assert response.status_code == 200
