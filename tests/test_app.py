"""Tests for the application factory."""

from fastapi.testclient import TestClient

from tablecalc.api import create_app


class TestCreateApp:
    """Test the FastAPI application factory."""

    def test_routes_are_mounted_under_api(self):
        client = TestClient(create_app())

        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_cors_preflight(self):
        client = TestClient(create_app())

        response = client.options(
            "/api/evaluate",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert "access-control-allow-origin" in response.headers
