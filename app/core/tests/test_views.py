"""
Tests for core infrastructure views.
"""

from unittest.mock import patch

from django.db import OperationalError


class TestHealthCheck:
    """GET /health/"""

    def test_healthy(self, client, db):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "database": "connected",
            "cache": "connected",
        }

    def test_database_down(self, client, db):
        with patch("core.views.connection.cursor", side_effect=OperationalError("down")):
            response = client.get("/health/")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
        assert response.json()["database"] == "disconnected"
