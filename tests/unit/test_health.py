"""Unit tests for the health check endpoint."""

import pytest


class TestHealthEndpoint:
    """Test basic health endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_ok(self):
        """Test that /health returns ok status."""
        from mcp_playground.api.routes.health import health_check

        response = await health_check()

        assert response.status == "ok"

    @pytest.mark.asyncio
    async def test_health_includes_version(self):
        """Test that /health includes the package version."""
        from mcp_playground import __version__
        from mcp_playground.api.routes.health import health_check

        response = await health_check()

        assert response.version == __version__

    def test_health_over_http(self, app_client):
        """Test the mounted /api/health route."""
        response = app_client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
