"""
Tests for health check endpoints.

These tests verify:
- Basic health endpoint returns 200
- Readiness check reports the metadata store and local store status
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest


class TestHealthEndpoint:
    """Tests for GET /health endpoint."""

    def test_health_endpoint_returns_200_when_api_running(self, client):
        """Basic health check should return 200 if API is up."""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root_endpoint_lists_api_info(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["name"] == "DB Sync Tool API"


class TestReadinessEndpoint:
    """Tests for GET /health/ready endpoint."""

    @pytest.fixture
    def local_client(self):
        """Client the readiness check opens on the local store."""
        client = MagicMock()
        client.admin.command = AsyncMock(return_value={"ok": 1})
        with patch("dbsync.routers.health.AsyncIOMotorClient", return_value=client):
            yield client

    def test_readiness_returns_healthy_when_mongodb_answers(self, client, local_client):
        """Readiness check should be healthy when the ping succeeds."""
        with patch("dbsync.routers.health.get_mongo_client") as mock_mongo:
            mock_mongo_client = AsyncMock()
            mock_mongo_client.admin.command = AsyncMock(return_value={"ok": 1})
            mock_mongo.return_value = mock_mongo_client

            response = client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["mongodb"] == "healthy"
        assert data["checks"]["local_store"] == "healthy"
        local_client.close.assert_called_once()

    def test_readiness_reports_mongodb_unhealthy_when_connection_fails(self, client, local_client):
        """Readiness should report MongoDB unhealthy when it fails."""
        with patch("dbsync.routers.health.get_mongo_client") as mock_mongo:
            mock_mongo.side_effect = Exception("Connection refused")

            response = client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert "unhealthy" in data["checks"]["mongodb"]
        assert "Connection refused" in data["checks"]["mongodb"]

    def test_readiness_reports_local_store_unhealthy_when_ping_fails(self, client, local_client):
        """The local store is checked on its own; the metadata store can still be healthy."""
        from pymongo.errors import ServerSelectionTimeoutError

        local_client.admin.command.side_effect = ServerSelectionTimeoutError("localhost:27017 refused")
        with patch("dbsync.routers.health.get_mongo_client") as mock_mongo:
            mock_mongo_client = AsyncMock()
            mock_mongo_client.admin.command = AsyncMock(return_value={"ok": 1})
            mock_mongo.return_value = mock_mongo_client

            response = client.get("/health/ready")

        data = response.json()
        assert data["status"] == "degraded"
        assert data["checks"]["mongodb"] == "healthy"
        assert "refused" in data["checks"]["local_store"]
        local_client.close.assert_called_once()
