"""
Tests for metadata store connections and initialization.

These tests cover:
- MongoDB connection initialization
- Metadata index creation
"""

import pytest
from unittest.mock import MagicMock, patch


class TestMongoDBConnection:
    """Tests for MongoDB connection handling."""

    @pytest.mark.asyncio
    async def test_get_mongo_client_creates_connection_once(self):
        """get_mongo_client should create the client on first call only."""
        import dbsync.database.connections as conn_module

        with patch("dbsync.database.connections.AsyncIOMotorClient") as mock_client, \
             patch("dbsync.database.connections.get_settings") as mock_settings:

            mock_settings.return_value.mongo_uri = "mongodb://test:27017"
            mock_settings.return_value.server_selection_timeout_ms = 2000
            mock_instance = MagicMock()
            mock_client.return_value = mock_instance
            conn_module._mongo_client = None

            first = await conn_module.get_mongo_client()
            second = await conn_module.get_mongo_client()

            mock_client.assert_called_once_with(
                "mongodb://test:27017", serverSelectionTimeoutMS=2000
            )
            assert first is second is mock_instance

        conn_module._mongo_client = None

    @pytest.mark.asyncio
    async def test_close_connections_cleans_up(self):
        """close_connections should close and forget the client."""
        import dbsync.database.connections as conn_module

        mock_mongo = MagicMock()
        conn_module._mongo_client = mock_mongo

        await conn_module.close_connections()

        mock_mongo.close.assert_called_once()
        assert conn_module._mongo_client is None

    @pytest.mark.asyncio
    async def test_get_database_defaults_to_metadata_database(self, mock_async_mongo_client):
        import dbsync.database.connections as conn_module

        conn_module._mongo_client = mock_async_mongo_client
        try:
            db = await conn_module.get_database()
            other = await conn_module.get_database("elsewhere")
        finally:
            conn_module._mongo_client = None

        assert db.name == "db_sync_tool"
        assert other.name == "elsewhere"


class TestMetadataIndexes:
    """Tests for create_metadata_indexes."""

    @pytest.mark.asyncio
    async def test_creates_unique_label_indexes(self, mock_async_mongo_client):
        from dbsync.database.databases.sync_db import Collections, create_metadata_indexes

        db = mock_async_mongo_client["db_sync_tool"]

        await create_metadata_indexes(db)

        connection_indexes = await db[Collections.CONNECTIONS].index_information()
        collection_indexes = await db[Collections.COLLECTIONS].index_information()
        assert connection_indexes["label_1"].get("unique") is True
        assert collection_indexes["label_1"].get("unique") is True
        assert "database_id_1" in collection_indexes

    @pytest.mark.asyncio
    async def test_index_failures_are_logged_not_raised(self, caplog):
        from unittest.mock import AsyncMock

        from pymongo.errors import OperationFailure

        from dbsync.database.databases.sync_db import create_metadata_indexes

        db = MagicMock()
        db.__getitem__.return_value.create_index = AsyncMock(
            side_effect=OperationFailure("conflict", code=85)
        )

        await create_metadata_indexes(db)

        assert "Could not create index" in caplog.text
