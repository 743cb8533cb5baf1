"""
Business logic services.
"""
from dbsync.services.sync_engine import SyncEngine, get_sync_engine
from dbsync.services.connection_service import ConnectionService
from dbsync.services.collection_service import CollectionService
from dbsync.services.database_service import DatabaseService, SyncCoordinates

__all__ = [
    "SyncEngine",
    "get_sync_engine",
    "ConnectionService",
    "CollectionService",
    "DatabaseService",
    "SyncCoordinates",
]
