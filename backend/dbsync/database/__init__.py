"""
Database module - metadata store connection and collection definitions.
"""
from dbsync.database.connections import (
    get_mongo_client,
    close_connections,
    get_database,
)
from dbsync.database.databases import sync_db

__all__ = [
    "get_mongo_client",
    "close_connections",
    "get_database",
    "sync_db",
]
