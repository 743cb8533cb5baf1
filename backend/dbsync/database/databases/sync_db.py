"""
Metadata database configuration.
Stores what to sync: remote connections, their databases and collections.

Structure:
- connections: Remote MongoDB deployments (label + URI)
- databases: Remote databases and the local database they sync into
- collections: Collections tracked for sync, with last sync timestamps
"""
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import OperationFailure

logger = logging.getLogger(__name__)


class Collections:
    """Collection names in the metadata database."""
    CONNECTIONS = "connections"
    DATABASES = "databases"
    COLLECTIONS = "collections"
    
    # Index definitions for each collection
    INDEXES = {
        "connections": [
            {"keys": [("label", 1)], "unique": True},
        ],
        "databases": [
            {"keys": [("connection_id", 1)]},
            {"keys": [("label", 1)]},
        ],
        "collections": [
            {"keys": [("label", 1)], "unique": True},
            {"keys": [("database_id", 1)]},
            {"keys": [("collection_name", 1)]},
        ],
    }


async def create_metadata_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create indexes for metadata collections."""
    for collection_name, indexes in Collections.INDEXES.items():
        collection = db[collection_name]
        for index_def in indexes:
            keys = index_def["keys"]
            kwargs = {k: v for k, v in index_def.items() if k != "keys"}
            try:
                await collection.create_index(keys, **kwargs)
            except OperationFailure as e:
                # Index might already exist with different options
                logger.warning(f"Could not create index {keys} on {collection_name}: {e}")
