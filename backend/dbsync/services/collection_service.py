"""
Collection service for tracked collections and their one-shot sync.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from dbsync.database.databases import sync_db
from dbsync.models.collection import CollectionRecord
from dbsync.models.connection import ConnectionRecord
from dbsync.models.database import DatabaseRecord
from dbsync.replication import RawCoordinates
from dbsync.schemas.collection import CollectionCreate, CollectionResponse
from dbsync.schemas.sync import CollectionSyncResponse
from dbsync.services.connection_service import to_object_id
from dbsync.services.sync_engine import SyncEngine, get_sync_engine

logger = logging.getLogger(__name__)


class CollectionService:
    """Service for collection records and collection sync."""
    
    def __init__(self, db: AsyncIOMotorDatabase, engine: Optional[SyncEngine] = None):
        """Initialize with the metadata database and an optional sync engine."""
        self.db = db
        self.collections = db[sync_db.Collections.COLLECTIONS]
        self.databases = db[sync_db.Collections.DATABASES]
        self.connections = db[sync_db.Collections.CONNECTIONS]
        self.engine = engine or get_sync_engine()
    
    # ==================== Records ====================
    
    async def list_collections(self) -> list[CollectionResponse]:
        """List all collections."""
        docs = await self.collections.find().sort("label", 1).to_list(length=None)
        return [self._to_response(CollectionRecord(**doc)) for doc in docs]
    
    async def list_collections_by_database(self, database_id: str) -> list[CollectionResponse]:
        """List collections belonging to a database."""
        cursor = self.collections.find({"database_id": database_id}).sort("collection_name", 1)
        docs = await cursor.to_list(length=None)
        return [self._to_response(CollectionRecord(**doc)) for doc in docs]
    
    async def get_collection(self, collection_id: str) -> Optional[CollectionResponse]:
        """Get a collection by ID."""
        record = await self._find_record(collection_id)
        return self._to_response(record) if record else None
    
    async def get_collection_by_label(self, label: str) -> Optional[CollectionResponse]:
        """Get a collection by its label."""
        doc = await self.collections.find_one({"label": label})
        return self._to_response(CollectionRecord(**doc)) if doc else None
    
    async def create_collection(self, request: CollectionCreate) -> CollectionResponse:
        """
        Track a collection of an existing database.
        
        Raises:
            ValueError: If the database does not exist or the label is taken
        """
        database_oid = to_object_id(request.database_id)
        if database_oid is None or not await self.databases.find_one({"_id": database_oid}):
            raise ValueError(f"Database {request.database_id} not found")
        
        return await self.create_collection_record({
            "label": request.label,
            "description": request.description,
            "collection_name": request.collection_name,
            "database_id": request.database_id,
            "last_sync_at": None,
        })
    
    async def create_collection_record(self, fields: dict[str, Any]) -> CollectionResponse:
        """
        Insert a collection record.
        
        Used directly by database provisioning, which supplies its own
        timestamps.
        
        Raises:
            ValueError: If a collection with the same label exists
        """
        doc = {
            "description": None,
            "last_sync_at": None,
            "created_at": datetime.now(timezone.utc),
            "updated_at": None,
            **fields,
        }
        try:
            result = await self.collections.insert_one(doc)
        except DuplicateKeyError:
            raise ValueError(f"Collection with label {fields.get('label')} already exists")
        
        doc["_id"] = result.inserted_id
        return self._to_response(CollectionRecord(**doc))
    
    async def update_last_sync(self, collection_id: str) -> bool:
        """Stamp the collection with the current time."""
        oid = to_object_id(collection_id)
        if oid is None:
            return False
        now = datetime.now(timezone.utc)
        result = await self.collections.update_one(
            {"_id": oid},
            {"$set": {"last_sync_at": now, "updated_at": now}},
        )
        return result.matched_count > 0
    
    # ==================== Sync ====================
    
    async def sync_records(self, collection_id: str) -> Optional[CollectionSyncResponse]:
        """
        Copy documents, validation rules and indexes of one collection.
        
        Opens fresh handles on the owning connection and the local store,
        runs the sync and stamps ``last_sync_at`` on success.
        
        Returns:
            None if the collection does not exist
            
        Raises:
            ValueError: If the owning database or connection is missing
            SyncError: If any sync step fails
        """
        collection = await self._find_record(collection_id)
        if collection is None:
            return None
        
        database_doc = await self.databases.find_one({"_id": to_object_id(collection.database_id)})
        if database_doc is None:
            raise ValueError(f"Database {collection.database_id} not found")
        database = DatabaseRecord(**database_doc)
        
        connection_doc = await self.connections.find_one({"_id": to_object_id(database.connection_id)})
        if connection_doc is None:
            raise ValueError(f"Connection {database.connection_id} not found")
        connection = ConnectionRecord(**connection_doc)
        
        logger.info(
            f"Syncing collection '{collection.collection_name}' from "
            f"{database.db_name} into {database.destination_db_name}"
        )
        records = await self.engine.orchestrator.sync_collection(RawCoordinates(
            collection_name=collection.collection_name,
            source_uri=connection.connection_uri,
            source_db_name=database.db_name,
            destination_db_name=database.destination_db_name,
        ))
        await self.update_last_sync(collection_id)
        
        return CollectionSyncResponse(
            collection_id=collection_id,
            collection_name=collection.collection_name,
            records=records,
            synced_at=datetime.now(timezone.utc),
        )
    
    # ==================== Helpers ====================
    
    async def _find_record(self, collection_id: str) -> Optional[CollectionRecord]:
        oid = to_object_id(collection_id)
        if oid is None:
            return None
        doc = await self.collections.find_one({"_id": oid})
        return CollectionRecord(**doc) if doc else None
    
    def _to_response(self, record: CollectionRecord) -> CollectionResponse:
        return CollectionResponse(
            id=record.id,
            label=record.label,
            description=record.description,
            collection_name=record.collection_name,
            database_id=record.database_id,
            last_sync_at=record.last_sync_at,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
