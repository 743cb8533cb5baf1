"""
Database service for remote databases, collection discovery and
database-wide sync.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from dbsync.database.databases import sync_db
from dbsync.models.connection import ConnectionRecord
from dbsync.models.database import DatabaseRecord
from dbsync.replication import ResolvedHandles, SyncError
from dbsync.replication.provisioning import diff_collection_names
from dbsync.schemas.database import DatabaseCreate, DatabaseResponse
from dbsync.schemas.sync import (
    CollectionSyncFailure,
    DatabaseSyncResponse,
    ProvisioningResponse,
)
from dbsync.services.collection_service import CollectionService
from dbsync.services.connection_service import ConnectionService, to_object_id
from dbsync.services.sync_engine import SyncEngine, get_sync_engine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncCoordinates:
    """Everything needed to open both stores for one tracked database."""
    database_id: str
    label: str
    connection_id: str
    source_uri: str = field(repr=False)
    source_db_name: str
    destination_db_name: str


class DatabaseService:
    """Service for database records and database-wide replication."""
    
    def __init__(self, db: AsyncIOMotorDatabase, engine: Optional[SyncEngine] = None):
        """Initialize with the metadata database and an optional sync engine."""
        self.db = db
        self.databases = db[sync_db.Collections.DATABASES]
        self.engine = engine or get_sync_engine()
        self.connection_service = ConnectionService(db)
        self.collection_service = CollectionService(db, self.engine)
    
    # ==================== Records ====================
    
    async def list_databases(self) -> list[DatabaseResponse]:
        """List all databases."""
        docs = await self.databases.find().sort("label", 1).to_list(length=None)
        return [self._to_response(DatabaseRecord(**doc)) for doc in docs]
    
    async def list_databases_by_connection(self, connection_id: str) -> list[DatabaseResponse]:
        """List databases reached through a connection."""
        cursor = self.databases.find({"connection_id": connection_id}).sort("label", 1)
        docs = await cursor.to_list(length=None)
        return [self._to_response(DatabaseRecord(**doc)) for doc in docs]
    
    async def get_database(self, database_id: str) -> Optional[DatabaseResponse]:
        """Get a database by ID."""
        record = await self._find_record(database_id)
        return self._to_response(record) if record else None
    
    async def get_database_by_label(self, label: str) -> Optional[DatabaseResponse]:
        """Get a database by its label."""
        doc = await self.databases.find_one({"label": label})
        return self._to_response(DatabaseRecord(**doc)) if doc else None
    
    async def create_database(self, request: DatabaseCreate) -> DatabaseResponse:
        """
        Track a remote database.
        
        Raises:
            ValueError: If the connection does not exist
        """
        if await self.connection_service.get_connection_record(request.connection_id) is None:
            raise ValueError(f"Connection {request.connection_id} not found")
        
        doc = {
            "label": request.label,
            "description": request.description,
            "db_name": request.db_name,
            "target_db_name": request.target_db_name,
            "connection_id": request.connection_id,
            "last_sync_at": None,
            "created_at": datetime.now(timezone.utc),
            "updated_at": None,
        }
        result = await self.databases.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info(f"Created database '{request.label}' ({request.db_name})")
        return self._to_response(DatabaseRecord(**doc))
    
    async def update_last_sync(self, database_id: str) -> bool:
        """Stamp the database with the current time."""
        oid = to_object_id(database_id)
        if oid is None:
            return False
        now = datetime.now(timezone.utc)
        result = await self.databases.update_one(
            {"_id": oid},
            {"$set": {"last_sync_at": now, "updated_at": now}},
        )
        return result.matched_count > 0
    
    async def find_sync_coordinates(self, database_id: str) -> Optional[SyncCoordinates]:
        """
        Resolve a database record and its connection into sync coordinates.
        
        Returns:
            None if the database does not exist
            
        Raises:
            ValueError: If the owning connection is missing
        """
        database = await self._find_record(database_id)
        if database is None:
            return None
        
        connection: Optional[ConnectionRecord] = (
            await self.connection_service.get_connection_record(database.connection_id)
        )
        if connection is None:
            raise ValueError(f"Connection {database.connection_id} not found")
        
        return SyncCoordinates(
            database_id=database_id,
            label=database.label,
            connection_id=database.connection_id,
            source_uri=connection.connection_uri,
            source_db_name=database.db_name,
            destination_db_name=database.destination_db_name,
        )
    
    # ==================== Replication ====================
    
    async def get_collections_to_create(self, database_id: str) -> Optional[list[str]]:
        """
        Names of remote collections that do not exist locally yet.
        
        Returns:
            Sorted names, or None if the database does not exist
        """
        coords = await self.find_sync_coordinates(database_id)
        if coords is None:
            return None
        
        async with await self._open(coords) as stores:
            missing, _ = await diff_collection_names(stores.source, stores.destination)
        return missing
    
    async def provision_collections(self, database_id: str) -> Optional[ProvisioningResponse]:
        """
        Create and record every locally missing collection.
        
        Per-collection failures are reported, not raised.
        
        Returns:
            None if the database does not exist
        """
        coords = await self.find_sync_coordinates(database_id)
        if coords is None:
            return None
        
        provisioner = self.engine.provisioner(self.collection_service)
        async with await self._open(coords) as stores:
            report = await provisioner.provision_missing_collections(
                stores.source,
                stores.destination,
                database_id,
                database_label=coords.label,
            )
        return ProvisioningResponse.from_report(database_id, report)
    
    async def sync_database(self, database_id: str) -> Optional[DatabaseSyncResponse]:
        """
        Provision missing collections, then sync every tracked collection.
        
        Both stores are opened once and shared by every collection. A failing
        collection is reported and the others carry on. The database and its
        connection are stamped with the sync time at the end.
        
        Returns:
            None if the database does not exist
        """
        coords = await self.find_sync_coordinates(database_id)
        if coords is None:
            return None
        
        provisioner = self.engine.provisioner(self.collection_service)
        synced: dict[str, int] = {}
        failed: list[CollectionSyncFailure] = []
        
        async with await self._open(coords) as stores:
            report = await provisioner.provision_missing_collections(
                stores.source,
                stores.destination,
                database_id,
                database_label=coords.label,
            )
            
            tracked = await self.collection_service.list_collections_by_database(database_id)
            for collection in tracked:
                name = collection.collection_name
                try:
                    synced[name] = await self.engine.orchestrator.sync_collection(
                        ResolvedHandles(name, stores.source, stores.destination)
                    )
                except SyncError as e:
                    logger.warning(f"Sync failed for collection '{name}': {e}")
                    failed.append(CollectionSyncFailure(
                        collection_name=name, error=e.kind, message=e.message,
                    ))
                    continue
                except PyMongoError as e:
                    logger.warning(f"Sync failed for collection '{name}': {e}")
                    failed.append(CollectionSyncFailure(
                        collection_name=name, error="driver_error", message=str(e),
                    ))
                    continue
                await self.collection_service.update_last_sync(collection.id)
        
        await self.update_last_sync(database_id)
        await self.connection_service.update_last_sync(coords.connection_id)
        logger.info(
            f"Synced {len(synced)} of {len(tracked)} collections for database {coords.label}"
        )
        
        return DatabaseSyncResponse(
            database_id=database_id,
            provisioning=ProvisioningResponse.from_report(database_id, report),
            synced=synced,
            failed=failed,
            synced_at=datetime.now(timezone.utc),
        )
    
    # ==================== Helpers ====================
    
    async def _open(self, coords: SyncCoordinates):
        return await self.engine.resolver.open_pair(
            coords.source_uri,
            coords.source_db_name,
            coords.destination_db_name,
        )
    
    async def _find_record(self, database_id: str) -> Optional[DatabaseRecord]:
        oid = to_object_id(database_id)
        if oid is None:
            return None
        doc = await self.databases.find_one({"_id": oid})
        return DatabaseRecord(**doc) if doc else None
    
    def _to_response(self, record: DatabaseRecord) -> DatabaseResponse:
        return DatabaseResponse(
            id=record.id,
            label=record.label,
            description=record.description,
            db_name=record.db_name,
            target_db_name=record.target_db_name,
            connection_id=record.connection_id,
            last_sync_at=record.last_sync_at,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
