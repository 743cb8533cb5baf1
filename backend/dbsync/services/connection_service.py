"""
Connection service for remote MongoDB deployments.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from dbsync.database.databases import sync_db
from dbsync.models.connection import ConnectionRecord
from dbsync.replication.resolver import redact_uri
from dbsync.schemas.connection import ConnectionCreate, ConnectionResponse

logger = logging.getLogger(__name__)


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse an id from a path or a record, None if it is not an ObjectId."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


class ConnectionService:
    """Service for connection records."""
    
    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with the metadata database."""
        self.db = db
        self.connections = db[sync_db.Collections.CONNECTIONS]
    
    async def list_connections(self) -> list[ConnectionResponse]:
        """List all connections."""
        cursor = self.connections.find().sort("label", 1)
        docs = await cursor.to_list(length=None)
        return [self._to_response(ConnectionRecord(**doc)) for doc in docs]
    
    async def get_connection(self, connection_id: str) -> Optional[ConnectionResponse]:
        """Get a connection by ID."""
        record = await self.get_connection_record(connection_id)
        if record is None:
            return None
        return self._to_response(record)
    
    async def get_connection_record(self, connection_id: str) -> Optional[ConnectionRecord]:
        """Get the stored connection, URI included."""
        oid = to_object_id(connection_id)
        if oid is None:
            return None
        doc = await self.connections.find_one({"_id": oid})
        return ConnectionRecord(**doc) if doc else None
    
    async def get_connection_by_label(self, label: str) -> Optional[ConnectionResponse]:
        """Get a connection by its label."""
        doc = await self.connections.find_one({"label": label})
        return self._to_response(ConnectionRecord(**doc)) if doc else None
    
    async def create_connection(self, request: ConnectionCreate) -> ConnectionResponse:
        """
        Create a new connection.
        
        Raises:
            ValueError: If a connection with the same label exists
        """
        if await self.connections.find_one({"label": request.label}):
            raise ValueError(f"Connection with label {request.label} already exists")
        
        doc = {
            "label": request.label,
            "description": request.description,
            "connection_uri": request.connection_uri,
            "last_sync_at": None,
            "created_at": datetime.now(timezone.utc),
            "updated_at": None,
        }
        try:
            result = await self.connections.insert_one(doc)
        except DuplicateKeyError:
            # Lost a race against a concurrent create with the same label
            raise ValueError(f"Connection with label {request.label} already exists")
        
        doc["_id"] = result.inserted_id
        logger.info(f"Created connection '{request.label}'")
        return self._to_response(ConnectionRecord(**doc))
    
    async def delete_connection(self, connection_id: str) -> bool:
        """
        Delete a connection.
        
        Raises:
            ValueError: If databases still reference the connection
        """
        oid = to_object_id(connection_id)
        if oid is None:
            return False
        
        databases = self.db[sync_db.Collections.DATABASES]
        if await databases.count_documents({"connection_id": connection_id}, limit=1):
            raise ValueError("Connection still has databases attached")
        
        result = await self.connections.delete_one({"_id": oid})
        if result.deleted_count:
            logger.info(f"Deleted connection {connection_id}")
        return result.deleted_count > 0
    
    async def update_last_sync(self, connection_id: str) -> bool:
        """Stamp the connection with the current time."""
        oid = to_object_id(connection_id)
        if oid is None:
            return False
        now = datetime.now(timezone.utc)
        result = await self.connections.update_one(
            {"_id": oid},
            {"$set": {"last_sync_at": now, "updated_at": now}},
        )
        return result.matched_count > 0
    
    def _to_response(self, record: ConnectionRecord) -> ConnectionResponse:
        return ConnectionResponse(
            id=record.id,
            label=record.label,
            description=record.description,
            connection_uri=redact_uri(record.connection_uri),
            last_sync_at=record.last_sync_at,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
