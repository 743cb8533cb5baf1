"""
Collection model for the metadata database.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from dbsync.models.base import MongoRecord


class CollectionRecord(MongoRecord):
    """
    Collection document model for the metadata collections collection.
    """
    label: str = Field(..., description="Unique collection label")
    description: Optional[str] = Field(None, description="Optional description")
    collection_name: str = Field(..., description="Collection name in both databases")
    database_id: str = Field(..., description="Owning database ID")
    last_sync_at: Optional[datetime] = Field(None, description="Last successful sync")
    created_at: datetime = Field(..., description="Record creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")
