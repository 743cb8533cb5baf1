"""
Database model for the metadata database.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from dbsync.models.base import MongoRecord


class DatabaseRecord(MongoRecord):
    """
    Database document model for the metadata databases collection.
    """
    label: str = Field(..., description="Database label")
    description: Optional[str] = Field(None, description="Optional description")
    db_name: str = Field(..., description="Name of the remote (source) database")
    target_db_name: Optional[str] = Field(
        None,
        description="Name of the local database; defaults to db_name"
    )
    connection_id: str = Field(..., description="Owning connection ID")
    last_sync_at: Optional[datetime] = Field(None, description="Last database-wide sync")
    created_at: datetime = Field(..., description="Record creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @property
    def destination_db_name(self) -> str:
        """Local database the remote one syncs into."""
        return self.target_db_name or self.db_name
